"""Render Markdown documents with components and highlighted code to HTML.

Fenced code is highlighted by ``codehilite``. The language named on each
opening fence is recorded while the source is prepared and written back onto
the highlighted block as ``data-language`` so themes can label it.

Examples
--------
>>> from mc_components.renderer import prepare_source
>>> prepare_source("  ```rust,no_run\\nfn main() {}\\n  ```\\n")
('```rust\\nfn main() {}\\n```\\n', ['rust'])
"""

from __future__ import annotations

import re
import typing as typ
from html import escape
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from .backends.html import TEMPLATES_DIR
from .markdown_ext import ComponentsExtension

if typ.TYPE_CHECKING:
    from .config.models import ExtensionConfig

HIGHLIGHT_CLASS = "codehilite"
DEFAULT_LANGUAGE = "text"
BASE_EXTENSIONS = (
    "fenced_code",
    "codehilite",
    "tables",
    "sane_lists",
    "attr_list",
    "md_in_html",
)
# Up to three spaces of indentation; ``,option`` suffixes such as ``no_run``
# are not understood by fenced_code and are dropped.
FENCE_LINE = re.compile(
    r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<language>[\w+#.-]+)?(?P<info>.*)$"
)
HIGHLIGHT_OPENING = re.compile(rf'<div class="{HIGHLIGHT_CLASS}">')
TITLE_HEADING = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


def prepare_source(text: str) -> tuple[str, list[str]]:
    """Normalise fence lines and list the language of each fenced block.

    Opening and closing fences lose their indentation and option labels so
    ``fenced_code`` recognises them inside list items. Lines inside a block
    are left alone.
    """
    lines: list[str] = []
    languages: list[str] = []
    open_fence: str | None = None
    for line in text.splitlines():
        match = FENCE_LINE.match(line)
        if match is None:
            lines.append(line)
            continue
        fence, language, info = match["fence"], match["language"], match["info"]
        if open_fence is None:
            open_fence = fence
            languages.append(language or DEFAULT_LANGUAGE)
            if info.startswith(","):
                info = ""
            lines.append(f"{fence}{language or ''}{info.rstrip()}")
        elif not language and not info.strip() and fence.startswith(open_fence):
            open_fence = None
            lines.append(fence)
        else:
            lines.append(line)
    prepared = "\n".join(lines)
    if text.endswith("\n"):
        prepared += "\n"
    return prepared, languages


def label_highlighted_blocks(html: str, languages: typ.Sequence[str]) -> str:
    """Add ``data-language`` to highlighted blocks in document order."""
    if not languages:
        return html
    remaining = iter(languages)

    def _label(_match: re.Match[str]) -> str:
        language = escape(next(remaining, DEFAULT_LANGUAGE), quote=True)
        return f'<div class="{HIGHLIGHT_CLASS}" data-language="{language}">'

    return HIGHLIGHT_OPENING.sub(_label, html, count=len(languages))


class DocumentRenderer:
    """Render Markdown with semantic components into an HTML fragment or page."""

    def __init__(
        self,
        config: ExtensionConfig | None = None,
        *,
        format_name: str = "html",
        pygments_style: str = "monokai",
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize a renderer for one output format.

        Parameters
        ----------
        config : ExtensionConfig, optional
            User component mappings; built-in mappings apply when ``None``.
        format_name : str, optional
            ``"html"`` (default) or ``"revealjs"``.
        pygments_style : str, optional
            Pygments style for highlighted code and the page stylesheet.
        templates_dir : Path, optional
            Directory containing ``page.jinja``. Defaults to the package
            templates.
        """
        self.config = config
        self.format_name = format_name
        self.pygments_style = pygments_style
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def stylesheet(self) -> str:
        """Return Pygments CSS scoped to highlighted blocks."""
        formatter = HtmlFormatter(style=self.pygments_style)
        return formatter.get_style_defs(f".{HIGHLIGHT_CLASS}")

    def _converter(self) -> Markdown:
        return Markdown(
            extensions=[
                *BASE_EXTENSIONS,
                ComponentsExtension(self.config, self.format_name),
            ],
            extension_configs={
                "codehilite": {
                    "css_class": HIGHLIGHT_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": self.pygments_style,
                }
            },
        )

    def markdown(self, text: str) -> str:
        """Render Markdown into an HTML fragment."""
        source, languages = prepare_source(text)
        if not source.strip():
            return ""
        html = self._converter().convert(source)
        return label_highlighted_blocks(html, languages)

    def page(self, text: str, *, title: str | None = None) -> str:
        """Render Markdown into a standalone HTML page.

        The title defaults to the document's first level-one heading.
        """
        if title is None:
            heading = TITLE_HEADING.search(text)
            title = heading.group(1) if heading else "Document"
        return self.env.get_template("page.jinja").render(
            title=title,
            body=self.markdown(text),
            stylesheet=self.stylesheet,
            format_name=self.format_name,
        )


__all__ = ["DocumentRenderer", "label_highlighted_blocks", "prepare_source"]
