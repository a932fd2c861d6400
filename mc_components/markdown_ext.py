"""Python-Markdown extension rendering semantic components to HTML.

Containers are written with ``md_in_html`` so their bodies stay Markdown::

    <div class="card-grid" columns="2" markdown="1">
    <div class="card" markdown="1">
    ### Revenue
    Up 12% on last quarter.
    </div>
    </div>

Inline components use Pandoc's bracketed span syntax, for example
``[Shipped]{.badge colour="success"}``.
"""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor

from .adapters.etree import replace_children, to_element
from .backends import BackendKind
from .driver import RewriteContext, build_context, rewrite
from .model import ComponentError

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from .config.models import ExtensionConfig
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any

BRACKETED_SPAN_PATTERN = r"\[([^\[\]]+)\]\{([^{}]*)\}"
ATTRIBUTE_TOKEN = re.compile(
    r"""\.(?P<cls>[\w-]+)
      | \#(?P<id>[\w-]+)
      | (?P<key>[\w-]+)=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"']+))""",
    re.VERBOSE,
)


def parse_attribute_block(text: str) -> dict[str, str]:
    """Parse ``.class #id key="value"`` tokens into HTML attributes.

    Examples
    --------
    >>> parse_attribute_block('.badge colour="success"')
    {'colour': 'success', 'class': 'badge'}
    """
    attributes: dict[str, str] = {}
    classes: list[str] = []
    for match in ATTRIBUTE_TOKEN.finditer(text):
        if match.group("cls"):
            classes.append(match.group("cls"))
        elif match.group("id"):
            attributes["id"] = match.group("id")
        else:
            value = next(
                (
                    group
                    for group in (match.group("dq"), match.group("sq"))
                    if group is not None
                ),
                match.group("bare") or "",
            )
            attributes[match.group("key")] = value
    if classes:
        attributes["class"] = " ".join(classes)
    return attributes


class BracketedSpanInlineProcessor(InlineProcessor):
    """Turn ``[text]{.class key=value}`` into a ``<span>`` element."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        span = etree.Element("span", parse_attribute_block(m.group(2)))
        span.text = m.group(1)
        return span, m.start(0), m.end(0)


class ComponentsTreeprocessor(Treeprocessor):
    """Rewrite component ``div``/``span`` elements into rendered HTML."""

    def __init__(self, md: Markdown, context: RewriteContext) -> None:
        super().__init__(md)
        self.context = context

    def run(self, root: etree.Element) -> etree.Element:
        """Replace the tree's components with stashed backend HTML."""
        document = to_element(root, self.md)
        rewritten = rewrite(document.children, self.context)
        replace_children(root, rewritten, self.md)
        return root


class ComponentsExtension(Extension):
    """Render ``card-grid``, ``timeline``, ``badge`` and friends as HTML.

    Parameters
    ----------
    config : ExtensionConfig, optional
        User mappings and code-window settings; built-ins apply when omitted.
    format_name : str
        ``"html"`` for standard pages or ``"revealjs"`` for slides.
    """

    def __init__(
        self, config: ExtensionConfig | None = None, format_name: str = "html"
    ) -> None:
        self.extension_config = config
        self.format_name = format_name

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the span pattern and the component treeprocessor."""
        context = build_context(self.extension_config, self.format_name)
        if context is None or context.backend.kind is BackendKind.TYPST:
            msg = (
                f"Markdown rendering supports HTML output only, not "
                f"{self.format_name!r}."
            )
            raise ComponentError(msg)
        md.inlinePatterns.register(
            BracketedSpanInlineProcessor(BRACKETED_SPAN_PATTERN, md),
            "mc_bracketed_span",
            175,
        )
        md.treeprocessors.register(
            ComponentsTreeprocessor(md, context), "mc_components", 15
        )


__all__ = [
    "BRACKETED_SPAN_PATTERN",
    "BracketedSpanInlineProcessor",
    "ComponentsExtension",
    "ComponentsTreeprocessor",
    "parse_attribute_block",
]
