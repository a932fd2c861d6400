"""Cyclopts CLI entrypoint for rendering semantic document components.

The ``mc-components`` console script runs the component pass as a Pandoc JSON
filter, renders Markdown files to HTML with the components expanded, and
prints the effective class-to-function mapping table. ``mc-components-filter``
is the same filter packaged as a standalone executable so it can be passed to
``pandoc --filter``, which invokes filters with the output format as their
only argument.

Examples
--------
Filter a Pandoc document for Typst output:

>>> from mc_components.cli import app
>>> app(["filter", "typst"])  # doctest: +SKIP

Render a Markdown file to an HTML page:

>>> app(["render", "report.md", "--output", "report.html"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from ._constants import META_KEY
from .adapters.pandoc import filter_json
from .config import ExtensionConfig, load_extension_config
from .model import ComponentError
from .registry import builtin_mappings, merge_mappings
from .renderer import DocumentRenderer

logger = logging.getLogger(__name__)

app = App(
    name="mc-components",
    config=cyclopts.config.Env("MC_COMPONENTS_", command=False),  # type: ignore[unknown-argument]
)


def _configure_logging(*, verbose: bool) -> None:
    """Send debug output to stderr; stdout carries documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path | None) -> ExtensionConfig | None:
    if path is None:
        return None
    logger.debug("loading component mappings from %s", path)
    return load_extension_config(path)


def _fail(exc: Exception) -> typ.NoReturn:
    """Report ``exc`` on stderr and exit with status 1."""
    print(f"mc-components: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


ConfigOption = typ.Annotated[
    Path | None,
    Parameter(
        help="YAML file with component mappings", env_var="MC_COMPONENTS_CONFIG"
    ),
]
VerboseOption = typ.Annotated[
    bool, Parameter(help="Log component decisions to stderr")
]


@app.command(name="filter", help="Run as a Pandoc JSON filter (stdin to stdout).")
def filter_command(
    format_name: typ.Annotated[
        str | None,
        Parameter(name="format", help="Output format passed by Pandoc"),
    ] = None,
    *,
    to: typ.Annotated[
        str | None, Parameter(help="Output format when not given positionally")
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Rewrite a Pandoc JSON document read from stdin.

    Parameters
    ----------
    format_name : str or None, optional
        Output format (``typst``, ``html``, ``revealjs``, ...); Pandoc passes
        it as the first argument when running filters.
    to : str or None, optional
        Alternative spelling of the output format for manual invocation.
    config : Path or None, optional
        YAML mappings overridden by the document's ``mc-components`` metadata.
    verbose : bool, optional
        Emit debug logging on stderr.

    Returns
    -------
    None
        Writes the filtered JSON document to stdout.
    """
    _configure_logging(verbose=verbose)
    target = format_name or to
    try:
        output = filter_json(sys.stdin.read(), target, _load_config(config))
    except (ComponentError, FileNotFoundError) as exc:
        _fail(exc)
    sys.stdout.write(output)


@app.command(help="Render a Markdown file with components to HTML.")
def render(
    source: typ.Annotated[Path, Parameter(help="Markdown file to render")],
    *,
    to: typ.Annotated[
        str, Parameter(help="Output format: html or revealjs")
    ] = "html",
    output: typ.Annotated[
        Path | None, Parameter(help="Write the page here instead of stdout")
    ] = None,
    fragment: typ.Annotated[
        bool, Parameter(help="Emit the HTML body only, without the page shell")
    ] = False,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render ``source`` to HTML, expanding components and highlighting code."""
    _configure_logging(verbose=verbose)
    try:
        text = source.read_text(encoding="utf-8")
        renderer = DocumentRenderer(_load_config(config), format_name=to)
        html = renderer.markdown(text) if fragment else renderer.page(text)
    except (ComponentError, FileNotFoundError) as exc:
        _fail(exc)
    if output is None:
        sys.stdout.write(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"wrote {output}")


@app.command(help="Print the effective component mapping table as YAML.")
def mappings(*, config: ConfigOption = None) -> None:
    """Print built-in mappings merged with any user mappings from ``config``."""
    try:
        user = _load_config(config) or ExtensionConfig()
    except (ComponentError, FileNotFoundError) as exc:
        _fail(exc)
    merged = merge_mappings(builtin_mappings(), user.mappings)
    table = {
        META_KEY: {
            namespace: {
                name: {"wrapper": entry.wrapper, "arguments": entry.arguments}
                for name, entry in sorted(entries.items())
            }
            for namespace, entries in (("divs", merged.divs), ("spans", merged.spans))
        }
    }
    dumper = YAML(typ="safe")
    dumper.default_flow_style = False
    dumper.dump(table, sys.stdout)


def main() -> None:
    """Invoke the Cyclopts application behind the ``mc-components`` command."""
    app()


def filter_main() -> None:
    """Run the Pandoc filter with the executable's arguments (``pandoc --filter``)."""
    app(["filter", *sys.argv[1:]])


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
