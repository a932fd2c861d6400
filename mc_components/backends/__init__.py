"""Output backends and the format dispatcher that picks one per document.

Examples
--------
>>> from mc_components.backends import BackendKind, active_backend
>>> active_backend("html5") is BackendKind.DOM_STANDARD
True
>>> active_backend("docx") is None
True
"""

from __future__ import annotations

from .base import Attributes, Backend, BackendKind, FormatDefaults, should_pass_args
from .html import HtmlBackend, RevealBackend
from .typst import TypstBackend

HTML_FORMATS = frozenset({"html", "html4", "html5"})


def _base_format(format_name: str) -> str:
    """Strip Pandoc extension toggles such as ``html5+smart-raw_html``."""
    for index, char in enumerate(format_name):
        if char in "+-":
            return format_name[:index].strip().lower()
    return format_name.strip().lower()


def active_backend(format_name: str | None) -> BackendKind | None:
    """Return the backend for an output format name, or ``None`` if unsupported."""
    if not format_name:
        return None
    base = _base_format(format_name)
    if base == "typst":
        return BackendKind.TYPST
    if base == "revealjs":
        return BackendKind.DOM_PRESENTATION
    if base in HTML_FORMATS:
        return BackendKind.DOM_STANDARD
    return None


def get_backend(kind: BackendKind) -> Backend:
    """Return a fresh strategy instance for ``kind``."""
    match kind:
        case BackendKind.TYPST:
            return TypstBackend()
        case BackendKind.DOM_PRESENTATION:
            return RevealBackend()
        case BackendKind.DOM_STANDARD:
            return HtmlBackend()


__all__ = [
    "Attributes",
    "Backend",
    "BackendKind",
    "FormatDefaults",
    "HtmlBackend",
    "RevealBackend",
    "TypstBackend",
    "active_backend",
    "get_backend",
    "should_pass_args",
]
