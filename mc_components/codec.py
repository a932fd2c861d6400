"""Convert scalar values into backend literal syntax with per-backend escaping.

Typst strings escape only backslashes and double quotes; Typst content blocks
escape markup characters; HTML escapes ``& < > " '`` for both text and
attribute values.

Examples
--------
>>> from mc_components.codec import escape_html, typst_string, typst_literal
>>> typst_string('say "hi"')
'"say \\\\"hi\\\\""'
>>> typst_literal("#ff6600")
'rgb("#ff6600")'
>>> escape_html("<b>'&'</b>")
'&lt;b&gt;&#39;&amp;&#39;&lt;/b&gt;'
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

if typ.TYPE_CHECKING:
    from .backends.base import BackendKind

TYPST_KEYWORDS = frozenset(
    {
        "auto",
        "none",
        "black",
        "gray",
        "silver",
        "white",
        "navy",
        "blue",
        "aqua",
        "teal",
        "eastern",
        "purple",
        "fuchsia",
        "maroon",
        "red",
        "orange",
        "yellow",
        "olive",
        "green",
        "lime",
    }
)
TYPST_BOOLEANS = frozenset({"true", "false"})
COLOUR_KEYS = frozenset({"colour", "color"})
TYPST_MARKUP_PATTERN = re.compile(r"([\\#\[\]*_`$<>@~/])")
# Headings, list items and enumerations open with these at the start of a line.
TYPST_LINE_MARKUP_PATTERN = re.compile(r"^([ \t]*)([=+-])", re.MULTILINE)
TYPST_UNESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
CUSTOM_COLOUR_PATTERN = re.compile(r"^(?:#|rgb|hsl)", re.IGNORECASE)

COLOUR_MODIFIERS = frozenset(
    {
        "info",
        "success",
        "warning",
        "danger",
        "caution",
        "neutral",
        "subtle",
        "emphasis",
        "accent",
        "outline",
    }
)
ICON_SHORTCUTS = {"up": "↑", "down": "↓", "stable": "—"}


def escape_typst_string(text: str) -> str:
    """Escape backslashes and double quotes for a Typst string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def unescape_typst_string(text: str) -> str:
    """Reverse :func:`escape_typst_string`."""
    return TYPST_UNESCAPE_PATTERN.sub(r"\1", text)


def typst_string(text: str) -> str:
    """Return ``text`` as a quoted Typst string literal."""
    return f'"{escape_typst_string(text)}"'


def escape_typst_markup(text: str) -> str:
    """Backslash-escape characters that carry meaning in Typst markup.

    Inline syntax is escaped anywhere; heading and list markers only where
    they open a line.
    """
    escaped = TYPST_MARKUP_PATTERN.sub(r"\\\1", text)
    return TYPST_LINE_MARKUP_PATTERN.sub(r"\1\\\2", escaped)


def typst_literal(value: str | bool | int) -> str:
    """Convert an attribute value into a Typst expression.

    Booleans (and the strings ``true``/``false``) and integers pass through
    verbatim, hex colours become ``rgb("...")`` calls, Typst keywords such as
    named colours stay bare identifiers, and everything else is quoted.
    Numeric-looking strings remain quoted; the Typst side coerces them.
    """
    match value:
        case bool():
            return "true" if value else "false"
        case int():
            return str(value)
        case str() if value in TYPST_BOOLEANS or value in TYPST_KEYWORDS:
            return value
        case str() if value.startswith("#"):
            return f"rgb({typst_string(value)})"
        case _:
            return typst_string(str(value))


def typst_argument(key: str, value: str | bool | int) -> str:
    """Convert the value of named argument ``key`` into a Typst expression.

    Only colour arguments get the colour and keyword treatment of
    :func:`typst_literal`. Other strings are quoted unless they spell a
    boolean, so ``"#1 priority"`` and ``"none"`` stay text.

    Examples
    --------
    >>> typst_argument("colour", "#336699")
    'rgb("#336699")'
    >>> typst_argument("label", "none")
    '"none"'
    """
    if key not in COLOUR_KEYS and isinstance(value, str):
        return value if value in TYPST_BOOLEANS else typst_string(value)
    return typst_literal(value)


def escape_html(text: object) -> str:
    """Entity-escape ``& < > " '`` so text is safe in content and attributes."""
    if text is None:
        return ""
    return escape(str(text), quote=True).replace("&#x27;", "&#39;")


def to_target_literal(value: str | bool | int, backend: BackendKind) -> str:
    """Serialise ``value`` with the literal syntax of ``backend``."""
    from .backends.base import BackendKind

    if backend is BackendKind.TYPST:
        return typst_literal(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape_html(value)


def is_custom_colour(colour: str | None) -> bool:
    """Return ``True`` for hex, ``rgb(...)`` and ``hsl(...)`` colour values."""
    if not colour:
        return False
    return CUSTOM_COLOUR_PATTERN.match(colour.strip()) is not None


def colour_modifier(colour: str | None) -> str | None:
    """Map a colour keyword to its CSS modifier, or ``None`` when unknown."""
    if not colour:
        return None
    key = colour.strip().lower()
    return key if key in COLOUR_MODIFIERS else None


def icon_character(icon: str | None) -> str | None:
    """Resolve icon shortcuts (``up``, ``down``, ``stable``) to characters."""
    if not icon:
        return None
    return ICON_SHORTCUTS.get(icon.strip().lower(), icon)


__all__ = [
    "COLOUR_KEYS",
    "COLOUR_MODIFIERS",
    "ICON_SHORTCUTS",
    "TYPST_KEYWORDS",
    "colour_modifier",
    "escape_html",
    "escape_typst_markup",
    "escape_typst_string",
    "icon_character",
    "is_custom_colour",
    "to_target_literal",
    "typst_argument",
    "typst_literal",
    "typst_string",
    "unescape_typst_string",
]
