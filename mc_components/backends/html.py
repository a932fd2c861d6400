"""DOM backends rendering components as escaped HTML fragments.

Markup follows BEM naming (``mc-block__element--modifier``) so the theme's
stylesheet, not this module, decides the visual result. Each component has a
Jinja2 template under ``mc_components/templates``; this module computes the
view values (modifiers, custom properties, clamped numbers) the templates
interpolate.

Examples
--------
>>> from mc_components.backends.html import bem_class
>>> bem_class("value-box", "number")
'mc-value-box__number'
>>> bem_class("badge", modifier="success")
'mc-badge--success'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from mc_components._constants import BEM_PREFIX, RAW_HTML
from mc_components.codec import (
    colour_modifier,
    escape_html,
    icon_character,
    is_custom_colour,
)
from mc_components.model import Wrap

from .base import Attributes, Backend, BackendKind, FormatDefaults

if typ.TYPE_CHECKING:
    from mc_components.model import CardGrid, CardRecord, Timeline
    from mc_components.registry import ResolvedComponent

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
REVEAL_DEFAULTS = FormatDefaults(
    class_prefix="reveal-component ", columns=2, progress_height="1.2em"
)


def bem_class(
    block: str, element: str | None = None, modifier: str | None = None
) -> str:
    """Return ``mc-block__element--modifier`` with optional parts omitted."""
    name = f"{BEM_PREFIX}-{block}"
    if element:
        name += f"__{element}"
    if modifier:
        name += f"--{modifier}"
    return name


def build_attributes(attributes: Attributes) -> str:
    """Render attributes as a space-prefixed HTML attribute string.

    ``True`` renders a bare boolean attribute and ``False`` omits the
    attribute; every other value is entity-escaped.
    """
    items: list[str] = []
    for key, value in attributes.items():
        if value is True:
            items.append(key)
        elif value is not False:
            items.append(f'{key}="{escape_html(value)}"')
    return "".join(f" {item}" for item in items)


def data_attributes(attributes: Attributes) -> dict[str, str | bool]:
    """Prefix component attributes with ``data-`` for generic wrappers."""
    return {f"data-{key}": value for key, value in attributes.items()}


def _text(attributes: Attributes, *keys: str, default: str = "") -> str:
    for key in keys:
        value = attributes.get(key)
        if value is None or value is False:
            continue
        text = "true" if value is True else str(value).strip()
        if text:
            return text
    return default


@dc.dataclass(frozen=True, slots=True)
class ColourView:
    """A colour resolved to a BEM modifier plus an optional custom property."""

    modifier: str
    custom: str | None = None


def resolve_colour(colour: str) -> ColourView:
    """Map a colour to a modifier; hex/rgb/hsl values become ``custom``."""
    if is_custom_colour(colour):
        return ColourView(modifier="custom", custom=colour)
    return ColourView(modifier=colour_modifier(colour) or colour)


def parse_progress_value(raw: str) -> int:
    """Return ``raw`` as a whole percentage clamped to ``0..100``."""
    try:
        value = int(float(raw))
    except (ValueError, OverflowError):
        logger.debug("ignoring non-numeric progress value %r; using 0", raw)
        return 0
    return min(100, max(0, value))


@dc.dataclass(frozen=True, slots=True)
class CardView:
    """Template-ready card with its computed class list."""

    classes: str
    custom_colour: str | None
    title: str | None
    paragraphs: tuple[str, ...]
    footer: str | None


def _card_view(card: CardRecord) -> CardView:
    classes = [bem_class("card")]
    if card.style:
        classes.append(bem_class("card", modifier=card.style.value))
    custom = None
    if card.colour:
        colour = resolve_colour(card.colour)
        classes.append(bem_class("card", modifier=colour.modifier))
        custom = colour.custom
    paragraphs = tuple(card.content.split("\n\n")) if card.content else ()
    return CardView(
        classes=" ".join(classes),
        custom_colour=custom,
        title=card.title,
        paragraphs=paragraphs,
        footer=card.footer,
    )


class HtmlBackend(Backend):
    """Render components as HTML for standard web pages."""

    kind = BackendKind.DOM_STANDARD
    raw_format = RAW_HTML

    def __init__(
        self,
        defaults: FormatDefaults | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the backend and its Jinja environment.

        Parameters
        ----------
        defaults : FormatDefaults, optional
            Class prefix, column count and progress height defaults.
        templates_dir : Path, optional
            Directory containing the component templates. Defaults to the
            ``mc_components/templates`` directory when ``None``.
        """
        super().__init__(defaults)
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["esc"] = escape_html
        self.env.filters["attrs"] = build_attributes
        self.env.globals["bem"] = bem_class

    def _render(self, template_name: str, **context: object) -> str:
        template = self.env.get_template(template_name)
        return template.render(prefix=self.defaults.class_prefix, **context).strip()

    def _open_div(self, class_name: str, attributes: Attributes) -> str:
        classes = f"{self.defaults.class_prefix}{bem_class(class_name)}"
        return f'<div class="{classes}"{build_attributes(data_attributes(attributes))}>'

    def wrapper(self, component: ResolvedComponent, attributes: Attributes) -> Wrap:
        opening = self._open_div(component.class_name, attributes)
        return Wrap(open=opening, close="</div>")

    def function_call(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        attrs = build_attributes(data_attributes(attributes))
        return (
            f'<span class="{bem_class(component.class_name)}"{attrs}>'
            f"{escape_html(content)}</span>"
        )

    def badge(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        colour = _text(attributes, "colour", "color", default="neutral")
        icon = _text(attributes, "icon")
        return self._render(
            "badge.jinja",
            text=content or _text(attributes, "text"),
            modifier=colour_modifier(colour) or colour,
            icon=icon_character(icon),
        )

    def value_box(self, component: ResolvedComponent, attributes: Attributes) -> str:
        value = _text(attributes, "value", default="0")
        unit = _text(attributes, "unit")
        label = _text(attributes, "label")
        colour = resolve_colour(_text(attributes, "colour", "color", default="info"))
        return self._render(
            "value_box.jinja",
            value=value,
            unit=unit,
            label=label,
            icon=icon_character(_text(attributes, "icon")),
            colour=colour,
            aria_label=f"{label}: {value}{unit}",
        )

    def progress(self, component: ResolvedComponent, attributes: Attributes) -> str:
        return self._render(
            "progress.jinja",
            value=parse_progress_value(_text(attributes, "value", default="0")),
            label=_text(attributes, "label"),
            colour=resolve_colour(_text(attributes, "colour", "color", default="info")),
            show_value=_text(attributes, "show-value") != "false",
            height=_text(attributes, "height", default=self.defaults.progress_height),
        )

    def divider(
        self, component: ResolvedComponent, attributes: Attributes, label: str
    ) -> str:
        return self._render(
            "divider.jinja",
            style=_text(attributes, "style", default="solid"),
            label=_text(attributes, "label") or label,
            thickness=_text(attributes, "thickness", default="1pt"),
            width=_text(attributes, "width", default="50%"),
        )

    def card_grid(self, component: ResolvedComponent, grid: CardGrid) -> str:
        return self._render(
            "card_grid.jinja",
            columns=grid.columns,
            cards=[_card_view(card) for card in grid.cards],
        )

    def timeline(self, component: ResolvedComponent, timeline: Timeline) -> str:
        return self._render(
            "timeline.jinja",
            orientation=timeline.orientation.value,
            events=timeline.events,
        )

    def code_window(
        self, wrapper: str, code: str, language: str, filename: str, *, is_auto: bool
    ) -> Wrap | None:
        # Explicit filenames are decorated by the host's own HTML writer.
        if not is_auto:
            return None
        opening = self._render("code_window.jinja", filename=filename)
        return Wrap(open=opening, close="</div>")


class RevealBackend(HtmlBackend):
    """HTML backend tuned for Reveal.js slides (prefixed classes, fewer columns)."""

    kind = BackendKind.DOM_PRESENTATION

    def __init__(
        self,
        defaults: FormatDefaults | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        super().__init__(defaults or REVEAL_DEFAULTS, templates_dir=templates_dir)


__all__ = [
    "REVEAL_DEFAULTS",
    "TEMPLATES_DIR",
    "HtmlBackend",
    "RevealBackend",
    "bem_class",
    "build_attributes",
    "data_attributes",
    "parse_progress_value",
    "resolve_colour",
]
