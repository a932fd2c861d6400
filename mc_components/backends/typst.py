"""Typst backend: components become calls to functions defined by the template.

Examples
--------
>>> from mc_components.backends.typst import build_function_call
>>> build_function_call("mc-badge", "Done", {}, should_pass=False)
'#mc-badge[Done]'
>>> build_function_call("mc-badge", "Done", {"colour": "success"}, should_pass=True)
'#mc-badge(colour: "success")[Done]'
"""

from __future__ import annotations

import re
import typing as typ

from mc_components._constants import RAW_TYPST
from mc_components.codec import (
    escape_typst_markup,
    typst_argument,
    typst_literal,
    typst_string,
)
from mc_components.model import Wrap

from .base import Attributes, Backend, BackendKind, should_pass_args

if typ.TYPE_CHECKING:
    from mc_components.config.models import ComponentConfig
    from mc_components.model import CardGrid, CardRecord, EventRecord, Timeline
    from mc_components.registry import ResolvedComponent

BACKTICK_RUN = re.compile(r"`+")


def build_arguments(attributes: Attributes) -> str:
    """Serialise attributes as comma-separated Typst named arguments."""
    return ", ".join(
        f"{key}: {typst_argument(key, value)}" for key, value in attributes.items()
    )


def build_wrapper(config: ComponentConfig, attributes: Attributes) -> Wrap:
    """Return ``#name(args)[`` and ``]`` markers around threaded content."""
    if should_pass_args(config, attributes):
        opening = f"#{config.wrapper}({build_arguments(attributes)})["
    else:
        opening = f"#{config.wrapper}["
    return Wrap(open=opening, close="]")


def build_function_call(
    name: str, content: str, attributes: Attributes, *, should_pass: bool
) -> str:
    """Return an inline call whose content block holds escaped ``content``."""
    body = f"[{escape_typst_markup(content)}]"
    if should_pass:
        return f"#{name}({build_arguments(attributes)}){body}"
    return f"#{name}{body}"


def build_atomic_call(name: str, attributes: Attributes) -> str:
    """Return a call carrying attributes only (no content block)."""
    return f"#{name}({build_arguments(attributes)})"


def _array(items: list[str]) -> str:
    """Join tuple literals into a Typst array; single items need a trailing comma."""
    joined = ",\n    ".join(items)
    if len(items) == 1:
        joined += ","
    return f"({joined})"


def _card_literal(card: CardRecord) -> str:
    parts: list[str] = []
    if card.title:
        parts.append(f"title: {typst_string(card.title)}")
    if card.content:
        parts.append(f"content: {typst_string(card.content)}")
    if card.footer:
        parts.append(f"footer: {typst_string(card.footer)}")
    if card.style:
        parts.append(f"style: {typst_string(card.style.value)}")
    if card.colour:
        parts.append(f"colour: {typst_literal(card.colour)}")
    return f"({', '.join(parts)})"


def _event_literal(event: EventRecord) -> str:
    parts = [
        f"date: {typst_string(event.date)}",
        f"title: {typst_string(event.title)}",
    ]
    if event.description:
        parts.append(f"description: {typst_string(event.description)}")
    return f"({', '.join(parts)})"


class TypstBackend(Backend):
    """Emit ``#function(...)`` calls for the Typst template partials."""

    kind = BackendKind.TYPST
    raw_format = RAW_TYPST

    def wrapper(self, component: ResolvedComponent, attributes: Attributes) -> Wrap:
        return build_wrapper(component.config, attributes)

    def function_call(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        return build_function_call(
            component.config.wrapper,
            content,
            attributes,
            should_pass=should_pass_args(component.config, attributes),
        )

    def badge(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        return self.function_call(component, content, attributes)

    def value_box(self, component: ResolvedComponent, attributes: Attributes) -> str:
        return build_atomic_call(component.config.wrapper, attributes)

    def progress(self, component: ResolvedComponent, attributes: Attributes) -> str:
        return build_atomic_call(component.config.wrapper, attributes)

    def divider(
        self, component: ResolvedComponent, attributes: Attributes, label: str
    ) -> Wrap:
        return build_wrapper(component.config, attributes)

    def card_grid(self, component: ResolvedComponent, grid: CardGrid) -> str:
        cards = _array([_card_literal(card) for card in grid.cards])
        return (
            f"#{component.config.wrapper}(\n"
            f"  {cards},\n"
            f"  columns: {grid.columns}\n"
            ")"
        )

    def timeline(self, component: ResolvedComponent, timeline: Timeline) -> str:
        events = _array([_event_literal(event) for event in timeline.events])
        return f"#{component.config.wrapper}(\n  {events}\n)"

    def code_window(
        self, wrapper: str, code: str, language: str, filename: str, *, is_auto: bool
    ) -> str:
        longest = max((len(run) for run in BACKTICK_RUN.findall(code)), default=0)
        fence = "`" * max(3, longest + 1)
        auto = "true" if is_auto else "false"
        return (
            f"#{wrapper}(filename: {typst_string(filename)}, is-auto: {auto})"
            f"[{fence}{language}\n{code}\n{fence}]"
        )


__all__ = [
    "TypstBackend",
    "build_arguments",
    "build_atomic_call",
    "build_function_call",
    "build_wrapper",
]
