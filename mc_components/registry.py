"""Resolve semantic class labels to component configurations and handlers.

The built-in table names every class the theme understands. User mappings are
overlaid by key, replacing the built-in entry for that class wholesale. Built-in
classes keep their specialised handler whatever wrapper name the user chooses;
classes only the user declares fall back to the generic wrapper handlers.

Example
-------
>>> from mc_components.model import ElementKind
>>> from mc_components.registry import builtin_mappings, resolve
>>> classes = ("note", "card-grid")
>>> component = resolve(builtin_mappings(), ElementKind.CONTAINER, classes)
>>> component.class_name, component.config.wrapper
('card-grid', 'mc-card-grid')
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

from ._constants import FUNCTION_TEMPLATE
from .config.models import ComponentConfig, ComponentMappings
from .model import ElementKind

logger = logging.getLogger(__name__)


class HandlerKind(enum.Enum):
    """Closed set of component handlers."""

    VALUE_BOX = "value-box"
    PANEL = "panel"
    PROGRESS = "progress"
    DIVIDER = "divider"
    EXECUTIVE_SUMMARY = "executive-summary"
    CARD_GRID = "card-grid"
    TIMELINE = "timeline"
    BADGE = "badge"
    GENERIC = "generic"
    GENERIC_INLINE = "generic-inline"


BUILTIN_DIV_HANDLERS: typ.Mapping[str, HandlerKind] = {
    "value-box": HandlerKind.VALUE_BOX,
    "panel": HandlerKind.PANEL,
    "progress": HandlerKind.PROGRESS,
    "divider": HandlerKind.DIVIDER,
    "executive-summary": HandlerKind.EXECUTIVE_SUMMARY,
    "card-grid": HandlerKind.CARD_GRID,
    "timeline": HandlerKind.TIMELINE,
    "horizontal-timeline": HandlerKind.TIMELINE,
}
BUILTIN_SPAN_HANDLERS: typ.Mapping[str, HandlerKind] = {
    "badge": HandlerKind.BADGE,
}
ARGUMENT_PASSING_CLASSES = frozenset(
    {"value-box", "panel", "progress", "executive-summary"}
)


@dc.dataclass(frozen=True, slots=True)
class ResolvedComponent:
    """A registry hit: the matching class, its config, and its handler."""

    class_name: str
    config: ComponentConfig
    handler: HandlerKind


def builtin_mappings() -> ComponentMappings:
    """Return the built-in mapping table."""
    return ComponentMappings(
        divs={name: _builtin_config(name) for name in BUILTIN_DIV_HANDLERS},
        spans={name: _builtin_config(name) for name in BUILTIN_SPAN_HANDLERS},
    )


def _builtin_config(name: str) -> ComponentConfig:
    return ComponentConfig(
        wrapper=FUNCTION_TEMPLATE.format(name=name),
        arguments=name in ARGUMENT_PASSING_CLASSES,
    )


def merge_mappings(
    base: ComponentMappings, override: ComponentMappings | None
) -> ComponentMappings:
    """Overlay ``override`` entries onto ``base``; overriding entries win whole."""
    return base.merged_with(override)


def handler_for(kind: ElementKind, class_name: str) -> HandlerKind:
    """Return the handler used for ``class_name`` in the namespace of ``kind``."""
    if kind is ElementKind.INLINE:
        return BUILTIN_SPAN_HANDLERS.get(class_name, HandlerKind.GENERIC_INLINE)
    return BUILTIN_DIV_HANDLERS.get(class_name, HandlerKind.GENERIC)


def resolve(
    mappings: ComponentMappings, kind: ElementKind, classes: typ.Iterable[str]
) -> ResolvedComponent | None:
    """Return the first class (in declaration order) with a mapping, if any.

    Parameters
    ----------
    mappings : ComponentMappings
        Merged mapping table for the current document.
    kind : ElementKind
        ``CONTAINER`` consults ``divs``; ``INLINE`` consults ``spans``; other
        kinds never match.
    classes : Iterable[str]
        The element's class labels in declaration order.

    Returns
    -------
    ResolvedComponent or None
        The match, or ``None`` when no label is mapped.
    """
    namespace = mappings.namespace(kind)
    for class_name in classes:
        config = namespace.get(class_name)
        if config is not None:
            handler = handler_for(kind, class_name)
            logger.debug(
                "resolved .%s to %s (%s)", class_name, config.wrapper, handler.value
            )
            return ResolvedComponent(class_name, config, handler)
    return None


__all__ = [
    "BUILTIN_DIV_HANDLERS",
    "BUILTIN_SPAN_HANDLERS",
    "HandlerKind",
    "ResolvedComponent",
    "builtin_mappings",
    "handler_for",
    "merge_mappings",
    "resolve",
]
