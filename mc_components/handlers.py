"""Component handlers: extract a record from a matched element, then serialise it.

Every handler returns the elements that replace the matched one. ``RAW``
elements are final output; any other element in the result is document
content the driver still has to visit (the children threaded between a
wrapper's open and close markers). Returning the matched element itself tells
the driver to leave it in place and only descend into its children. An empty
list removes the element.
"""

from __future__ import annotations

import abc
import logging
import typing as typ

from ._constants import HORIZONTAL_TIMELINE_CLASS, TIMELINE_CLASS
from .extractors import extract_card_grid, extract_timeline
from .model import Element, Orientation, Wrap, stringify
from .registry import HandlerKind, ResolvedComponent

if typ.TYPE_CHECKING:
    from .backends.base import Backend
    from .config.models import CodeWindowConfig
    from .driver import RewriteContext
    from .model import CardGrid, Timeline

logger = logging.getLogger(__name__)

Attributes = dict[str, typ.Any]


def _block(backend: Backend, code: str) -> Element:
    return backend.block(code).to_element()


def _inline(backend: Backend, code: str) -> Element:
    return backend.inline(code).to_element()


def _threaded(
    backend: Backend, wrap: Wrap, children: typ.Iterable[Element]
) -> list[Element]:
    return [_block(backend, wrap.open), *children, _block(backend, wrap.close)]


class ComponentHandler(abc.ABC):
    """Base class for the handler of one :class:`HandlerKind`."""

    def handle(
        self, element: Element, component: ResolvedComponent, context: RewriteContext
    ) -> list[Element]:
        """Return the replacement for ``element``; empty when nothing was extracted."""
        record = self.extract(element, context)
        if record is None:
            logger.debug(".%s produced no content; removing it", component.class_name)
            return []
        return self.serialise(element, record, component, context)

    @abc.abstractmethod
    def extract(self, element: Element, context: RewriteContext) -> typ.Any | None:
        """Pull the handler's record out of ``element``."""

    @abc.abstractmethod
    def serialise(
        self,
        element: Element,
        record: typ.Any,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        """Turn ``record`` into replacement elements."""


class AttributeHandler(ComponentHandler):
    """Handlers whose record is simply the element's attribute map."""

    def extract(self, element: Element, context: RewriteContext) -> Attributes:
        return dict(element.attributes)


class WrapperHandler(AttributeHandler):
    """Thread a container's children between open and close markers."""

    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        wrap = context.backend.wrapper(component, record)
        return _threaded(context.backend, wrap, element.children)


class InlineCallHandler(AttributeHandler):
    """Collapse an inline element into one call carrying its text."""

    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        code = context.backend.function_call(component, stringify(element), record)
        return [_inline(context.backend, code)]


class BadgeHandler(AttributeHandler):
    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        code = context.backend.badge(component, stringify(element), record)
        return [_inline(context.backend, code)]


class LabelledAttributeHandler(AttributeHandler):
    """Attribute handler whose element text supplies a missing ``label``."""

    def extract(self, element: Element, context: RewriteContext) -> Attributes:
        attributes = dict(element.attributes)
        text = stringify(element)
        if text and "label" not in attributes:
            attributes["label"] = text
        return attributes


class ValueBoxHandler(LabelledAttributeHandler):
    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        return [_block(context.backend, context.backend.value_box(component, record))]


class ProgressHandler(LabelledAttributeHandler):
    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        return [_block(context.backend, context.backend.progress(component, record))]


class DividerHandler(AttributeHandler):
    """Render a divider; backends that wrap content keep the children."""

    def serialise(
        self,
        element: Element,
        record: Attributes,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        result = context.backend.divider(component, record, stringify(element))
        if isinstance(result, Wrap):
            return _threaded(context.backend, result, element.children)
        return [_block(context.backend, result)]


class CardGridHandler(ComponentHandler):
    def extract(self, element: Element, context: RewriteContext) -> CardGrid | None:
        grid = extract_card_grid(element, context.backend.defaults.columns)
        return grid if grid.cards else None

    def serialise(
        self,
        element: Element,
        record: CardGrid,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        return [_block(context.backend, context.backend.card_grid(component, record))]


class TimelineHandler(ComponentHandler):
    """Timelines route to the mapping entry matching their orientation."""

    def extract(self, element: Element, context: RewriteContext) -> Timeline | None:
        timeline = extract_timeline(element)
        return timeline if timeline.events else None

    def serialise(
        self,
        element: Element,
        record: Timeline,
        component: ResolvedComponent,
        context: RewriteContext,
    ) -> list[Element]:
        target = _timeline_target(component, record.orientation, context)
        return [_block(context.backend, context.backend.timeline(target, record))]


def _timeline_target(
    component: ResolvedComponent, orientation: Orientation, context: RewriteContext
) -> ResolvedComponent:
    name = (
        HORIZONTAL_TIMELINE_CLASS
        if orientation is Orientation.HORIZONTAL
        else TIMELINE_CLASS
    )
    config = context.mappings.divs.get(name)
    if config is None:
        return component
    return ResolvedComponent(name, config, HandlerKind.TIMELINE)


HANDLERS: typ.Mapping[HandlerKind, ComponentHandler] = {
    HandlerKind.VALUE_BOX: ValueBoxHandler(),
    HandlerKind.PANEL: WrapperHandler(),
    HandlerKind.PROGRESS: ProgressHandler(),
    HandlerKind.DIVIDER: DividerHandler(),
    HandlerKind.EXECUTIVE_SUMMARY: WrapperHandler(),
    HandlerKind.CARD_GRID: CardGridHandler(),
    HandlerKind.TIMELINE: TimelineHandler(),
    HandlerKind.BADGE: BadgeHandler(),
    HandlerKind.GENERIC: WrapperHandler(),
    HandlerKind.GENERIC_INLINE: InlineCallHandler(),
}


def decorate_code_block(
    element: Element, settings: CodeWindowConfig, backend: Backend
) -> list[Element] | None:
    """Add a filename window around a code block, or return ``None`` to skip.

    The filename comes from the block's ``filename`` attribute; with
    ``auto-filename`` enabled, blocks without one are labelled with their
    language class instead.
    """
    if not settings.enabled:
        return None
    language = element.classes[0] if element.classes else ""
    filename = element.attribute("filename")
    is_auto = False
    if not filename:
        if not (settings.auto_filename and language):
            return None
        filename, is_auto = language, True
    result = backend.code_window(
        settings.wrapper, element.text, language, filename, is_auto=is_auto
    )
    match result:
        case None:
            return None
        case Wrap():
            return _threaded(backend, result, [element])
        case _:
            return [_block(backend, result)]


__all__ = [
    "HANDLERS",
    "BadgeHandler",
    "CardGridHandler",
    "ComponentHandler",
    "DividerHandler",
    "InlineCallHandler",
    "ProgressHandler",
    "TimelineHandler",
    "ValueBoxHandler",
    "WrapperHandler",
    "decorate_code_block",
]
