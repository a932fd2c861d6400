"""Single top-down pass replacing semantic components with backend output.

Each element is visited once. An element whose classes resolve to a
component is handed to that component's handler and replaced by the result;
any other element passes through with its children visited. ``RAW`` elements
(handler output or raw content already in the document) are never revisited.

Example
-------
>>> from mc_components.driver import build_context, rewrite
>>> from mc_components.model import Element, ElementKind, text_leaf
>>> badge = Element(
...     ElementKind.INLINE, "span", classes=("badge",), children=(text_leaf("Done"),)
... )
>>> context = build_context(None, "typst")
>>> [node.text for node in rewrite([badge], context)]
['#mc-badge[Done]']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from .backends import Backend, active_backend, get_backend
from .config.models import CodeWindowConfig, ComponentMappings, ExtensionConfig
from .handlers import HANDLERS, decorate_code_block
from .model import Element, ElementKind
from .registry import builtin_mappings, merge_mappings, resolve

logger = logging.getLogger(__name__)

COMPONENT_TAGS = frozenset({"div", "span"})


@dc.dataclass(frozen=True, slots=True)
class RewriteContext:
    """Everything one document pass needs, built once before the pass.

    Attributes
    ----------
    mappings : ComponentMappings
        Built-in mappings with the user's entries overlaid.
    backend : Backend
        Strategy serialising records for the document's output format.
    code_window : CodeWindowConfig
        Filename decoration settings for code blocks.
    """

    mappings: ComponentMappings
    backend: Backend
    code_window: CodeWindowConfig = dc.field(default_factory=CodeWindowConfig)


def build_context(
    config: ExtensionConfig | None, format_name: str | None
) -> RewriteContext | None:
    """Return the pass context for ``format_name``, or ``None`` if unsupported."""
    kind = active_backend(format_name)
    if kind is None:
        logger.debug("format %r has no backend; leaving it untouched", format_name)
        return None
    config = config or ExtensionConfig()
    return RewriteContext(
        mappings=merge_mappings(builtin_mappings(), config.mappings),
        backend=get_backend(kind),
        code_window=config.code_window,
    )


def rewrite(elements: typ.Iterable[Element], context: RewriteContext) -> list[Element]:
    """Rewrite a sequence of sibling elements."""
    rewritten: list[Element] = []
    for element in elements:
        rewritten.extend(rewrite_element(element, context))
    return rewritten


def rewrite_element(element: Element, context: RewriteContext) -> list[Element]:
    """Return the zero or more elements that take ``element``'s place."""
    if element.kind is ElementKind.RAW:
        return [element]
    replacement = _replacement(element, context)
    if replacement is None:
        return [_descend(element, context)]

    rewritten: list[Element] = []
    for node in replacement:
        if node.kind is ElementKind.RAW:
            rewritten.append(node)
        elif node is element:
            rewritten.append(_descend(element, context))
        else:
            rewritten.extend(rewrite_element(node, context))
    return rewritten


def _replacement(element: Element, context: RewriteContext) -> list[Element] | None:
    if element.tag in COMPONENT_TAGS:
        component = resolve(context.mappings, element.kind, element.classes)
        if component is None:
            return None
        handler = HANDLERS[component.handler]
        return handler.handle(element, component, context)
    if element.tag == "code" and element.block:
        return decorate_code_block(element, context.code_window, context.backend)
    return None


def _descend(element: Element, context: RewriteContext) -> Element:
    if not element.children:
        return element
    return element.with_children(rewrite(element.children, context))


__all__ = [
    "COMPONENT_TAGS",
    "RewriteContext",
    "build_context",
    "rewrite",
    "rewrite_element",
]
