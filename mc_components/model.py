"""Document tree and record types shared by the transformation pipeline.

Host adapters (Pandoc JSON, Python-Markdown element trees) translate their
native nodes into :class:`Element` values; the rewrite driver replaces matched
elements with ``RAW`` elements carrying backend instructions; extractors turn
component containers into :class:`CardRecord` and :class:`EventRecord` values.

Example
-------
>>> from mc_components.model import Element, ElementKind, stringify
>>> para = Element(
...     ElementKind.CONTAINER,
...     "para",
...     block=True,
...     children=(Element(ElementKind.LEAF, "text", text="Hello"),),
... )
>>> stringify(para)
'Hello'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class ComponentError(ValueError):
    """Base class for errors raised while transforming components."""


class StructuralError(ComponentError):
    """Raised when a host node lacks the structure its type presupposes."""


class ElementKind(enum.Enum):
    """Kinds of nodes the pipeline distinguishes."""

    CONTAINER = "container"
    INLINE = "inline"
    LEAF = "leaf"
    RAW = "raw"


class Placement(enum.Enum):
    """Where a generated instruction may be substituted."""

    BLOCK = "block"
    INLINE = "inline"


class CardStyle(enum.Enum):
    """Visual variants accepted by card components."""

    SUBTLE = "subtle"
    OUTLINED = "outlined"
    FILLED = "filled"


class Orientation(enum.Enum):
    """Layout direction of a timeline."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


AttributeValue = str | bool


@dc.dataclass(frozen=True, slots=True)
class Element:
    """A document node as seen by the rewrite driver.

    Attributes
    ----------
    kind : ElementKind
        Container, inline, leaf text, or raw instruction.
    tag : str
        Normalised host node type (``"div"``, ``"span"``, ``"heading"``,
        ``"rule"``, ``"para"``, ``"text"``, ``"code"``, ...).
    block : bool
        ``True`` for block-level nodes, ``False`` for text-flow nodes.
    classes : tuple[str, ...]
        Class labels in declaration order.
    attributes : Mapping[str, str | bool]
        Key/value attributes in declaration order.
    children : tuple[Element, ...]
        Ordered child nodes.
    text : str
        Literal text for leaves and raw instructions.
    level : int
        Heading level; ``0`` for every other node.
    identifier : str
        Host identifier (``id``), possibly empty.
    raw_format : str or None
        Output format of a ``RAW`` element.
    source : object
        Opaque reference to the host node this element was built from.
    """

    kind: ElementKind
    tag: str
    block: bool = False
    classes: tuple[str, ...] = ()
    attributes: typ.Mapping[str, AttributeValue] = dc.field(default_factory=dict)
    children: tuple[Element, ...] = ()
    text: str = ""
    level: int = 0
    identifier: str = ""
    raw_format: str | None = None
    source: object = dc.field(default=None, compare=False, repr=False)

    def has_class(self, name: str) -> bool:
        """Return ``True`` when ``name`` is one of the element's class labels."""
        return name in self.classes

    def attribute(self, key: str, default: str = "") -> str:
        """Return an attribute as text, rendering booleans as ``true``/``false``."""
        value = self.attributes.get(key)
        match value:
            case None:
                return default
            case bool():
                return "true" if value else "false"
            case _:
                return str(value)

    def with_children(self, children: typ.Iterable[Element]) -> Element:
        """Return a copy of the element holding ``children``."""
        return dc.replace(self, children=tuple(children))

    @property
    def is_heading(self) -> bool:
        return self.tag == "heading"

    @property
    def is_rule(self) -> bool:
        return self.tag == "rule"


@dc.dataclass(frozen=True, slots=True)
class Instruction:
    """Backend-native code that replaces a matched element."""

    code: str
    placement: Placement
    raw_format: str

    def to_element(self) -> Element:
        """Wrap the instruction in a ``RAW`` element for substitution."""
        return Element(
            ElementKind.RAW,
            "raw",
            block=self.placement is Placement.BLOCK,
            text=self.code,
            raw_format=self.raw_format,
        )


@dc.dataclass(frozen=True, slots=True)
class Wrap:
    """Opening and closing markers placed around untouched child content."""

    open: str
    close: str


@dc.dataclass(frozen=True, slots=True)
class CardRecord:
    """Data extracted from a single ``card`` container."""

    title: str | None = None
    content: str | None = None
    footer: str | None = None
    style: CardStyle | None = None
    colour: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.content or self.footer)


@dc.dataclass(frozen=True, slots=True)
class CardGrid:
    """Cards collected from a ``card-grid`` container."""

    cards: tuple[CardRecord, ...]
    columns: int


@dc.dataclass(frozen=True, slots=True)
class EventRecord:
    """A single timeline entry."""

    date: str = ""
    title: str = ""
    description: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.date or self.title)


@dc.dataclass(frozen=True, slots=True)
class Timeline:
    """Events collected from a ``timeline`` container."""

    events: tuple[EventRecord, ...]
    orientation: Orientation


def text_leaf(text: str, *, source: object = None) -> Element:
    """Return a leaf element holding plain ``text``."""
    return Element(ElementKind.LEAF, "text", text=text, source=source)


def stringify(nodes: Element | typ.Iterable[Element]) -> str:
    """Flatten an element (or a sequence of siblings) to plain text.

    Raw instructions contribute nothing. Block-level siblings are separated by
    a blank line; inline siblings are concatenated.
    """
    if isinstance(nodes, Element):
        return _stringify_element(nodes).strip()
    return _join(tuple(nodes)).strip()


def _stringify_element(element: Element) -> str:
    match element.kind:
        case ElementKind.RAW:
            return ""
        case ElementKind.LEAF:
            return element.text
        case _:
            return _join(element.children)


def _join(nodes: tuple[Element, ...]) -> str:
    if nodes and all(node.block for node in nodes):
        parts = (_stringify_element(node).strip() for node in nodes)
        return "\n\n".join(part for part in parts if part)
    return "".join(_stringify_element(node) for node in nodes)


__all__ = [
    "AttributeValue",
    "CardGrid",
    "CardRecord",
    "CardStyle",
    "ComponentError",
    "Element",
    "ElementKind",
    "EventRecord",
    "Instruction",
    "Orientation",
    "Placement",
    "StructuralError",
    "Timeline",
    "Wrap",
    "stringify",
    "text_leaf",
]
