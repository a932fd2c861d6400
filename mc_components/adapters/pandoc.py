"""Adapter between Pandoc's JSON AST and the pipeline's element tree.

Pandoc nodes are ``{"t": <type>, "c": <content>}`` objects whose content
layout depends on the type. :data:`NODE_SHAPES` records where each container
type keeps its attributes and children; leaves and unknown types are kept as
opaque elements and written back unchanged. Every element keeps a reference to
the node it came from so :func:`to_pandoc` can rebuild it with new children.
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import typing as typ

from mc_components._constants import META_KEY
from mc_components.config import ExtensionConfig, build_extension_config
from mc_components.driver import build_context, rewrite
from mc_components.model import Element, ElementKind, StructuralError, text_leaf

logger = logging.getLogger(__name__)

Node = dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class NodeShape:
    """Where a container node type keeps its parts.

    ``arity`` is ``None`` when the content *is* the child list; otherwise the
    content is a list of ``arity`` slots and the indices point into it.
    """

    tag: str
    kind: ElementKind
    block: bool
    holds_blocks: bool
    arity: int | None = None
    attr_index: int | None = None
    children_index: int | None = None
    level_index: int | None = None


def _inline_shape(tag: str, **slots: int) -> NodeShape:
    return NodeShape(tag, ElementKind.INLINE, block=False, holds_blocks=False, **slots)


NODE_SHAPES: typ.Mapping[str, NodeShape] = {
    "Div": NodeShape(
        "div",
        ElementKind.CONTAINER,
        True,
        True,
        arity=2,
        attr_index=0,
        children_index=1,
    ),
    "Header": NodeShape(
        "heading",
        ElementKind.CONTAINER,
        True,
        False,
        arity=3,
        attr_index=1,
        children_index=2,
        level_index=0,
    ),
    "Figure": NodeShape(
        "figure",
        ElementKind.CONTAINER,
        True,
        True,
        arity=3,
        attr_index=0,
        children_index=2,
    ),
    "Para": NodeShape("para", ElementKind.CONTAINER, True, False),
    "Plain": NodeShape("plain", ElementKind.CONTAINER, True, False),
    "BlockQuote": NodeShape("quote", ElementKind.CONTAINER, True, True),
    "Span": _inline_shape("span", arity=2, attr_index=0, children_index=1),
    "Link": _inline_shape("link", arity=3, attr_index=0, children_index=1),
    "Image": _inline_shape("image", arity=3, attr_index=0, children_index=1),
    "Quoted": _inline_shape("quoted", arity=2, children_index=1),
    "Cite": _inline_shape("cite", arity=2, children_index=1),
    "Emph": _inline_shape("emph"),
    "Underline": _inline_shape("underline"),
    "Strong": _inline_shape("strong"),
    "Strikeout": _inline_shape("strikeout"),
    "Superscript": _inline_shape("superscript"),
    "Subscript": _inline_shape("subscript"),
    "SmallCaps": _inline_shape("smallcaps"),
    "Note": NodeShape("note", ElementKind.INLINE, False, True),
}
WHITESPACE_TEXT = {"Space": " ", "SoftBreak": " ", "LineBreak": "\n"}
LIST_TYPES = frozenset({"BulletList", "OrderedList"})


def _path(parent: str, index: int, node_type: str) -> str:
    return f"{parent}[{index}]:{node_type}"


def _fail(path: str, node_type: str, expected: str) -> typ.NoReturn:
    msg = f"Malformed Pandoc {node_type} node at {path}: expected {expected}."
    raise StructuralError(msg)


def _node_type(node: object, path: str) -> str:
    if not isinstance(node, dict) or not isinstance(node.get("t"), str):
        msg = f"Malformed Pandoc node at {path}: expected an object with a 't' key."
        raise StructuralError(msg)
    return node["t"]


ParsedAttr = tuple[str, tuple[str, ...], dict[str, str]]


def _parse_attr(attr: object, path: str, node_type: str) -> ParsedAttr:
    if not (
        isinstance(attr, list)
        and len(attr) == 3
        and isinstance(attr[0], str)
        and isinstance(attr[1], list)
        and isinstance(attr[2], list)
    ):
        _fail(path, node_type, "an [identifier, classes, attributes] triple")
    identifier, classes, pairs = attr
    attributes: dict[str, str] = {}
    for pair in pairs:
        if not (isinstance(pair, list) and len(pair) == 2):
            _fail(path, node_type, "key/value attribute pairs")
        attributes[str(pair[0])] = str(pair[1])
    return identifier, tuple(str(name) for name in classes), attributes


def plain_text(value: object) -> str:
    """Flatten any Pandoc JSON value to its visible text."""
    match value:
        case {"t": "Str", "c": str() as text}:
            return text
        case {"t": str() as node_type} if node_type in WHITESPACE_TEXT:
            return WHITESPACE_TEXT[node_type]
        case {"t": "Code" | "Math" | "CodeBlock", "c": [_, str() as text]}:
            return text
        case {"t": "RawInline" | "RawBlock"}:
            return ""
        case {"c": content}:
            return plain_text(content)
        case list():
            return "".join(plain_text(item) for item in value)
        case _:
            return ""


def to_element(node: object, path: str, *, block: bool) -> Element:
    """Convert one Pandoc node into an :class:`Element`.

    Parameters
    ----------
    node : object
        Decoded JSON node.
    path : str
        Location of the node, used in error messages.
    block : bool
        Whether the node sits in a block list (``True``) or an inline list.

    Raises
    ------
    StructuralError
        If a known node type does not have the content layout Pandoc uses.
    """
    node_type = _node_type(node, path)
    content = node.get("c")
    shape = NODE_SHAPES.get(node_type)
    if shape is not None:
        return _container(node, node_type, content, shape, path)
    if node_type in LIST_TYPES:
        return _list(node, node_type, content, path)

    match node_type:
        case "Str":
            if not isinstance(content, str):
                _fail(path, node_type, "string content")
            return text_leaf(content, source=node)
        case "Space" | "SoftBreak" | "LineBreak":
            return text_leaf(WHITESPACE_TEXT[node_type], source=node)
        case "HorizontalRule":
            return Element(ElementKind.LEAF, "rule", block=True, source=node)
        case "RawBlock" | "RawInline":
            if not (isinstance(content, list) and len(content) == 2):
                _fail(path, node_type, "a [format, text] pair")
            raw_format, text = content
            return Element(
                ElementKind.RAW,
                "raw",
                block=node_type == "RawBlock",
                text=str(text),
                raw_format=str(raw_format),
                source=node,
            )
        case "Code" | "CodeBlock":
            if not (isinstance(content, list) and len(content) == 2):
                _fail(path, node_type, "an [attr, text] pair")
            identifier, classes, attributes = _parse_attr(content[0], path, node_type)
            return Element(
                ElementKind.LEAF,
                "code",
                block=node_type == "CodeBlock",
                classes=classes,
                attributes=attributes,
                text=str(content[1]),
                identifier=identifier,
                source=node,
            )
        case _:
            return Element(
                ElementKind.LEAF,
                node_type.lower(),
                block=block,
                text=plain_text(content),
                source=node,
            )


def _children(
    items: object, path: str, node_type: str, *, block: bool
) -> tuple[Element, ...]:
    if not isinstance(items, list):
        _fail(path, node_type, "a list of child nodes")
    return tuple(
        to_element(child, _path(path, index, _node_type_or_unknown(child)), block=block)
        for index, child in enumerate(items)
    )


def _node_type_or_unknown(node: object) -> str:
    if isinstance(node, dict) and isinstance(node.get("t"), str):
        return node["t"]
    return "?"


def _container(
    node: Node, node_type: str, content: object, shape: NodeShape, path: str
) -> Element:
    if shape.arity is None:
        children = _children(content, path, node_type, block=shape.holds_blocks)
        return Element(
            shape.kind, shape.tag, block=shape.block, children=children, source=node
        )

    if not (isinstance(content, list) and len(content) == shape.arity):
        _fail(path, node_type, f"content with {shape.arity} slots")
    identifier, classes, attributes = "", (), {}
    if shape.attr_index is not None:
        identifier, classes, attributes = _parse_attr(
            content[shape.attr_index], path, node_type
        )
    level = 0
    if shape.level_index is not None:
        level = content[shape.level_index]
        if not isinstance(level, int):
            _fail(path, node_type, "an integer level")
    children = _children(
        content[shape.children_index], path, node_type, block=shape.holds_blocks
    )
    return Element(
        shape.kind,
        shape.tag,
        block=shape.block,
        classes=classes,
        attributes=attributes,
        children=children,
        level=level,
        identifier=identifier,
        source=node,
    )


def _list(node: Node, node_type: str, content: object, path: str) -> Element:
    items = content
    if node_type == "OrderedList":
        if not (isinstance(content, list) and len(content) == 2):
            _fail(path, node_type, "a [list attributes, items] pair")
        items = content[1]
    if not isinstance(items, list):
        _fail(path, node_type, "a list of items")
    children = tuple(
        Element(
            ElementKind.CONTAINER,
            "item",
            block=True,
            children=_children(item, f"{path}.item[{index}]", node_type, block=True),
        )
        for index, item in enumerate(items)
    )
    return Element(
        ElementKind.CONTAINER, "list", block=True, children=children, source=node
    )


def to_pandoc(element: Element) -> Node:
    """Rebuild the Pandoc node for ``element``."""
    if element.kind is ElementKind.RAW:
        node_type = "RawBlock" if element.block else "RawInline"
        return {"t": node_type, "c": [element.raw_format or "", element.text]}

    node = element.source
    if not isinstance(node, dict):
        return {"t": "Str", "c": element.text}

    node_type = node["t"]
    shape = NODE_SHAPES.get(node_type)
    if shape is not None:
        children = [to_pandoc(child) for child in element.children]
        if shape.arity is None:
            return {"t": node_type, "c": children}
        content = list(node["c"])
        content[shape.children_index] = children
        return {"t": node_type, "c": content}
    if node_type in LIST_TYPES:
        items = [
            [to_pandoc(block) for block in item.children] for item in element.children
        ]
        if node_type == "OrderedList":
            return {"t": node_type, "c": [node["c"][0], items]}
        return {"t": node_type, "c": items}
    return node


def meta_value(value: object) -> object:
    """Convert a Pandoc ``MetaValue`` into plain Python data."""
    match value:
        case {"t": "MetaMap", "c": dict() as entries}:
            return {key: meta_value(entry) for key, entry in entries.items()}
        case {"t": "MetaList", "c": list() as entries}:
            return [meta_value(entry) for entry in entries]
        case {"t": "MetaBool", "c": bool() as flag}:
            return flag
        case {"t": "MetaString", "c": str() as text}:
            return text
        case {"t": "MetaInlines" | "MetaBlocks", "c": content}:
            return plain_text(content).strip()
        case _:
            return value


def filter_document(
    document: Node,
    format_name: str | None,
    file_config: ExtensionConfig | None = None,
) -> Node:
    """Rewrite a decoded Pandoc document for ``format_name``.

    Parameters
    ----------
    document : dict
        Decoded Pandoc JSON (``pandoc-api-version``, ``meta``, ``blocks``).
    format_name : str or None
        Pandoc output format; unsupported formats leave the document as is.
    file_config : ExtensionConfig, optional
        Settings loaded from a YAML file; document metadata overrides them.

    Returns
    -------
    dict
        The document with components replaced by raw backend output.
    """
    if not isinstance(document, dict):
        msg = "Pandoc document must be a JSON object."
        raise StructuralError(msg)
    blocks = document.get("blocks")
    meta = document.get("meta", {})
    if not isinstance(blocks, list) or not isinstance(meta, dict):
        msg = "Pandoc document must have a 'blocks' list and a 'meta' object."
        raise StructuralError(msg)

    section = meta_value(meta.get(META_KEY)) if META_KEY in meta else None
    config = build_extension_config(section, base=file_config)
    context = build_context(config, format_name)
    if context is None:
        return document

    elements = _children(blocks, "blocks", "document", block=True)
    rewritten = rewrite(elements, context)
    logger.debug("rewrote %d top-level blocks for %s", len(blocks), format_name)
    return {**document, "blocks": [to_pandoc(element) for element in rewritten]}


def filter_json(
    text: str, format_name: str | None, file_config: ExtensionConfig | None = None
) -> str:
    """Filter a Pandoc JSON document given and returned as text."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Input is not valid Pandoc JSON: {exc}"
        raise StructuralError(msg) from exc
    return json.dumps(
        filter_document(document, format_name, file_config), ensure_ascii=False
    )


__all__ = [
    "NODE_SHAPES",
    "filter_document",
    "filter_json",
    "meta_value",
    "plain_text",
    "to_element",
    "to_pandoc",
]
