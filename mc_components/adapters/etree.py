"""Adapter between Python-Markdown's ElementTree and the pipeline's element tree.

Text and tails become text leaves so the driver and extractors see document
order. Raw HTML that Python-Markdown has already stashed (highlighted code,
literal HTML blocks) stays a placeholder string; it is carried through as a
``RAW`` element and written back verbatim.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as etree

from markdown.util import HTML_PLACEHOLDER_RE

from mc_components._constants import RAW_HTML
from mc_components.model import Element, ElementKind, text_leaf

if typ.TYPE_CHECKING:
    from markdown import Markdown

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
RESERVED_ATTRIBUTES = frozenset({"class", "id"})
TEXT_BLOCK_TAGS = frozenset(
    {"p", "pre", "li", "td", "th", "dt", "dd", "summary", *HEADING_TAGS}
)


class StashedHtml:
    """Marks ``RAW`` elements whose text is an existing stash placeholder."""


STASHED = StashedHtml()


def _text_nodes(text: str | None, *, keep_blank: bool = True) -> list[Element]:
    """Split ``text`` into text leaves and stashed-HTML placeholders."""
    if not text or (not keep_blank and not text.strip()):
        return []
    nodes: list[Element] = []
    position = 0
    for match in HTML_PLACEHOLDER_RE.finditer(text):
        if match.start() > position:
            nodes.append(text_leaf(text[position : match.start()]))
        nodes.append(
            Element(
                ElementKind.RAW,
                "raw",
                text=match.group(0),
                raw_format=RAW_HTML,
                source=STASHED,
            )
        )
        position = match.end()
    if position < len(text):
        nodes.append(text_leaf(text[position:]))
    return nodes


def _holds_blocks(node: etree.Element, md: Markdown) -> bool:
    tag = node.tag if isinstance(node.tag, str) else ""
    return md.is_block_level(tag) and tag not in TEXT_BLOCK_TAGS


def _children(node: etree.Element, md: Markdown) -> tuple[Element, ...]:
    # Indentation between block children is not content.
    keep_blank = not _holds_blocks(node, md)
    children = _text_nodes(node.text, keep_blank=keep_blank)
    for child in node:
        children.append(to_element(child, md))
        children.extend(_text_nodes(child.tail, keep_blank=keep_blank))
    return tuple(children)


def to_element(node: etree.Element, md: Markdown) -> Element:
    """Convert an ElementTree node (and its subtree) into an :class:`Element`."""
    tag = node.tag if isinstance(node.tag, str) else ""
    classes = tuple(node.get("class", "").split())
    attributes = {
        key: value
        for key, value in node.attrib.items()
        if key not in RESERVED_ATTRIBUTES
    }
    common = {
        "classes": classes,
        "attributes": attributes,
        "identifier": node.get("id", ""),
        "source": node,
    }
    if tag == "hr":
        return Element(ElementKind.LEAF, "rule", block=True, **common)
    if tag in HEADING_TAGS:
        return Element(
            ElementKind.CONTAINER,
            "heading",
            block=True,
            level=HEADING_TAGS[tag],
            children=_children(node, md),
            **common,
        )
    if tag == "span":
        return Element(
            ElementKind.INLINE, "span", children=_children(node, md), **common
        )
    block = md.is_block_level(tag)
    return Element(
        ElementKind.CONTAINER if block else ElementKind.INLINE,
        "para" if tag == "p" else tag,
        block=block,
        children=_children(node, md),
        **common,
    )


def _append_text(parent: etree.Element, text: str) -> None:
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def append_element(parent: etree.Element, element: Element, md: Markdown) -> None:
    """Append ``element`` to ``parent``, stashing generated HTML in ``md``."""
    if element.kind is ElementKind.RAW:
        placeholder = (
            element.text
            if element.source is STASHED
            else md.htmlStash.store(element.text)
        )
        if element.block:
            etree.SubElement(parent, "p").text = placeholder
        else:
            _append_text(parent, placeholder)
        return

    source = element.source
    if not isinstance(source, etree.Element):
        _append_text(parent, element.text)
        return
    node = etree.SubElement(parent, source.tag, dict(source.attrib))
    for child in element.children:
        append_element(node, child, md)


def replace_children(
    root: etree.Element, children: typ.Iterable[Element], md: Markdown
) -> None:
    """Replace ``root``'s content with ``children`` in place."""
    attributes = dict(root.attrib)
    root.clear()
    root.attrib.update(attributes)
    for child in children:
        append_element(root, child, md)


__all__ = [
    "STASHED",
    "append_element",
    "replace_children",
    "to_element",
]
