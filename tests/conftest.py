"""Shared fixtures for building Pandoc JSON documents in tests."""

from __future__ import annotations

import typing as typ

import pytest

Node = dict[str, typ.Any]


class PandocNodes:
    """Small builders for Pandoc JSON AST nodes."""

    api_version: typ.ClassVar[list[int]] = [1, 23, 1]

    @staticmethod
    def attr(
        classes: typ.Sequence[str] = (),
        attributes: typ.Mapping[str, str] | None = None,
        identifier: str = "",
    ) -> list[typ.Any]:
        pairs = [[key, value] for key, value in (attributes or {}).items()]
        return [identifier, list(classes), pairs]

    @staticmethod
    def inlines(text: str) -> list[Node]:
        nodes: list[Node] = []
        for index, word in enumerate(text.split(" ")):
            if index:
                nodes.append({"t": "Space"})
            nodes.append({"t": "Str", "c": word})
        return nodes

    def para(self, text: str) -> Node:
        return {"t": "Para", "c": self.inlines(text)}

    def header(self, level: int, text: str) -> Node:
        return {"t": "Header", "c": [level, self.attr(), self.inlines(text)]}

    @staticmethod
    def rule() -> Node:
        return {"t": "HorizontalRule"}

    def div(
        self, classes: typ.Sequence[str], blocks: list[Node], **attributes: str
    ) -> Node:
        return {"t": "Div", "c": [self.attr(classes, attributes), blocks]}

    def span(self, classes: typ.Sequence[str], text: str, **attributes: str) -> Node:
        return {"t": "Span", "c": [self.attr(classes, attributes), self.inlines(text)]}

    def code_block(
        self, code: str, classes: typ.Sequence[str] = (), **attributes: str
    ) -> Node:
        return {"t": "CodeBlock", "c": [self.attr(classes, attributes), code]}

    def document(self, blocks: list[Node], meta: Node | None = None) -> Node:
        return {
            "pandoc-api-version": self.api_version,
            "meta": meta or {},
            "blocks": blocks,
        }

    @staticmethod
    def meta_map(entries: typ.Mapping[str, typ.Any]) -> Node:
        def convert(value: typ.Any) -> Node:
            match value:
                case bool():
                    return {"t": "MetaBool", "c": value}
                case str():
                    return {"t": "MetaString", "c": value}
                case dict():
                    return {
                        "t": "MetaMap",
                        "c": {key: convert(entry) for key, entry in value.items()},
                    }
                case _:
                    return {"t": "MetaList", "c": [convert(entry) for entry in value]}

        return {key: convert(value) for key, value in entries.items()}


@pytest.fixture
def pandoc() -> PandocNodes:
    """Return Pandoc AST node builders."""
    return PandocNodes()
