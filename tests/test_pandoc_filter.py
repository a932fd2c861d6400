"""Tests for the Pandoc JSON adapter and document filter."""

from __future__ import annotations

import copy
import json
import typing as typ

import pytest

from mc_components.adapters.pandoc import (
    filter_document,
    filter_json,
    meta_value,
    plain_text,
    to_element,
    to_pandoc,
)
from mc_components.config import ComponentConfig, ComponentMappings, ExtensionConfig
from mc_components.model import ElementKind, StructuralError

if typ.TYPE_CHECKING:
    from conftest import PandocNodes


def _raw_blocks(document: dict[str, typ.Any]) -> list[str]:
    return [block["c"][1] for block in document["blocks"] if block["t"] == "RawBlock"]


def test_card_grid_becomes_raw_typst(pandoc: PandocNodes) -> None:
    """A card grid collapses into one raw typst block."""
    grid = pandoc.div(
        ["card-grid"],
        [
            pandoc.div(["card"], [pandoc.header(3, "Title A"), pandoc.para("Body A")]),
            pandoc.div(
                ["card"],
                [pandoc.para("Body B"), pandoc.rule(), pandoc.para("Foot B")],
            ),
        ],
    )
    result = filter_document(pandoc.document([grid]), "typst")
    assert result["blocks"] == [
        {
            "t": "RawBlock",
            "c": [
                "typst",
                "#mc-card-grid(\n"
                '  ((title: "Title A", content: "Body A"),\n'
                '    (content: "Body B", footer: "Foot B")),\n'
                "  columns: 3\n"
                ")",
            ],
        }
    ]


def test_badge_inside_paragraph_becomes_raw_inline(pandoc: PandocNodes) -> None:
    """Inline components are replaced within their paragraph."""
    para = {
        "t": "Para",
        "c": [
            {"t": "Str", "c": "Status:"},
            {"t": "Space"},
            pandoc.span(["badge"], "Done", colour="success"),
        ],
    }
    result = filter_document(pandoc.document([para]), "typst")
    assert result["blocks"] == [
        {
            "t": "Para",
            "c": [
                {"t": "Str", "c": "Status:"},
                {"t": "Space"},
                {
                    "t": "RawInline",
                    "c": ["typst", '#mc-badge(colour: "success")[Done]'],
                },
            ],
        }
    ]


def test_panel_threads_children(pandoc: PandocNodes) -> None:
    """Wrappers surround their untouched children with raw markers."""
    body = pandoc.para("Inside the panel")
    result = filter_document(pandoc.document([pandoc.div(["panel"], [body])]), "typst")
    assert result["blocks"] == [
        {"t": "RawBlock", "c": ["typst", "#mc-panel()["]},
        body,
        {"t": "RawBlock", "c": ["typst", "]"]},
    ]


def test_unsupported_format_returns_document_unchanged(pandoc: PandocNodes) -> None:
    """Formats without a backend pass through untouched."""
    document = pandoc.document([pandoc.div(["value-box"], [], value="1")])
    original = copy.deepcopy(document)
    assert filter_document(document, "docx") == original


def test_metadata_mappings_override_file_config(pandoc: PandocNodes) -> None:
    """Document metadata wins over the YAML configuration."""
    file_config = ExtensionConfig(
        mappings=ComponentMappings(
            divs={"callout-box": ComponentConfig("file-callout", arguments=True)}
        )
    )
    meta = pandoc.meta_map(
        {"mc-components": {"divs": {"callout-box": {"wrapper": "meta-callout"}}}}
    )
    document = pandoc.document(
        [pandoc.div(["callout-box"], [pandoc.para("Hi")])], meta
    )
    result = filter_document(document, "typst", file_config)
    assert _raw_blocks(result) == ["#meta-callout[", "]"]


def test_code_window_from_metadata(pandoc: PandocNodes) -> None:
    """Code windows are switched on through metadata."""
    meta = pandoc.meta_map(
        {"mc-components": {"code-window": {"enabled": True, "auto-filename": "true"}}}
    )
    document = pandoc.document(
        [
            pandoc.code_block("print(1)", ["python"], filename="app.py"),
            pandoc.code_block("echo hi", ["bash"]),
            pandoc.code_block("plain text"),
        ],
        meta,
    )
    result = filter_document(document, "typst")
    assert _raw_blocks(result) == [
        '#mc-code-window(filename: "app.py", is-auto: false)'
        "[```python\nprint(1)\n```]",
        '#mc-code-window(filename: "bash", is-auto: true)[```bash\necho hi\n```]',
    ]
    assert result["blocks"][2] == pandoc.code_block("plain text"), (
        "blocks without a language keep their original form"
    )


def test_lists_and_notes_round_trip(pandoc: PandocNodes) -> None:
    """Untouched structures are rebuilt exactly as they were read."""
    blocks = [
        {"t": "BulletList", "c": [[pandoc.para("One")], [pandoc.para("Two")]]},
        {
            "t": "OrderedList",
            "c": [[1, {"t": "Decimal"}, {"t": "Period"}], [[pandoc.para("First")]]],
        },
        {
            "t": "Para",
            "c": [
                {"t": "Emph", "c": pandoc.inlines("very much")},
                {"t": "Note", "c": [pandoc.para("A footnote")]},
                {"t": "Code", "c": [pandoc.attr(), "x = 1"]},
            ],
        },
        {"t": "Table", "c": ["opaque", "content"]},
    ]
    document = pandoc.document(blocks)
    assert filter_document(document, "html")["blocks"] == blocks


def test_components_inside_lists_are_rewritten(pandoc: PandocNodes) -> None:
    """List items are descended into like any other container."""
    item = [{"t": "Plain", "c": [pandoc.span(["badge"], "New")]}]
    document = pandoc.document([{"t": "BulletList", "c": [item]}])
    result = filter_document(document, "typst")
    (inline,) = result["blocks"][0]["c"][0][0]["c"]
    assert inline == {"t": "RawInline", "c": ["typst", "#mc-badge[New]"]}


def test_revealjs_uses_presentation_defaults(pandoc: PandocNodes) -> None:
    """Reveal.js output uses prefixed classes."""
    box = pandoc.div(["value-box"], [], value="7", label="Open issues")
    result = filter_document(pandoc.document([box]), "revealjs")
    (html,) = _raw_blocks(result)
    assert result["blocks"][0]["c"][0] == "html"
    assert 'class="reveal-component mc-value-box mc-value-box--info"' in html


def test_malformed_div_names_its_location(pandoc: PandocNodes) -> None:
    """Structural errors report the node type and its path."""
    document = pandoc.document([{"t": "Div", "c": ["not", "a", "div"]}])
    with pytest.raises(StructuralError) as excinfo:
        filter_document(document, "typst")
    message = str(excinfo.value)
    assert "Div" in message, message
    assert "blocks[0]" in message, message


@pytest.mark.parametrize(
    "document",
    [[], {"blocks": "nope", "meta": {}}, {"meta": {}}],
)
def test_malformed_document_is_rejected(document: object) -> None:
    """Documents must be objects with a block list."""
    with pytest.raises(StructuralError):
        filter_document(document, "typst")  # type: ignore[arg-type]


def test_filter_json_rejects_invalid_json() -> None:
    """Undecodable input raises a structural error."""
    with pytest.raises(StructuralError, match="not valid Pandoc JSON"):
        filter_json("{not json", "typst")


def test_filter_json_keeps_unicode(pandoc: PandocNodes) -> None:
    """Text is written without ASCII escaping."""
    text = json.dumps(pandoc.document([pandoc.para("naïve café")]))
    output = filter_json(text, "html")
    assert '"c": "naïve"' in output, output
    assert '"c": "café"' in output, output


def test_element_conversion_keeps_attributes(pandoc: PandocNodes) -> None:
    """Div attributes and classes survive conversion in order."""
    node = pandoc.div(["note", "value-box"], [], value="3", unit="ms")
    element = to_element(node, "blocks[0]:Div", block=True)
    assert element.kind is ElementKind.CONTAINER
    assert element.classes == ("note", "value-box")
    assert list(element.attributes.items()) == [("value", "3"), ("unit", "ms")]
    assert to_pandoc(element) == node


def test_meta_value_and_plain_text() -> None:
    """Metadata values flatten to plain Python data."""
    meta = {
        "t": "MetaMap",
        "c": {
            "wrapper": {
                "t": "MetaInlines",
                "c": [
                    {"t": "Str", "c": "my"},
                    {"t": "Space"},
                    {"t": "Str", "c": "box"},
                ],
            },
            "arguments": {"t": "MetaBool", "c": True},
            "tags": {"t": "MetaList", "c": [{"t": "MetaString", "c": "a"}]},
        },
    }
    assert meta_value(meta) == {"wrapper": "my box", "arguments": True, "tags": ["a"]}
    assert plain_text([{"t": "RawInline", "c": ["html", "<br>"]}]) == ""
