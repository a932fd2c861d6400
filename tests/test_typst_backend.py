"""Unit tests for Typst call generation."""

from __future__ import annotations

import pytest

from mc_components.backends.typst import (
    TypstBackend,
    build_arguments,
    build_function_call,
    build_wrapper,
)
from mc_components.config import ComponentConfig
from mc_components.model import (
    CardGrid,
    CardRecord,
    CardStyle,
    EventRecord,
    Orientation,
    Placement,
    Timeline,
    Wrap,
)
from mc_components.registry import HandlerKind, ResolvedComponent, builtin_mappings


def _component(name: str, handler: HandlerKind) -> ResolvedComponent:
    return ResolvedComponent(name, builtin_mappings().divs[name], handler)


@pytest.fixture
def backend() -> TypstBackend:
    return TypstBackend()


def test_build_arguments_keeps_attribute_order() -> None:
    """Attributes become named arguments in declaration order."""
    assert build_arguments({"value": "42", "show": True, "colour": "#00ff00"}) == (
        'value: "42", show: true, colour: rgb("#00ff00")'
    )


@pytest.mark.parametrize(
    ("attributes", "expected"),
    [
        ({"title": "#1 priority"}, 'title: "#1 priority"'),
        ({"label": "none"}, 'label: "none"'),
        ({"align": "auto", "tone": "red"}, 'align: "auto", tone: "red"'),
        ({"color": "red", "open": "false"}, "color: red, open: false"),
    ],
)
def test_build_arguments_coerces_colours_only(
    attributes: dict[str, str], expected: str
) -> None:
    """Colour keys become Typst colours; other text stays quoted."""
    assert build_arguments(attributes) == expected, f"unexpected for {attributes}"


@pytest.mark.parametrize(
    ("config", "attributes", "expected"),
    [
        (ComponentConfig("mc-panel", arguments=True), {}, Wrap("#mc-panel()[", "]")),
        (ComponentConfig("mc-divider"), {}, Wrap("#mc-divider[", "]")),
        (
            ComponentConfig("mc-divider"),
            {"style": "dashed"},
            Wrap('#mc-divider(style: "dashed")[', "]"),
        ),
    ],
)
def test_build_wrapper(
    config: ComponentConfig, attributes: dict[str, str], expected: Wrap
) -> None:
    """Argument lists appear only when forced or when attributes exist."""
    assert build_wrapper(config, attributes) == expected


def test_function_call_escapes_content() -> None:
    """Inline content is escaped for Typst markup."""
    assert build_function_call("mc-badge", "C# [x]", {}, should_pass=False) == (
        "#mc-badge[C\\# \\[x\\]]"
    )
    assert build_function_call("mc-badge", "- draft", {}, should_pass=False) == (
        "#mc-badge[\\- draft]"
    ), "a leading dash must not start a list"
    assert (
        build_function_call("mc-kbd", "Ctrl", {}, should_pass=True) == "#mc-kbd()[Ctrl]"
    )


def test_card_grid_serialises_records(backend: TypstBackend) -> None:
    """Cards become labelled tuples in field order inside one call."""
    grid = CardGrid(
        cards=(
            CardRecord(title="A", content="Body", style=CardStyle.FILLED),
            CardRecord(content='Say "hi"', footer="F", colour="#336699"),
        ),
        columns=2,
    )
    code = backend.card_grid(_component("card-grid", HandlerKind.CARD_GRID), grid)
    assert code == (
        "#mc-card-grid(\n"
        '  ((title: "A", content: "Body", style: "filled"),\n'
        '    (content: "Say \\"hi\\"", footer: "F", colour: rgb("#336699"))),\n'
        "  columns: 2\n"
        ")"
    )


def test_single_record_array_keeps_trailing_comma(backend: TypstBackend) -> None:
    """A one-element array needs a trailing comma to stay an array in Typst."""
    timeline = Timeline(
        events=(EventRecord("2024", "Launch"),), orientation=Orientation.VERTICAL
    )
    code = backend.timeline(_component("timeline", HandlerKind.TIMELINE), timeline)
    assert code == '#mc-timeline(\n  ((date: "2024", title: "Launch"),)\n)'


def test_timeline_emits_description_only_when_present(backend: TypstBackend) -> None:
    """Date and title are always present; description is optional."""
    timeline = Timeline(
        events=(EventRecord("", "Kick-off"), EventRecord("2025", "GA", "Shipped")),
        orientation=Orientation.HORIZONTAL,
    )
    component = _component("horizontal-timeline", HandlerKind.TIMELINE)
    code = backend.timeline(component, timeline)
    assert code.startswith("#mc-horizontal-timeline(\n"), code
    assert '(date: "", title: "Kick-off")' in code
    assert '(date: "2025", title: "GA", description: "Shipped")' in code


def test_atomic_components(backend: TypstBackend) -> None:
    """Value boxes and progress bars are single calls with attributes only."""
    value_box = _component("value-box", HandlerKind.VALUE_BOX)
    progress = _component("progress", HandlerKind.PROGRESS)
    assert backend.value_box(value_box, {"value": "42", "unit": "%"}) == (
        '#mc-value-box(value: "42", unit: "%")'
    )
    assert backend.value_box(value_box, {}) == "#mc-value-box()"
    assert backend.progress(progress, {"value": "75"}) == '#mc-progress(value: "75")'


def test_divider_wraps_content(backend: TypstBackend) -> None:
    """Typst dividers thread their content like a generic wrapper."""
    divider = _component("divider", HandlerKind.DIVIDER)
    assert backend.divider(divider, {"label": "Part 2"}, "ignored") == Wrap(
        '#mc-divider(label: "Part 2")[', "]"
    )


def test_code_window_fence_outgrows_backtick_runs(backend: TypstBackend) -> None:
    """The raw fence is longer than any backtick run in the code."""
    code = backend.code_window(
        "mc-code-window", "print('```')", "python", "app.py", is_auto=False
    )
    assert code == (
        '#mc-code-window(filename: "app.py", is-auto: false)'
        "[````python\nprint('```')\n````]"
    )


def test_instructions_carry_typst_format(backend: TypstBackend) -> None:
    """Block and inline instructions are tagged with the typst raw format."""
    block = backend.block("#x()")
    inline = backend.inline("#y[]")
    assert (block.placement, block.raw_format) == (Placement.BLOCK, "typst")
    assert (inline.placement, inline.raw_format) == (Placement.INLINE, "typst")
    assert block.to_element().block, "block instructions become block raw elements"
