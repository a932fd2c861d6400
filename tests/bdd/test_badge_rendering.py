"""Behaviour tests for inline badges in Pandoc paragraphs."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from mc_components import filter_document

if typ.TYPE_CHECKING:
    from conftest import PandocNodes

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "badge.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"meta": {}}


@given(
    parsers.parse(
        'a paragraph reading "{lead}" with a "{colour}" badge "{text}"'
    )
)
def given_badge_paragraph(
    scenario_state: ScenarioState,
    pandoc: PandocNodes,
    lead: str,
    colour: str,
    text: str,
) -> None:
    """Store a paragraph whose last inline is a badge span."""
    scenario_state["lead"] = lead
    scenario_state["paragraph"] = {
        "t": "Para",
        "c": [
            *pandoc.inlines(lead),
            {"t": "Space"},
            pandoc.span(["badge"], text, colour=colour),
        ],
    }


@given(parsers.parse('document metadata mapping badges to "{wrapper}"'))
def given_badge_mapping(
    scenario_state: ScenarioState, pandoc: PandocNodes, wrapper: str
) -> None:
    """Override the badge function through document metadata."""
    scenario_state["meta"] = pandoc.meta_map(
        {"mc-components": {"spans": {"badge": {"wrapper": wrapper}}}}
    )


@when(parsers.parse('I filter the paragraph for "{format_name}"'))
def when_filter_paragraph(
    scenario_state: ScenarioState, pandoc: PandocNodes, format_name: str
) -> None:
    """Filter a one-paragraph document."""
    document = pandoc.document(
        [scenario_state["paragraph"]], scenario_state["meta"]
    )
    (paragraph,) = filter_document(document, format_name)["blocks"]
    scenario_state["inlines"] = paragraph["c"]


def _last_inline(scenario_state: ScenarioState) -> dict[str, typ.Any]:
    inlines = scenario_state["inlines"]
    assert inlines[0] == {"t": "Str", "c": scenario_state["lead"]}, (
        "text before the badge must be untouched"
    )
    last = inlines[-1]
    assert last["t"] == "RawInline", f"expected a raw inline, got {last['t']}"
    return last


@then(parsers.parse("the paragraph ends with the inline code '{code}'"))
def then_inline_code(scenario_state: ScenarioState, code: str) -> None:
    """The badge is replaced by a single Typst call."""
    last = _last_inline(scenario_state)
    assert last["c"] == ["typst", code]


@then(
    parsers.parse(
        'the paragraph ends with an HTML badge "{text}" with modifier "{modifier}"'
    )
)
def then_html_badge(scenario_state: ScenarioState, text: str, modifier: str) -> None:
    """The badge renders as a BEM span carrying the colour modifier."""
    last = _last_inline(scenario_state)
    assert last["c"][0] == "html"
    span = BeautifulSoup(last["c"][1], "html.parser").span
    assert span is not None
    assert span["class"] == ["mc-badge", f"mc-badge--{modifier}"]
    label = span.select_one(".mc-badge__text")
    assert label is not None and label.get_text() == text
