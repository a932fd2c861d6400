"""Behaviour tests for card grids filtered through the Pandoc adapter.

The scenarios in ``card_grid.feature`` build a Pandoc JSON document holding a
``card-grid`` container, run :func:`mc_components.filter_document` for Typst
and HTML output, and check that the cards are collected into a single
component with their titles, footers and column count intact.

Usage
-----
Run ``pytest tests/bdd/test_card_grid.py -v``. The documents are built in
memory with the ``pandoc`` fixture, so Pandoc itself is not required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from mc_components import filter_document

if typ.TYPE_CHECKING:
    from conftest import PandocNodes

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "card_grid.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a Pandoc document with a two-card grid")
def given_two_card_grid(scenario_state: ScenarioState, pandoc: PandocNodes) -> None:
    """Store a document whose grid holds a titled card and a card with a footer."""
    revenue = pandoc.div(
        ["card"],
        [pandoc.header(3, "Revenue"), pandoc.para("Up 12% on last quarter")],
        style="filled",
    )
    churn = pandoc.div(
        ["card"],
        [
            pandoc.header(3, "Churn"),
            pandoc.para("Two accounts lost"),
            pandoc.rule(),
            pandoc.para("Needs attention"),
        ],
        colour="warning",
    )
    grid = pandoc.div(["card-grid"], [revenue, churn], columns="2")
    scenario_state["document"] = pandoc.document([grid])


@given("a Pandoc document with an empty card grid")
def given_empty_grid(scenario_state: ScenarioState, pandoc: PandocNodes) -> None:
    """Store a document whose grid holds only non-card content."""
    grid = pandoc.div(
        ["card-grid"], [pandoc.para("No cards yet"), pandoc.div(["card"], [])]
    )
    scenario_state["document"] = pandoc.document([grid])


@when(parsers.parse('I filter the document for "{format_name}"'))
def when_filter(scenario_state: ScenarioState, format_name: str) -> None:
    """Run the component filter for the requested output format."""
    scenario_state["result"] = filter_document(
        scenario_state["document"], format_name
    )


@then(parsers.parse('the document holds a single raw "{raw_format}" block'))
def then_single_raw_block(scenario_state: ScenarioState, raw_format: str) -> None:
    """The grid and its cards collapse into exactly one raw block."""
    blocks = scenario_state["result"]["blocks"]
    assert len(blocks) == 1, f"expected one block, got {len(blocks)}"
    assert blocks[0]["t"] == "RawBlock", f"unexpected block type {blocks[0]['t']}"
    assert blocks[0]["c"][0] == raw_format


@then(parsers.parse('the block calls "{function}" with {columns:d} columns'))
def then_block_calls(
    scenario_state: ScenarioState, function: str, columns: int
) -> None:
    """The Typst call names the grid function and carries each card."""
    code = scenario_state["result"]["blocks"][0]["c"][1]
    assert code.startswith(f"#{function}(\n"), code
    assert code.endswith(f"  columns: {columns}\n)"), code
    revenue = '(title: "Revenue", content: "Up 12% on last quarter", style: "filled")'
    assert revenue in code, code
    assert 'footer: "Needs attention", colour: "warning")' in code


def _soup(scenario_state: ScenarioState) -> BeautifulSoup:
    blocks = scenario_state["result"]["blocks"]
    return BeautifulSoup("".join(block["c"][1] for block in blocks), "html.parser")


@then(parsers.parse('the HTML shows cards titled "{first}" and "{second}"'))
def then_html_titles(scenario_state: ScenarioState, first: str, second: str) -> None:
    """Card titles appear in document order."""
    soup = _soup(scenario_state)
    titles = [node.get_text() for node in soup.select(".mc-card__title")]
    assert titles == [first, second], f"unexpected card titles {titles}"


@then(parsers.parse('the "{title}" card has the footer "{footer}"'))
def then_card_footer(scenario_state: ScenarioState, title: str, footer: str) -> None:
    """The content after a card's rule becomes its footer."""
    soup = _soup(scenario_state)
    for card in soup.select(".mc-card"):
        heading = card.select_one(".mc-card__title")
        if heading is not None and heading.get_text() == title:
            node = card.select_one(".mc-card__footer")
            assert node is not None, f"card {title!r} has no footer"
            assert node.get_text() == footer
            assert "mc-card--warning" in card["class"]
            return
    pytest.fail(f"no card titled {title!r}")


@then("the document has no blocks")
def then_no_blocks(scenario_state: ScenarioState) -> None:
    """Grids without cards are removed from the document."""
    assert scenario_state["result"]["blocks"] == []
