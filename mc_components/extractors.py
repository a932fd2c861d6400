"""Pull typed records out of component containers.

Each extractor scans a container's children once, left to right, using the
positional conventions authors write in Markdown:

* a ``card`` takes its first heading as the title, splits content from footer
  at the first horizontal rule, and reads ``style``/``colour`` attributes;
* a ``timeline`` collects ``event`` containers (date/title attributes) or
  headings written as ``"<date>: <title>"``.

Example
-------
>>> from mc_components.extractors import parse_event_heading
>>> parse_event_heading("2024: Launch")
EventRecord(date='2024', title='Launch', description=None)
"""

from __future__ import annotations

import logging
import re

from ._constants import CARD_CLASS, EVENT_CLASS, HORIZONTAL_TIMELINE_CLASS
from .model import (
    CardGrid,
    CardRecord,
    CardStyle,
    Element,
    ElementKind,
    EventRecord,
    Orientation,
    Timeline,
    stringify,
)

logger = logging.getLogger(__name__)

EVENT_HEADING_PATTERN = re.compile(r"^([^:]+):\s*(.+)$", re.DOTALL)


def parse_columns(value: str, default: int) -> int:
    """Return a positive column count from ``value`` or fall back to ``default``."""
    text = value.strip()
    if not text:
        return default
    try:
        columns = int(text)
    except ValueError:
        logger.debug("ignoring non-numeric columns=%r; using %d", value, default)
        return default
    if columns < 1:
        logger.debug("ignoring non-positive columns=%r; using %d", value, default)
        return default
    return columns


def _parse_style(value: str) -> CardStyle | None:
    if not value:
        return None
    try:
        return CardStyle(value.strip().lower())
    except ValueError:
        logger.debug("ignoring unknown card style %r", value)
        return None


def _is_labelled_container(element: Element, label: str) -> bool:
    return element.kind is ElementKind.CONTAINER and element.has_class(label)


def extract_card(card: Element) -> CardRecord:
    """Extract title, content, footer, style and colour from a ``card`` container."""
    title: str | None = None
    title_taken = False
    in_footer = False
    content_blocks: list[Element] = []
    footer_blocks: list[Element] = []

    for block in card.children:
        if block.is_heading and not title_taken:
            title = stringify(block) or None
            title_taken = True
        elif block.is_rule:
            in_footer = True
        elif in_footer:
            footer_blocks.append(block)
        else:
            content_blocks.append(block)

    return CardRecord(
        title=title,
        content=stringify(content_blocks) or None,
        footer=stringify(footer_blocks) or None,
        style=_parse_style(card.attribute("style")),
        colour=card.attribute("colour") or card.attribute("color") or None,
    )


def extract_card_grid(grid: Element, default_columns: int) -> CardGrid:
    """Collect the non-empty cards of a ``card-grid`` container.

    Parameters
    ----------
    grid : Element
        The ``card-grid`` container; only immediate ``card`` children count.
    default_columns : int
        Column count used when ``columns`` is absent or malformed.

    Returns
    -------
    CardGrid
        Cards in document order, possibly none.
    """
    cards: list[CardRecord] = []
    for child in grid.children:
        if not _is_labelled_container(child, CARD_CLASS):
            continue
        card = extract_card(child)
        if card.is_empty:
            logger.debug("dropping card without title, content, or footer")
            continue
        cards.append(card)
    columns = parse_columns(grid.attribute("columns"), default_columns)
    return CardGrid(cards=tuple(cards), columns=columns)


def parse_event_heading(text: str) -> EventRecord:
    """Split ``"<date>: <title>"`` headings; other text becomes the title."""
    match = EVENT_HEADING_PATTERN.match(text)
    if match is None:
        return EventRecord(date="", title=text.strip())
    return EventRecord(date=match.group(1).strip(), title=match.group(2).strip())


def extract_event(event: Element) -> EventRecord:
    """Extract date, title and description from an ``event`` container.

    ``date`` and ``title`` come from attributes. Without a ``title`` attribute
    the first heading supplies it and is removed from the description.
    """
    date = event.attribute("date")
    title = event.attribute("title")
    remaining = list(event.children)
    if not title:
        for index, block in enumerate(remaining):
            if block.is_heading:
                title = stringify(block)
                del remaining[index]
                break
    return EventRecord(
        date=date, title=title, description=stringify(remaining) or None
    )


def resolve_orientation(timeline: Element) -> Orientation:
    """Return horizontal for ``.horizontal-timeline`` or ``orientation=horizontal``."""
    explicit = timeline.attribute("orientation").strip().lower()
    if explicit == Orientation.HORIZONTAL.value:
        return Orientation.HORIZONTAL
    if timeline.has_class(HORIZONTAL_TIMELINE_CLASS):
        return Orientation.HORIZONTAL
    return Orientation.VERTICAL


def extract_timeline(timeline: Element) -> Timeline:
    """Collect events from ``event`` containers and ``date: title`` headings."""
    events: list[EventRecord] = []
    for child in timeline.children:
        if _is_labelled_container(child, EVENT_CLASS):
            event = extract_event(child)
        elif child.is_heading:
            event = parse_event_heading(stringify(child))
        else:
            continue
        if event.is_empty:
            logger.debug("dropping timeline event without date or title")
            continue
        events.append(event)
    return Timeline(events=tuple(events), orientation=resolve_orientation(timeline))


__all__ = [
    "EVENT_HEADING_PATTERN",
    "extract_card",
    "extract_card_grid",
    "extract_event",
    "extract_timeline",
    "parse_columns",
    "parse_event_heading",
    "resolve_orientation",
]
