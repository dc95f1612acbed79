"""Turn songs plus the selection state into titled, formatted tables."""
from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field

from config import (
    ALL_SONGS_TITLE,
    FALLBACK_TITLE,
    MAX_DETAIL_COLUMNS,
    SPACER_FONT_SIZE,
)
from details import render_field
from models import ALL_SONGS_CONTEXT, NAME_DETAIL, SelectionState, Song, tag_context

logger = logging.getLogger(__name__)


@dataclass
class Cell:
    text: str
    font_size: int
    bold: bool = False
    italic: bool = False


Row = list[Cell]


@dataclass
class Section:
    title: str
    context: str
    columns: list[str]
    rows: list[Row] = field(default_factory=list)

    @property
    def song_rows(self) -> list[Row]:
        return [r for r in self.rows if not is_spacer(r)]


def is_spacer(row: Row) -> bool:
    return all(not c.text.strip() for c in row)


def filter_songs(songs: Iterable[Song], selected_category_ids: set[int]) -> list[Song]:
    """Songs whose category is selected; songs without a category always pass."""
    return [
        s for s in songs
        if s.category is None or s.category.id in selected_category_ids
    ]


def active_columns(state: SelectionState) -> list[str]:
    """Selected detail ids in column order, at most MAX_DETAIL_COLUMNS of them.

    When more are selected, "name" stays and the first others in order fill
    the remaining slots.
    """
    columns = [d.id for d in state.ordered_details if d.id in state.selected_details]
    if len(columns) <= MAX_DETAIL_COLUMNS:
        return columns
    keep = {NAME_DETAIL} if NAME_DETAIL in columns else set()
    for detail_id in columns:
        if len(keep) >= MAX_DETAIL_COLUMNS:
            break
        keep.add(detail_id)
    return [d for d in columns if d in keep]


def _sort_key(song: Song) -> str:
    decomposed = unicodedata.normalize("NFKD", song.name or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _initial(song: Song) -> str:
    return _sort_key(song)[:1].upper()


def _song_row(song: Song, columns: list[str], state: SelectionState) -> Row:
    row = []
    for detail_id in columns:
        fmt = state.formatting_for(detail_id)
        row.append(Cell(render_field(song, detail_id), fmt.font_size, fmt.bold, fmt.italic))
    return row


def _spacer_row(columns: list[str]) -> Row:
    return [Cell(" ", SPACER_FONT_SIZE) for _ in columns]


def build_rows(songs: list[Song], columns: list[str], state: SelectionState, grouped: bool) -> list[Row]:
    """Rows of one section; grouped sections are sorted by name with a spacer per letter change."""
    if not grouped:
        return [_song_row(s, columns, state) for s in songs]

    rows: list[Row] = []
    last_initial = ""
    for index, song in enumerate(sorted(songs, key=_sort_key)):
        initial = _initial(song)
        if index > 0 and initial and initial != last_initial:
            rows.append(_spacer_row(columns))
        last_initial = initial
        rows.append(_song_row(song, columns, state))
    return rows


def _section(title: str, context: str, songs: list[Song], columns: list[str],
             state: SelectionState) -> Section:
    grouped = state.grouping_for(context)
    return Section(title, context, columns, build_rows(songs, columns, state, grouped))


def assemble(songs: list[Song], state: SelectionState) -> list[Section]:
    """Sections in export order: "all songs" (if enabled), then one per selected tag.

    ``songs`` is the already category-filtered list. Tags without songs get
    no section; if nothing else is emitted, a single fallback section lists
    every song.
    """
    columns = active_columns(state)
    sections: list[Section] = []

    if state.include_all_songs:
        sections.append(_section(ALL_SONGS_TITLE, ALL_SONGS_CONTEXT, songs, columns, state))

    for tag in state.ordered_tags:
        if tag.id not in state.selected_tag_ids:
            continue
        tag_songs = [s for s in songs if s.has_tag(tag.id)]
        if not tag_songs:
            logger.debug("Tag %r has no songs; skipping section", tag.name)
            continue
        sections.append(_section(tag.name, tag_context(tag.id), tag_songs, columns, state))

    if not sections:
        sections.append(_section(FALLBACK_TITLE, ALL_SONGS_CONTEXT, songs, columns, state))

    logger.info("Assembled %d section(s), %d column(s): %s", len(sections), len(columns), ", ".join(columns))
    return sections
