"""The session: loaded catalogs plus the one SelectionState they feed."""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date

from assembler import Section, assemble, filter_songs
from churchtools import ChurchToolsClient
from commands import dispatch
from config import FOOTER_DATE_FORMAT, SONGS_PAGE_LIMIT
from models import Category, SelectionState, Song, Tag
from pdf_export import render_pdf
from settings_io import apply_settings, build_settings

logger = logging.getLogger(__name__)


class ExportWorkspace:
    """Owns the selection state; every mutation goes through the lock."""

    def __init__(self, songs: list[Song], tags: list[Tag], categories: list[Category],
                 state: SelectionState | None = None):
        self.songs = list(songs)
        self.tags = list(tags)
        self.categories = list(categories)
        self.state = state or SelectionState.default(self.tags, self.categories)
        self._lock = threading.Lock()

    def dispatch(self, name: str, payload: dict | None = None) -> None:
        with self._lock:
            dispatch(self.state, name, payload)

    def import_settings(self, document) -> None:
        with self._lock:
            apply_settings(document, self.state)

    def export_settings(self, timestamp: str | None = None) -> dict:
        with self._lock:
            return build_settings(self.state, timestamp=timestamp)

    def visible_songs(self) -> list[Song]:
        return filter_songs(self.songs, self.state.selected_category_ids)

    def sections(self) -> list[Section]:
        with self._lock:
            return assemble(self.visible_songs(), self.state)

    def export_pdf(self, today: date | None = None) -> bytes:
        today = today or date.today()
        with self._lock:
            sections = assemble(self.visible_songs(), self.state)
            header_style = replace(self.state.header_style)
        footer = f"Generated: {today.strftime(FOOTER_DATE_FORMAT)}"
        pdf = render_pdf(sections, header_style, footer)
        logger.info("Exported PDF: %d section(s), %d bytes", len(sections), len(pdf))
        return pdf


def load_workspace(client: ChurchToolsClient, page_limit: int = SONGS_PAGE_LIMIT) -> ExportWorkspace:
    tags = client.fetch_tags()
    categories = client.fetch_categories()
    logger.info("Loading all songs with pagination...")
    songs = client.fetch_songs(limit=page_limit)
    logger.info("Loaded %d songs, %d tags, %d categories", len(songs), len(tags), len(categories))
    return ExportWorkspace(songs, tags, categories)
