"""Song detail values as they appear in the exported table.

Arrangement-scoped details (source, song number, key, tempo, duration,
description) always read from the default arrangement.
"""
from __future__ import annotations

from models import Arrangement, NamedSource, PlainSource, Song

UNTITLED = "Untitled"
COPYRIGHT_GLYPH = "©"


def default_arrangement(song: Song) -> Arrangement | None:
    """First arrangement flagged default, else the first one, else None."""
    if not song.arrangements:
        return None
    for arrangement in song.arrangements:
        if arrangement.is_default:
            return arrangement
    return song.arrangements[0]


def format_duration(total_sec: int | None) -> str:
    if not _positive_int(total_sec):
        return ""
    m = total_sec // 60
    s = total_sec % 60
    return f"{m}:{s:02d}"


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _source_text(arrangement: Arrangement | None) -> str:
    source = arrangement.source if arrangement else None
    if isinstance(source, PlainSource):
        return source.text or ""
    if isinstance(source, NamedSource):
        return source.name or ""
    return ""


def _tempo_text(arrangement: Arrangement | None) -> str:
    tempo = arrangement.tempo if arrangement else None
    if _positive_int(tempo):
        return f"{tempo} BPM"
    return ""


def render_field(song: Song, field_id: str) -> str:
    """Display text for one detail of a song; empty string when unset or unknown."""
    if field_id == "name":
        return song.name or UNTITLED
    if field_id == "author":
        return song.author or ""
    if field_id == "category":
        return song.category.name if song.category and song.category.name else ""
    if field_id == "copyright":
        return f"{COPYRIGHT_GLYPH} {song.copyright}" if song.copyright else ""
    if field_id == "ccli":
        return f"CCLI: {song.ccli}" if song.ccli else ""
    if field_id == "tags":
        return ", ".join(t.name for t in song.tags)

    arrangement = default_arrangement(song)
    if field_id == "source":
        return _source_text(arrangement)
    if field_id == "tempo":
        return _tempo_text(arrangement)
    if field_id == "duration":
        return format_duration(arrangement.duration if arrangement else None)
    if arrangement is None:
        return ""
    if field_id == "sourceReference":
        return arrangement.source_reference or ""
    if field_id == "key":
        return arrangement.key or ""
    if field_id == "description":
        return arrangement.description or ""
    return ""
