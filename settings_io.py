"""Export/import of the selection state as a JSON settings document."""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone

from models import (
    HEADER_ALIGNMENTS,
    NAME_DETAIL,
    Formatting,
    HeaderStyle,
    SelectionState,
)
from ordering import reconcile

logger = logging.getLogger(__name__)

SETTINGS_VERSION = "1.0"


class SettingsFormatError(ValueError):
    """The settings document is not a JSON object."""


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def settings_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"song-export-settings_{today.isoformat()}.json"


# --- build ---

def build_settings(state: SelectionState, timestamp: str | None = None) -> dict:
    """Snapshot ``state`` as a transport document. ``state`` is not modified."""
    detail_order = [d.id for d in state.ordered_details]
    selected_details = [d for d in detail_order if d in state.selected_details]
    # ids outside the ordered list are kept, after the ordered ones
    selected_details += sorted(state.selected_details - set(selected_details))

    return {
        "version": SETTINGS_VERSION,
        "timestamp": timestamp or _utc_timestamp(),
        "selectedCategoryIds": sorted(state.selected_category_ids),
        "selectedTagIds": sorted(state.selected_tag_ids),
        "orderedTags": [t.id for t in state.ordered_tags],
        "selectedDetails": selected_details,
        "orderedDetails": detail_order,
        "detailFormatting": [[key, fmt.to_dict()] for key, fmt in state.formatting.items()],
        "alphabeticalGroupingPerContext": [[key, value] for key, value in state.grouping.items()],
        "includeAllSongsList": state.include_all_songs,
        "headerStyleOptions": state.header_style.to_dict(),
    }


def dump_settings(document: dict) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


# --- apply ---

def parse_settings(text: str | bytes) -> dict:
    """Decode a settings file; raises SettingsFormatError for anything but a JSON object."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SettingsFormatError(f"Invalid settings file: not UTF-8 (byte {exc.start})") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SettingsFormatError(f"Invalid settings file: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(document, Mapping):
        raise SettingsFormatError("Invalid settings format: not an object")
    return document


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _int_ids(values: list) -> set[int]:
    return {v for v in values if _is_int(v)}


def _pairs(values: list):
    for entry in values:
        if isinstance(entry, (list, tuple)) and len(entry) == 2 and isinstance(entry[0], str):
            yield entry[0], entry[1]
        else:
            logger.debug("Ignoring malformed settings entry: %r", entry)


def _coerce_formatting(raw) -> Formatting | None:
    if not isinstance(raw, Mapping):
        return None
    fmt = Formatting()
    if isinstance(raw.get("bold"), bool):
        fmt.bold = raw["bold"]
    if isinstance(raw.get("italic"), bool):
        fmt.italic = raw["italic"]
    size = raw.get("fontSize")
    if _is_int(size) and size > 0:
        fmt.font_size = size
    return fmt


def _merge_header_style(current: HeaderStyle, raw: Mapping) -> HeaderStyle:
    values = current.to_dict()
    for key, value in raw.items():
        if key not in HeaderStyle.FIELDS:
            continue
        if key == "alignment":
            ok = value in HEADER_ALIGNMENTS
        elif key == "fontSize":
            ok = _is_int(value) and value > 0
        else:
            ok = isinstance(value, bool)
        if ok:
            values[key] = value
        else:
            logger.debug("Ignoring header style %s=%r", key, value)
    return HeaderStyle(**{HeaderStyle.FIELDS[k]: v for k, v in values.items()})


def apply_settings(document: Mapping, state: SelectionState) -> None:
    """Apply a (possibly partial) settings document onto ``state`` in place.

    Recognized keys replace their part of the state; absent or mistyped keys
    leave it alone. Unknown tag/detail ids are dropped. All replacements are
    computed before any of them is written, so a rejected document leaves
    ``state`` untouched.
    """
    if not isinstance(document, Mapping):
        raise SettingsFormatError("Invalid settings format: not an object")

    detail_ids = state.detail_ids
    updates: dict = {}

    def array(key: str) -> list | None:
        value = document.get(key)
        if isinstance(value, list):
            return value
        if value is not None:
            logger.debug("Ignoring %s: expected an array, got %s", key, type(value).__name__)
        return None

    if (values := array("selectedCategoryIds")) is not None:
        updates["selected_category_ids"] = _int_ids(values)

    if (values := array("selectedTagIds")) is not None:
        updates["selected_tag_ids"] = _int_ids(values)

    if (values := array("orderedTags")) is not None:
        updates["ordered_tags"] = reconcile(values, state.tags)

    if (values := array("selectedDetails")) is not None:
        selected = {v for v in values if isinstance(v, str) and v in detail_ids}
        dropped = [v for v in values if not (isinstance(v, str) and v in detail_ids)]
        if dropped:
            logger.debug("Dropping unknown details from settings: %r", dropped)
        if NAME_DETAIL in detail_ids:
            selected.add(NAME_DETAIL)
        updates["selected_details"] = selected

    if (values := array("orderedDetails")) is not None:
        updates["ordered_details"] = reconcile(values, state.details)

    if (values := array("detailFormatting")) is not None:
        formatting = {}
        for key, raw in _pairs(values):
            fmt = _coerce_formatting(raw)
            if key in detail_ids and fmt is not None:
                formatting[key] = fmt
        updates["formatting"] = formatting

    if (values := array("alphabeticalGroupingPerContext")) is not None:
        updates["grouping"] = {key: value for key, value in _pairs(values) if isinstance(value, bool)}

    if isinstance(document.get("includeAllSongsList"), bool):
        updates["include_all_songs"] = document["includeAllSongsList"]

    if isinstance(document.get("headerStyleOptions"), Mapping):
        updates["header_style"] = _merge_header_style(state.header_style, document["headerStyleOptions"])

    for attr, value in updates.items():
        setattr(state, attr, value)
    logger.info("Applied settings (version=%s): %s", document.get("version", "?"), ", ".join(updates) or "nothing")
