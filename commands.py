"""User actions on the selection state.

Each command is a plain function ``(state, **payload)`` registered under the
name the UI sends; ``dispatch`` looks it up and applies it.
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Callable

from config import FONT_SIZE_CHOICES, MAX_DETAIL_COLUMNS
from models import HEADER_ALIGNMENTS, NAME_DETAIL, Formatting, HeaderStyle, SelectionState
from ordering import reconcile

logger = logging.getLogger(__name__)

COMMANDS: dict[str, Callable[..., None]] = {}


class CommandError(ValueError):
    """A command was unknown, malformed, or would break a selection rule."""


def command(fn: Callable[..., None]) -> Callable[..., None]:
    COMMANDS[fn.__name__] = fn
    return fn


def dispatch(state: SelectionState, name: str, payload: dict | None = None) -> None:
    handler = COMMANDS.get(name)
    if handler is None:
        raise CommandError(f"Unknown command: {name}")
    payload = payload or {}
    try:
        inspect.signature(handler).bind(state, **payload)
    except TypeError as exc:
        raise CommandError(f"Bad arguments for {name}: {exc}") from exc
    handler(state, **payload)
    logger.info("Command %s %r", name, payload)


def _require_int(value, what: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CommandError(f"{what} must be an integer")
    return value


def _require_bool(value, what: str) -> bool:
    if not isinstance(value, bool):
        raise CommandError(f"{what} must be true or false")
    return value


def _require_detail(state: SelectionState, detail_id) -> str:
    if detail_id not in state.detail_ids:
        raise CommandError(f"Unknown detail: {detail_id}")
    return detail_id


def _toggle(members: set, item, selected: bool | None) -> None:
    if selected is None:
        selected = item not in members
    else:
        _require_bool(selected, "selected")
    if selected:
        members.add(item)
    else:
        members.discard(item)


# --- Categories ---
@command
def toggle_category(state: SelectionState, category_id, selected: bool | None = None) -> None:
    _toggle(state.selected_category_ids, _require_int(category_id, "category_id"), selected)


@command
def select_all_categories(state: SelectionState, category_ids: list, selected: bool = True) -> None:
    if not isinstance(category_ids, list):
        raise CommandError("category_ids must be a list of category ids")
    ids = {_require_int(c, "category_id") for c in category_ids}
    if _require_bool(selected, "selected"):
        state.selected_category_ids |= ids
    else:
        state.selected_category_ids -= ids


# --- Tags (section structure) ---
@command
def toggle_tag(state: SelectionState, tag_id, selected: bool | None = None) -> None:
    _toggle(state.selected_tag_ids, _require_int(tag_id, "tag_id"), selected)


@command
def select_all_tags(state: SelectionState, selected: bool = True) -> None:
    if _require_bool(selected, "selected"):
        state.selected_tag_ids = {t.id for t in state.ordered_tags}
    else:
        state.selected_tag_ids = set()


@command
def reorder_tags(state: SelectionState, order: list) -> None:
    if not isinstance(order, list):
        raise CommandError("order must be a list of tag ids")
    state.ordered_tags = reconcile(order, state.tags)


# --- Detail columns ---
@command
def toggle_detail(state: SelectionState, detail_id, selected: bool | None = None) -> None:
    detail_id = _require_detail(state, detail_id)
    if selected is None:
        selected = detail_id not in state.selected_details
    else:
        _require_bool(selected, "selected")
    if not selected:
        if detail_id == NAME_DETAIL:
            raise CommandError("Name is always included")
        state.selected_details.discard(detail_id)
        return
    if detail_id in state.selected_details:
        return
    if len(state.selected_details) >= MAX_DETAIL_COLUMNS:
        raise CommandError(f"Max {MAX_DETAIL_COLUMNS - 1} Liedinfos zusätzlich zu Name")
    state.selected_details.add(detail_id)


@command
def reorder_details(state: SelectionState, order: list) -> None:
    if not isinstance(order, list):
        raise CommandError("order must be a list of detail ids")
    state.ordered_details = reconcile(order, state.details)


@command
def set_formatting(state: SelectionState, detail_id, bold: bool | None = None,
                   italic: bool | None = None, font_size: int | None = None) -> None:
    detail_id = _require_detail(state, detail_id)
    current = state.formatting_for(detail_id)
    updated = Formatting(current.bold, current.italic, current.font_size)
    if bold is not None:
        updated.bold = _require_bool(bold, "bold")
    if italic is not None:
        updated.italic = _require_bool(italic, "italic")
    if font_size is not None:
        if font_size not in FONT_SIZE_CHOICES or isinstance(font_size, bool):
            raise CommandError(f"font_size must be one of {', '.join(map(str, FONT_SIZE_CHOICES))}")
        updated.font_size = font_size
    state.formatting[detail_id] = updated


# --- Sections ---
@command
def set_grouping(state: SelectionState, context: str, enabled: bool) -> None:
    if not isinstance(context, str) or not context:
        raise CommandError("context must be a non-empty string")
    state.grouping[context] = _require_bool(enabled, "enabled")


@command
def set_include_all_songs(state: SelectionState, enabled: bool) -> None:
    state.include_all_songs = _require_bool(enabled, "enabled")


@command
def set_header_style(state: SelectionState, **changes) -> None:
    attrs = set(HeaderStyle.FIELDS.values())
    values = {}
    for attr, value in changes.items():
        if attr not in attrs:
            raise CommandError(f"Unknown header style option: {attr}")
        if attr == "alignment":
            if value not in HEADER_ALIGNMENTS:
                raise CommandError("alignment must be 'left' or 'center'")
        elif attr == "font_size":
            if _require_int(value, "font_size") <= 0:
                raise CommandError("font_size must be positive")
        else:
            _require_bool(value, attr)
        values[attr] = value
    for attr, value in values.items():
        setattr(state.header_style, attr, value)
