"""
Unit tests for commands: user actions applied to the selection state.
"""

import pytest

from commands import COMMANDS, CommandError, dispatch
from models import Formatting, HeaderStyle


class TestDispatch:
    """Tests for dispatch."""

    def test_unknown_command(self, state) -> None:
        with pytest.raises(CommandError, match="Unknown command"):
            dispatch(state, "delete_everything")

    def test_bad_arguments(self, state) -> None:
        with pytest.raises(CommandError, match="Bad arguments"):
            dispatch(state, "toggle_tag", {"tag": 1})

    def test_registry_names(self) -> None:
        assert {
            "toggle_category", "select_all_categories", "toggle_tag", "select_all_tags",
            "reorder_tags", "toggle_detail", "reorder_details", "set_formatting",
            "set_grouping", "set_include_all_songs", "set_header_style",
        } <= set(COMMANDS)


class TestSelectionCommands:
    """Tests for category and tag selection."""

    def test_toggle_category_flips(self, state) -> None:
        dispatch(state, "toggle_category", {"category_id": 10})
        assert state.selected_category_ids == {20}
        dispatch(state, "toggle_category", {"category_id": 10})
        assert state.selected_category_ids == {10, 20}

    def test_toggle_category_explicit(self, state) -> None:
        dispatch(state, "toggle_category", {"category_id": 20, "selected": True})
        assert state.selected_category_ids == {10, 20}

    def test_select_all_categories(self, state) -> None:
        dispatch(state, "select_all_categories", {"category_ids": [10, 20], "selected": False})
        assert state.selected_category_ids == set()

    def test_toggle_selected_must_be_bool(self, state) -> None:
        state.selected_category_ids = set()
        with pytest.raises(CommandError, match="selected must be true or false"):
            dispatch(state, "toggle_category", {"category_id": 10, "selected": "false"})
        assert state.selected_category_ids == set()

    def test_select_all_categories_requires_list(self, state) -> None:
        with pytest.raises(CommandError, match="must be a list"):
            dispatch(state, "select_all_categories", {"category_ids": 5})
        assert state.selected_category_ids == {10, 20}

    def test_toggle_tag_requires_int(self, state) -> None:
        with pytest.raises(CommandError, match="integer"):
            dispatch(state, "toggle_tag", {"tag_id": "1"})

    def test_select_all_tags(self, state) -> None:
        dispatch(state, "select_all_tags", {"selected": False})
        assert state.selected_tag_ids == set()
        dispatch(state, "select_all_tags")
        assert state.selected_tag_ids == {1, 2, 3}

    def test_reorder_tags_reconciles(self, state) -> None:
        dispatch(state, "reorder_tags", {"order": [3, 3, 42]})
        assert [t.id for t in state.ordered_tags] == [3, 1, 2]


class TestDetailCommands:
    """Tests for detail column commands."""

    def test_name_cannot_be_removed(self, state) -> None:
        with pytest.raises(CommandError, match="Name"):
            dispatch(state, "toggle_detail", {"detail_id": "name"})
        assert "name" in state.selected_details

    def test_max_four_details(self, state) -> None:
        dispatch(state, "toggle_detail", {"detail_id": "key"})
        assert state.selected_details == {"name", "author", "category", "key"}
        with pytest.raises(CommandError, match="Max 3"):
            dispatch(state, "toggle_detail", {"detail_id": "tempo"})
        assert len(state.selected_details) == 4

    def test_toggle_detail_selected_must_be_bool(self, state) -> None:
        with pytest.raises(CommandError, match="selected must be true or false"):
            dispatch(state, "toggle_detail", {"detail_id": "key", "selected": "false"})
        assert state.selected_details == {"name", "author", "category"}

    def test_toggle_detail_off(self, state) -> None:
        dispatch(state, "toggle_detail", {"detail_id": "author"})
        assert state.selected_details == {"name", "category"}

    def test_unknown_detail(self, state) -> None:
        with pytest.raises(CommandError, match="Unknown detail"):
            dispatch(state, "toggle_detail", {"detail_id": "lyrics"})

    def test_reorder_details(self, state) -> None:
        dispatch(state, "reorder_details", {"order": ["key", "name"]})
        assert [d.id for d in state.ordered_details][:3] == ["key", "name", "author"]
        assert len(state.ordered_details) == 12

    def test_set_formatting(self, state) -> None:
        dispatch(state, "set_formatting", {"detail_id": "author", "bold": True, "font_size": 14})
        assert state.formatting["author"] == Formatting(bold=True, italic=False, font_size=14)

    def test_set_formatting_rejects_odd_font_size(self, state) -> None:
        with pytest.raises(CommandError, match="font_size"):
            dispatch(state, "set_formatting", {"detail_id": "author", "font_size": 15})
        assert state.formatting["author"] == Formatting()


class TestSectionCommands:
    """Tests for grouping, all-songs and header style commands."""

    def test_set_grouping(self, state) -> None:
        dispatch(state, "set_grouping", {"context": "tag:2", "enabled": True})
        assert state.grouping["tag:2"] is True

    def test_set_include_all_songs(self, state) -> None:
        dispatch(state, "set_include_all_songs", {"enabled": False})
        assert state.include_all_songs is False

    def test_set_header_style(self, state) -> None:
        dispatch(state, "set_header_style", {"alignment": "center", "in_box": True, "font_size": 20})
        assert state.header_style == HeaderStyle(alignment="center", font_size=20, in_box=True)

    def test_set_header_style_is_all_or_nothing(self, state) -> None:
        with pytest.raises(CommandError, match="alignment"):
            dispatch(state, "set_header_style", {"underline": True, "alignment": "right"})
        assert state.header_style == HeaderStyle()

    def test_set_header_style_unknown_option(self, state) -> None:
        with pytest.raises(CommandError, match="Unknown header style option"):
            dispatch(state, "set_header_style", {"color": "red"})
