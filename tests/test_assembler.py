"""
Unit tests for assembler: columns, sections, grouping and cells.
"""

from assembler import active_columns, assemble, filter_songs, is_spacer
from config import ALL_SONGS_TITLE, FALLBACK_TITLE
from models import ALL_SONGS_CONTEXT, Formatting, Song, Tag, tag_context
from ordering import reconcile


def names(section) -> list[str]:
    return [row[0].text for row in section.song_rows]


class TestActiveColumns:
    """Tests for active_columns."""

    def test_selected_in_detail_order(self, state) -> None:
        state.selected_details = {"category", "name", "author"}
        assert active_columns(state) == ["name", "author", "category"]

    def test_follows_reordered_details(self, state) -> None:
        state.selected_details = {"name", "tempo"}
        state.ordered_details = reconcile(["tempo"], state.details)
        assert active_columns(state) == ["tempo", "name"]

    def test_truncates_five_to_four_keeping_name(self, state) -> None:
        state.selected_details = {"name", "author", "category", "key", "tempo"}
        state.ordered_details = reconcile(["author", "category", "key", "tempo", "name"], state.details)
        columns = active_columns(state)
        assert len(columns) == 4
        assert columns == ["author", "category", "key", "name"]

    def test_truncation_in_catalog_order(self, state) -> None:
        state.selected_details = {"name", "author", "category", "key", "tempo", "duration"}
        assert active_columns(state) == ["name", "author", "category", "key"]


class TestSections:
    """Tests for assemble: which sections appear and in what order."""

    def test_all_songs_then_selected_tags_in_order(self, songs, state, tags) -> None:
        state.ordered_tags = [tags[1], tags[0], tags[2]]
        sections = assemble(songs, state)
        assert [s.title for s in sections] == [ALL_SONGS_TITLE, "Worship", "Praise"]
        assert [s.context for s in sections] == [ALL_SONGS_CONTEXT, tag_context(2), tag_context(1)]

    def test_tag_sections_hold_only_tagged_songs(self, songs, state) -> None:
        state.include_all_songs = False
        state.selected_tag_ids = {2}
        [section] = assemble(songs, state)
        assert names(section) == ["Way Maker", "amazing Grace", "Agnus Dei"]

    def test_empty_tag_gets_no_section(self, songs, state) -> None:
        state.include_all_songs = False
        state.selected_tag_ids = {3}
        sections = assemble(songs + [Song(id=9, name="Solo", tags=[Tag(1, "Praise")])], state)
        assert [s.title for s in sections] == [FALLBACK_TITLE]

    def test_fallback_when_nothing_selected(self, songs, state) -> None:
        state.include_all_songs = False
        state.selected_tag_ids = set()
        [section] = assemble(songs, state)
        assert section.title == FALLBACK_TITLE
        assert section.context == ALL_SONGS_CONTEXT
        assert len(section.song_rows) == len(songs)

    def test_no_fallback_when_all_songs_enabled(self, songs, state) -> None:
        state.selected_tag_ids = set()
        sections = assemble(songs, state)
        assert [s.title for s in sections] == [ALL_SONGS_TITLE]

    def test_unselected_tag_ignored(self, songs, state) -> None:
        state.selected_tag_ids = {1}
        assert [s.title for s in assemble(songs, state)] == [ALL_SONGS_TITLE, "Praise"]

    def test_all_songs_section_emitted_even_when_empty(self, state) -> None:
        state.include_all_songs = True
        sections = assemble([], state)
        assert [s.title for s in sections] == [ALL_SONGS_TITLE]
        assert sections[0].rows == []


class TestGrouping:
    """Tests for alphabetical grouping inside a section."""

    def test_off_keeps_input_order_without_spacers(self, songs, state) -> None:
        section = assemble(songs, state)[0]
        assert names(section) == [s.name for s in songs]
        assert not any(is_spacer(r) for r in section.rows)

    def test_on_sorts_and_inserts_spacers(self, songs, state) -> None:
        state.grouping[ALL_SONGS_CONTEXT] = True
        section = assemble(songs, state)[0]

        assert names(section) == ["Agnus Dei", "amazing Grace", "Ärmel hoch", "Build My Life", "Way Maker"]
        spacer_flags = [is_spacer(r) for r in section.rows]
        # A, a and Ä share a letter; B and W each start a new group
        assert spacer_flags == [False, False, False, True, False, True, False]
        assert not spacer_flags[0]

    def test_accented_initials_join_their_letter(self, state) -> None:
        state.grouping[ALL_SONGS_CONTEXT] = True
        songs = [Song(id=1, name="Azur"), Song(id=2, name="Ärmel"), Song(id=3, name="Apfel")]
        section = assemble(songs, state)[0]
        assert names(section) == ["Apfel", "Ärmel", "Azur"]
        assert not any(is_spacer(r) for r in section.rows)

    def test_spacer_cells_are_small(self, songs, state) -> None:
        state.grouping[ALL_SONGS_CONTEXT] = True
        section = assemble(songs, state)[0]
        spacer = next(r for r in section.rows if is_spacer(r))
        assert len(spacer) == len(section.columns)
        assert all(c.font_size == 6 for c in spacer)

    def test_sort_is_stable_for_equal_names(self, state) -> None:
        state.grouping[ALL_SONGS_CONTEXT] = True
        state.selected_details = {"name", "author"}
        songs = [Song(id=1, name="Holy", author="first"), Song(id=2, name="holy", author="second")]
        section = assemble(songs, state)[0]
        assert [r[1].text for r in section.rows] == ["first", "second"]

    def test_grouping_is_per_section(self, songs, state) -> None:
        state.grouping[tag_context(1)] = True
        sections = {s.title: s for s in assemble(songs, state)}
        assert names(sections["Praise"]) == ["Ärmel hoch", "Build My Life", "Way Maker"]
        assert names(sections[ALL_SONGS_TITLE]) == [s.name for s in songs]

    def test_untitled_songs_sort_first(self, state) -> None:
        state.grouping[ALL_SONGS_CONTEXT] = True
        songs = [Song(id=1, name="Zion"), Song(id=2, name=None), Song(id=3, name="Zeal")]
        section = assemble(songs, state)[0]
        assert names(section) == ["Untitled", "Zeal", "Zion"]
        assert [is_spacer(r) for r in section.rows] == [False, True, False, False]


class TestCells:
    """Tests for cell text and formatting."""

    def test_cells_carry_column_formatting(self, songs, state) -> None:
        state.formatting["author"] = Formatting(bold=True, italic=True, font_size=9)
        row = assemble(songs, state)[0].rows[0]
        assert [c.text for c in row] == ["Way Maker", "Sinach", "Modern"]
        assert (row[1].bold, row[1].italic, row[1].font_size) == (True, True, 9)
        assert (row[0].bold, row[0].italic, row[0].font_size) == (False, False, 11)

    def test_missing_formatting_falls_back_to_default(self, songs, state) -> None:
        state.formatting = {}
        row = assemble(songs, state)[0].rows[0]
        assert all(c.font_size == 11 and not c.bold for c in row)


def test_filter_songs_keeps_uncategorized(songs) -> None:
    visible = filter_songs(songs, {10})
    assert [s.id for s in visible] == [2, 4]
