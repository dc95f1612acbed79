from __future__ import annotations

from dataclasses import dataclass, field

from config import (
    DEFAULT_FONT_SIZE,
    DEFAULT_HEADER_FONT_SIZE,
    DEFAULT_SELECTED_DETAILS,
)

# Grouping-map key for the "all songs" section (and the fallback section)
ALL_SONGS_CONTEXT = "allSongs"
HEADER_ALIGNMENTS = ("left", "center")


def tag_context(tag_id: int) -> str:
    """Grouping-map key for the section of one tag."""
    return f"tag:{tag_id}"


# --- Arrangement source (plain text or a named songbook reference) ---
@dataclass(frozen=True)
class PlainSource:
    text: str


@dataclass(frozen=True)
class NamedSource:
    name: str


Source = PlainSource | NamedSource


# --- Song records (owned by the song source, read-only here) ---
@dataclass
class Arrangement:
    id: int | None = None
    key: str | None = None
    tempo: int | None = None        # BPM
    duration: int | None = None     # seconds
    source: Source | None = None
    source_reference: str | None = None   # e.g. hymnal number
    description: str | None = None
    is_default: bool = False


@dataclass(frozen=True)
class Tag:
    id: int
    name: str


@dataclass(frozen=True)
class Category:
    id: int
    name: str


@dataclass
class Song:
    id: int
    name: str | None = None
    author: str | None = None
    copyright: str | None = None
    ccli: str | None = None
    category: Category | None = None
    tags: list[Tag] = field(default_factory=list)
    arrangements: list[Arrangement] = field(default_factory=list)

    def has_tag(self, tag_id: int) -> bool:
        return any(t.id == tag_id for t in self.tags)

    def __repr__(self) -> str:
        return f"<Song id={self.id} name={self.name!r}>"


# --- Detail columns ---
@dataclass(frozen=True)
class DetailField:
    id: str
    label: str


NAME_DETAIL = "name"

# Default column order; "name" is mandatory
DETAIL_CATALOG: tuple[DetailField, ...] = (
    DetailField("name", "Name"),
    DetailField("author", "Author"),
    DetailField("category", "Category"),
    DetailField("sourceReference", "Song Number"),
    DetailField("ccli", "CCLI"),
    DetailField("copyright", "Copyright"),
    DetailField("tags", "Tags"),
    DetailField("source", "Source"),
    DetailField("key", "Key"),
    DetailField("tempo", "Tempo (BPM)"),
    DetailField("duration", "Duration"),
    DetailField("description", "Description"),
)


@dataclass
class Formatting:
    bold: bool = False
    italic: bool = False
    font_size: int = DEFAULT_FONT_SIZE

    def to_dict(self) -> dict:
        return {"bold": self.bold, "italic": self.italic, "fontSize": self.font_size}


@dataclass
class HeaderStyle:
    alignment: str = "left"
    font_size: int = DEFAULT_HEADER_FONT_SIZE
    bold: bool = True
    italic: bool = False
    underline: bool = False
    in_box: bool = False

    # transport key -> attribute name
    FIELDS = {
        "alignment": "alignment",
        "fontSize": "font_size",
        "bold": "bold",
        "italic": "italic",
        "underline": "underline",
        "inBox": "in_box",
    }

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for key, attr in self.FIELDS.items()}


# --- Live selection state (one per session) ---
@dataclass
class SelectionState:
    """Everything the user has chosen for the export.

    Membership and order are kept apart: the ``selected_*`` sets answer
    "is it in?", the ``ordered_*`` lists hold the full catalog in display
    order. ``tags`` and ``details`` are the authoritative catalogs that
    imported orderings are reconciled against.
    """

    tags: list[Tag]
    details: tuple[DetailField, ...] = DETAIL_CATALOG
    selected_category_ids: set[int] = field(default_factory=set)
    selected_tag_ids: set[int] = field(default_factory=set)
    ordered_tags: list[Tag] = field(default_factory=list)
    selected_details: set[str] = field(default_factory=set)
    ordered_details: list[DetailField] = field(default_factory=list)
    formatting: dict[str, Formatting] = field(default_factory=dict)
    grouping: dict[str, bool] = field(default_factory=dict)
    include_all_songs: bool = True
    header_style: HeaderStyle = field(default_factory=HeaderStyle)

    @classmethod
    def default(cls, tags: list[Tag], categories: list[Category]) -> "SelectionState":
        tags = list(tags)
        grouping = {ALL_SONGS_CONTEXT: False}
        grouping.update({tag_context(t.id): False for t in tags})
        return cls(
            tags=tags,
            selected_category_ids={c.id for c in categories},
            selected_tag_ids={t.id for t in tags},
            ordered_tags=list(tags),
            selected_details=set(DEFAULT_SELECTED_DETAILS),
            ordered_details=list(DETAIL_CATALOG),
            formatting={d.id: Formatting() for d in DETAIL_CATALOG},
            grouping=grouping,
        )

    @property
    def detail_ids(self) -> set[str]:
        return {d.id for d in self.details}

    def formatting_for(self, detail_id: str) -> Formatting:
        return self.formatting.get(detail_id) or Formatting()

    def grouping_for(self, context: str) -> bool:
        return self.grouping.get(context) is True
