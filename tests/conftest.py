"""
Pytest fixtures shared by the test suite.

Songs, tags and categories are small in-memory catalogs; nothing talks to a
real ChurchTools instance.
"""

import pytest

from models import Arrangement, Category, NamedSource, PlainSource, SelectionState, Song, Tag
from workspace import ExportWorkspace

PRAISE = Tag(1, "Praise")
WORSHIP = Tag(2, "Worship")
CHRISTMAS = Tag(3, "Christmas")

HYMNS = Category(10, "Hymns")
MODERN = Category(20, "Modern")


@pytest.fixture
def tags() -> list[Tag]:
    return [PRAISE, WORSHIP, CHRISTMAS]


@pytest.fixture
def categories() -> list[Category]:
    return [HYMNS, MODERN]


@pytest.fixture
def songs() -> list[Song]:
    return [
        Song(
            id=1,
            name="Way Maker",
            author="Sinach",
            ccli="7115744",
            category=MODERN,
            tags=[PRAISE, WORSHIP],
            arrangements=[
                Arrangement(id=11, key="E", tempo=68, duration=305, source=NamedSource("Feiert Jesus"),
                            source_reference="FJ6 12", is_default=True),
            ],
        ),
        Song(
            id=2,
            name="amazing Grace",
            author="John Newton",
            copyright="Public Domain",
            category=HYMNS,
            tags=[WORSHIP],
            arrangements=[Arrangement(id=21, key="G", tempo=80, source=PlainSource("Hymnal"))],
        ),
        Song(id=3, name="Build My Life", author="Pat Barrett", category=MODERN, tags=[PRAISE]),
        Song(id=4, name="Ärmel hoch", category=None, tags=[PRAISE]),
        Song(id=5, name="Agnus Dei", author="Michael W. Smith", category=MODERN, tags=[WORSHIP]),
    ]


@pytest.fixture
def state(tags, categories) -> SelectionState:
    return SelectionState.default(tags, categories)


@pytest.fixture
def workspace(songs, tags, categories) -> ExportWorkspace:
    return ExportWorkspace(songs, tags, categories)


@pytest.fixture
def client(workspace, monkeypatch):
    """Flask test client bound to the in-memory workspace."""
    from app import app
    from routes import WORKSPACE_KEY

    app.config["TESTING"] = True
    monkeypatch.setitem(app.extensions, WORKSPACE_KEY, workspace)
    with app.test_client() as test_client:
        yield test_client
