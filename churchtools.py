"""ChurchTools REST client: songs, song tags and song categories."""
from __future__ import annotations

import logging
import math

import requests

from config import REQUEST_TIMEOUT, SONGS_PAGE_LIMIT
from models import Arrangement, Category, NamedSource, PlainSource, Song, Tag

logger = logging.getLogger(__name__)


class ChurchToolsError(RuntimeError):
    """A ChurchTools request failed or returned something unusable."""


# --- Payload -> model ---

def _int_or_none(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    return None


def _text(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _source_from_api(raw):
    if isinstance(raw, str):
        return PlainSource(raw) if raw.strip() else None
    if isinstance(raw, dict) and raw.get("name"):
        return NamedSource(str(raw["name"]))
    return None


def arrangement_from_api(data: dict) -> Arrangement:
    return Arrangement(
        id=_int_or_none(data.get("id")),
        key=_text(data.get("key") or data.get("keyOfArrangement")),
        tempo=_int_or_none(data.get("tempo") if data.get("tempo") is not None else data.get("bpm")),
        duration=_int_or_none(data.get("duration")),
        source=_source_from_api(data.get("source")),
        source_reference=_text(data.get("sourceReference")),
        description=_text(data.get("description")),
        is_default=data.get("isDefault") is True,
    )


def tag_from_api(data: dict) -> Tag | None:
    tag_id = _int_or_none(data.get("id"))
    if tag_id is None or not data.get("name"):
        return None
    return Tag(tag_id, str(data["name"]))


def category_from_api(data: dict) -> Category | None:
    cat_id = _int_or_none(data.get("id"))
    if cat_id is None or not data.get("name"):
        return None
    return Category(cat_id, str(data["name"]))


def song_from_api(data: dict) -> Song:
    category = category_from_api(data["category"]) if isinstance(data.get("category"), dict) else None
    tags = [t for t in (tag_from_api(raw) for raw in data.get("tags") or [] if isinstance(raw, dict)) if t]
    return Song(
        id=_int_or_none(data.get("id")) or 0,
        name=_text(data.get("name")),
        author=_text(data.get("author")),
        copyright=_text(data.get("copyright")),
        ccli=_text(data.get("ccli")),
        category=category,
        tags=tags,
        arrangements=[arrangement_from_api(a) for a in data.get("arrangements") or [] if isinstance(a, dict)],
    )


def _by_name(items):
    return sorted(items, key=lambda item: item.name.casefold())


# --- HTTP client ---

class ChurchToolsClient:
    def __init__(self, base_url: str, token: str | None = None,
                 session: requests.Session | None = None, timeout: int = REQUEST_TIMEOUT):
        if not base_url:
            raise ChurchToolsError("CHURCHTOOLS_BASE_URL is not set")
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/api"):
            self.base_url += "/api"
        self.session = session or requests.Session()
        self.timeout = timeout
        if token:
            self.session.headers["Authorization"] = f"Login {token}"

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ChurchToolsError(f"{method} {path} failed: {exc}") from exc
        if r.status_code != 200:
            raise ChurchToolsError(f"{method} {path} returned {r.status_code}: {r.text[:200]}")
        try:
            body = r.json()
        except ValueError as exc:
            raise ChurchToolsError(f"{method} {path} returned invalid JSON") from exc
        # Most endpoints wrap the payload in {"data": ...}
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def get(self, path: str, params: dict | None = None):
        return self._request("GET", path, params=params)

    def login(self, username: str, password: str) -> dict:
        return self._request("POST", "/login", json={"username": username, "password": password})

    def whoami(self) -> dict:
        return self.get("/whoami")

    def fetch_songs(self, limit: int = SONGS_PAGE_LIMIT) -> list[Song]:
        """All songs (with tags), walking pages until a short or empty page."""
        songs: list[Song] = []
        page = 1
        while True:
            batch = self.get("/songs", params={"include": "tags", "limit": limit, "page": page})
            if not isinstance(batch, list) or not batch:
                break
            songs.extend(song_from_api(raw) for raw in batch if isinstance(raw, dict))
            logger.info("Loaded page %d: %d songs (total: %d)", page, len(batch), len(songs))
            if len(batch) < limit:
                break
            page += 1
        return songs

    def fetch_tags(self) -> list[Tag]:
        raw = self.get("/tags/song")
        tags = [tag_from_api(t) for t in raw or [] if isinstance(t, dict)]
        return _by_name(t for t in tags if t)

    def fetch_categories(self) -> list[Category]:
        masterdata = self.get("/event/masterdata") or {}
        raw = masterdata.get("songCategories") if isinstance(masterdata, dict) else None
        categories = [category_from_api(c) for c in raw or [] if isinstance(c, dict)]
        return _by_name(c for c in categories if c)
