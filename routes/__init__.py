"""Blueprints plus the helpers they share."""
import logging
import mimetypes
import threading

from flask import current_app, request

from churchtools import ChurchToolsClient
from workspace import ExportWorkspace, load_workspace

logger = logging.getLogger(__name__)

WORKSPACE_KEY = "song_export"
_load_lock = threading.Lock()


def wants_json_response() -> bool:
    """
    Lightweight helper to see if the caller prefers a JSON response.
    Looks at Accept header, X-Requested-With, or JSON body.
    """
    accept = (request.headers.get("Accept") or "").lower()
    if "application/json" in accept:
        return True
    if request.headers.get("X-Requested-With") == "XMLHttpRequest":
        return True
    if request.is_json:
        return True
    return False


def allowed_settings_file(file_storage) -> bool:
    if not file_storage or not file_storage.filename:
        return False
    mt = (file_storage.mimetype or "").lower()
    # Fallback: guess from filename if mimetype missing
    if not mt:
        mt = mimetypes.guess_type(file_storage.filename)[0] or ""
    return mt in current_app.config["ALLOWED_SETTINGS_MIME"] or file_storage.filename.lower().endswith(".json")


def _connect() -> ChurchToolsClient:
    cfg = current_app.config
    client = ChurchToolsClient(cfg["CHURCHTOOLS_BASE_URL"], token=cfg.get("CHURCHTOOLS_TOKEN"))
    if not cfg.get("CHURCHTOOLS_TOKEN") and cfg.get("CHURCHTOOLS_USERNAME") and cfg.get("CHURCHTOOLS_PASSWORD"):
        client.login(cfg["CHURCHTOOLS_USERNAME"], cfg["CHURCHTOOLS_PASSWORD"])
    return client


def current_workspace() -> ExportWorkspace:
    """The app's workspace, loaded from ChurchTools on first use."""
    workspace = current_app.extensions.get(WORKSPACE_KEY)
    if workspace is not None:
        return workspace
    with _load_lock:
        workspace = current_app.extensions.get(WORKSPACE_KEY)
        if workspace is None:
            client = _connect()
            user = client.whoami() or {}
            logger.info("Connected to ChurchTools as %s %s", user.get("firstName", ""), user.get("lastName", ""))
            workspace = load_workspace(client, current_app.config["SONGS_PAGE_LIMIT"])
            current_app.extensions[WORKSPACE_KEY] = workspace
    return workspace
