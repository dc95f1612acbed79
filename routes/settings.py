import logging
from datetime import date

from flask import Blueprint, Response, flash, jsonify, redirect, request, url_for

from commands import CommandError
from routes import allowed_settings_file, current_workspace, wants_json_response
from settings_io import SettingsFormatError, dump_settings, parse_settings, settings_filename

logger = logging.getLogger(__name__)

settings_bp = Blueprint("settings", __name__)


@settings_bp.get("/state")
def current_state():
    return jsonify(current_workspace().export_settings())


@settings_bp.post("/commands/<name>")
def run_command(name):
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return jsonify({"ok": False, "error": "Command payload must be a JSON object."}), 400
    workspace = current_workspace()
    try:
        workspace.dispatch(name, payload)
    except CommandError as exc:
        logger.info("Rejected command %s: %s", name, exc)
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "settings": workspace.export_settings()})


@settings_bp.get("/settings/export")
def export_settings():
    document = current_workspace().export_settings()
    logger.info("Settings exported")
    resp = Response(dump_settings(document), mimetype="application/json")
    resp.headers["Content-Disposition"] = f'attachment; filename="{settings_filename(date.today())}"'
    return resp


@settings_bp.post("/settings/import")
def import_settings():
    file = request.files.get("file")
    try:
        if file and file.filename:
            if not allowed_settings_file(file):
                raise SettingsFormatError("Please upload a .json settings file.")
            document = parse_settings(file.read())
        elif request.is_json:
            document = parse_settings(request.get_data())
        else:
            raise SettingsFormatError("No settings file uploaded.")
        current_workspace().import_settings(document)
    except SettingsFormatError as exc:
        logger.warning("Error importing settings: %s", exc)
        msg = f"Error importing settings: {exc}"
        if wants_json_response():
            return jsonify({"ok": False, "error": msg}), 400
        flash(msg, "danger")
        return redirect(url_for("export.index"))

    if wants_json_response():
        return jsonify({"ok": True, "settings": current_workspace().export_settings()})
    flash("Settings imported successfully!", "success")
    return redirect(url_for("export.index"))
