import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from config import *
from log_setup import setup_logging

setup_logging(LOG_LEVEL, LOG_FILE)
logger = logging.getLogger(__name__)

app = Flask(__name__)

app.config["SECRET_KEY"] = FLASK_SECRET_KEY
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
app.config["ALLOWED_SETTINGS_MIME"] = ALLOWED_SETTINGS_MIME
app.config["CHURCHTOOLS_BASE_URL"] = CHURCHTOOLS_BASE_URL
app.config["CHURCHTOOLS_TOKEN"] = CHURCHTOOLS_TOKEN
app.config["CHURCHTOOLS_USERNAME"] = CHURCHTOOLS_USERNAME
app.config["CHURCHTOOLS_PASSWORD"] = CHURCHTOOLS_PASSWORD
app.config["SONGS_PAGE_LIMIT"] = SONGS_PAGE_LIMIT
app.url_map.strict_slashes = False

from churchtools import ChurchToolsError
from routes import WORKSPACE_KEY
from routes.export import export_bp
from routes.settings import settings_bp

app.register_blueprint(export_bp)
app.register_blueprint(settings_bp)


@app.errorhandler(ChurchToolsError)
def churchtools_unavailable(exc):
    logger.error("ChurchTools error: %s", exc)
    return jsonify({"ok": False, "error": f"ChurchTools unavailable: {exc}"}), 502


@app.get("/healthz")
def healthz():
    # never touches ChurchTools; just reports whether the catalogs are loaded
    loaded = app.extensions.get(WORKSPACE_KEY) is not None
    return (f"ok | songs={'loaded' if loaded else 'pending'}", 200)


if __name__ == "__main__":
    app.run(debug=True, port=5055)
