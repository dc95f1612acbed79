# filepath: song-export/config.py
import os

# --- ChurchTools connection ---

CHURCHTOOLS_BASE_URL = os.getenv("CHURCHTOOLS_BASE_URL", "")
CHURCHTOOLS_TOKEN = os.getenv("CHURCHTOOLS_TOKEN")
CHURCHTOOLS_USERNAME = os.getenv("CHURCHTOOLS_USERNAME")
CHURCHTOOLS_PASSWORD = os.getenv("CHURCHTOOLS_PASSWORD")
# Max songs per request; the API caps pages at 200
SONGS_PAGE_LIMIT = int(os.getenv("SONGS_PAGE_LIMIT", "200"))
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))

# --- Settings uploads (JSON documents) ---

ALLOWED_SETTINGS_MIME = {"application/json", "text/json", "text/plain", "application/octet-stream"}
# Max upload: 1 MB (Flask will 413 if exceeded)
MAX_CONTENT_LENGTH = 1 * 1024 * 1024

# --- Export defaults ---

MAX_DETAIL_COLUMNS = 4
DEFAULT_FONT_SIZE = 11
FONT_SIZE_CHOICES = (8, 9, 10, 11, 12, 13, 14, 16)
DEFAULT_SELECTED_DETAILS = ("name", "author", "category")
DEFAULT_HEADER_FONT_SIZE = 16
SPACER_FONT_SIZE = 6

ALL_SONGS_TITLE = "Alle Lieder"
FALLBACK_TITLE = "All Songs"
FOOTER_DATE_FORMAT = "%d.%m.%Y"

# Other configs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
FLASK_SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret")
