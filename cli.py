"""Export the song PDF from the command line, without the web UI."""
import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from churchtools import ChurchToolsClient, ChurchToolsError
from config import (
    CHURCHTOOLS_BASE_URL,
    CHURCHTOOLS_PASSWORD,
    CHURCHTOOLS_TOKEN,
    CHURCHTOOLS_USERNAME,
    LOG_FILE,
    LOG_LEVEL,
    SONGS_PAGE_LIMIT,
)
from log_setup import setup_logging
from pdf_export import EXPORT_FILENAME
from settings_io import SettingsFormatError, dump_settings, parse_settings
from workspace import load_workspace

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export ChurchTools songs as a sectioned PDF.")
    parser.add_argument("--base-url", default=CHURCHTOOLS_BASE_URL, help="ChurchTools instance URL")
    parser.add_argument("--settings", type=Path, help="Settings JSON to apply before exporting")
    parser.add_argument("--out", type=Path, default=Path(EXPORT_FILENAME), help="PDF output path")
    parser.add_argument("--write-settings", type=Path, help="Also write the resulting settings JSON here")
    parser.add_argument("--page-limit", type=int, default=SONGS_PAGE_LIMIT, help="Songs per API request")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else LOG_LEVEL, LOG_FILE)

    try:
        client = ChurchToolsClient(args.base_url, token=CHURCHTOOLS_TOKEN)
        if not CHURCHTOOLS_TOKEN and CHURCHTOOLS_USERNAME and CHURCHTOOLS_PASSWORD:
            client.login(CHURCHTOOLS_USERNAME, CHURCHTOOLS_PASSWORD)
        workspace = load_workspace(client, args.page_limit)
    except ChurchToolsError as exc:
        logger.error("Could not load songs: %s", exc)
        return 1

    if args.settings:
        try:
            workspace.import_settings(parse_settings(args.settings.read_bytes()))
        except (OSError, SettingsFormatError) as exc:
            logger.error("Error importing settings: %s", exc)
            return 2

    if not workspace.visible_songs():
        logger.error("No songs to export. Please select at least one category.")
        return 1

    args.out.write_bytes(workspace.export_pdf())
    logger.info("Wrote %s", args.out)
    if args.write_settings:
        args.write_settings.write_text(dump_settings(workspace.export_settings()), encoding="utf-8")
        logger.info("Wrote %s", args.write_settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
