"""Logging configuration shared by the web app and the CLI."""
import logging


def setup_logging(level: str | int = logging.INFO, log_file: str | None = None) -> None:
    """Configure logging to the console and, when given, to a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
