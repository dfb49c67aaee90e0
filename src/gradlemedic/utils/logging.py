"""Logging setup: rich console output on stderr plus an optional log file."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Route log records to stderr through rich.

    Calling again only changes the level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...).
    """
    global _configured

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    if _configured:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


def log_to_file(path: str | Path) -> logging.FileHandler:
    """Also write DEBUG and above to a file.

    Returns:
        The added handler, so callers can remove it.
    """
    handler = logging.FileHandler(path)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler
