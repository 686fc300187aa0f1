"""Logging setup for the jarmod CLI."""

from __future__ import annotations

import logging
from pathlib import Path


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "jarmod"

# marks handlers installed here so a second call replaces only those
_HANDLER_MARKER = "_jarmod_handler"


def log_level(debug: bool) -> int:
    """Return DEBUG when artifact tracing is on, INFO otherwise."""

    return logging.DEBUG if debug else logging.INFO


def configure_logging(log_file: Path, *, debug: bool = False) -> logging.Logger:
    """Attach console and file handlers to the ``jarmod`` logger.

    With ``debug`` the file and console both receive DEBUG records, which
    includes descriptor matches and tool output. Handlers owned by other
    code (pytest's caplog, an embedding build tool) are left in place.
    """

    level = log_level(debug)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    for handler in (logging.StreamHandler(), logging.FileHandler(log_file, encoding="utf-8")):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
    return logger
