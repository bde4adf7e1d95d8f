"""Logging setup shared by the CLI and the job API."""

from __future__ import annotations

import logging
import os

_CONFIGURED = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once.

    Args:
        level: Optional level name ("DEBUG", "INFO", ...). Falls back to the
               LOG_LEVEL environment variable, then INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        if level:
            logging.getLogger().setLevel(_level_from_name(level))
        return

    logging.basicConfig(
        level=_level_from_name(level or os.getenv("LOG_LEVEL") or "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _CONFIGURED = True


def _level_from_name(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with global config ensured."""
    setup_logging()
    return logging.getLogger(name)
