"""Logging utilities for cdd hooks and notifiers."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "cdd_hooks"

logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the cdd_hooks hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, debug_log: Path | None = None
) -> logging.Logger:
    """Configure the package logger.

    Hooks run inside a host tool, so nothing is written to the terminal unless
    ``verbose`` is set. ``debug_log`` appends every record to a file.
    """
    level = logging.DEBUG if verbose or debug_log is not None else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())

    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(logging.Formatter("[cdd] %(levelname)s %(message)s"))
        logger.addHandler(stream_handler)

    if debug_log is not None:
        try:
            debug_log.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(debug_log, encoding="utf-8")
        except OSError:
            return logger
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(name)s] %(levelname)s %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
