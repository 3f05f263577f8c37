"""Logging setup shared by the genpreview CLI, session and service."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "genpreview"
CONSOLE_FORMAT = "[genpreview] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``genpreview``, e.g. ``genpreview.parsing``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a console handler and, when ``log_file`` is given, a file sink.

    The console shows debug records only with ``verbose``. The file sink always
    records at debug level so a run can be inspected after the fact without
    rerunning it verbosely.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False

    # Repeated invocations in one process replace earlier handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)
        logger.debug("Writing log records to %s", log_file)

    return logger


__all__ = ["configure_logging", "get_logger"]
