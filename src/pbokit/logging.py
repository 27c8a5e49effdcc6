"""Logging utilities for pbokit.

Codec modules log through the stdlib ``pbokit`` logger; once
:func:`configure_logging` ran, records are forwarded to the active reporter
so that plain, rich and JSON output stay consistent.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from .reporting import get_reporter

_LOGGER_NAME = "pbokit"

__all__ = [
    "get_logger",
    "configure_logging",
    "section",
]


class _ReporterHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        rep = get_reporter()
        msg = self.format(record)
        lvl = record.levelno
        if lvl >= logging.ERROR:
            rep.error(msg)
        elif lvl >= logging.WARNING:
            rep.warning(msg)
        elif lvl >= logging.INFO:
            rep.status(msg)
        else:
            rep.verbose(msg)


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def configure_logging(verbosity: int = 0) -> None:
    """Route ``pbokit`` records to the reporter.

    Verbosity 0 shows warnings and errors only, 1 adds INFO summaries and
    2 adds DEBUG decode details.
    """
    logger = get_logger()
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = _ReporterHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


@contextmanager
def section(title: str) -> Iterator[logging.Logger]:
    logger = get_logger()
    get_reporter().section(title)
    try:
        yield logger
    finally:
        logger.debug("end section: %s", title)
