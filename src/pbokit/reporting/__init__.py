"""Progress and status reporting backends.

One reporter is active per process (``set_reporter``); codec and API code
fetch it with ``get_reporter`` and wrap long loops in ``task``.
"""

from .base import (
    Reporter,
    TaskStatus,
    get_reporter,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Reporter",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "set_verbosity",
    "task",
    "PlainReporter",
    "JsonLinesReporter",
    "RichReporter",
    "SilentReporter",
]
