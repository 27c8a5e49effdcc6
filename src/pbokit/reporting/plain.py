from __future__ import annotations

import sys
import time
from typing import Any, Dict
from .base import (
    Reporter,
    TaskStatus,
    TaskRecord,
    format_completion,
    get_verbosity,
)


class PlainReporter(Reporter):
    """Line-oriented reporter with optional ANSI color.

    Per-entry progress lines are only printed at verbosity >= 1 so that
    packing large trees stays readable.
    """

    supports_progress = False

    def __init__(self, stream=None, use_color: bool | None = None):
        self.stream = stream or sys.stderr
        self.use_color = (
            use_color
            if use_color is not None
            else getattr(self.stream, "isatty", lambda: False)()
        )
        self._tasks: Dict[str, TaskRecord] = {}

    def _c(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def _line(self, prefix: str, message: str) -> None:
        self.stream.write(f"{prefix}: {message}\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec:
            return
        rec.completed += step
        rec.meta.update(meta)
        if get_verbosity() < 1:
            return
        item = meta.get("current_item") or f"item#{rec.completed}"
        total = rec.total if rec.total is not None else "?"
        self.stream.write(
            f"   · {rec.name}: {item} ({rec.completed}/{total})\n"
        )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        self.stream.write(f" {format_completion(rec)}\n")

    def status(self, message: str, **fields: Any) -> None:
        self._line(self._c("32", "INFO"), message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._line(self._c("36", f"VERB{level}"), message)

    def error(self, message: str, **fields: Any) -> None:
        self._line(self._c("31", "ERROR"), message)

    def warning(self, message: str, **fields: Any) -> None:
        self._line(self._c("33", "WARN"), message)

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
