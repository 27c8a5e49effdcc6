from __future__ import annotations

import json
import sys
import time
from typing import Any, Dict
from .base import Reporter, TaskStatus, TaskRecord, get_verbosity

# "<Kind> summary: k=v k=v" status lines are additionally emitted as
# structured summary events.
_SUMMARY_TYPES = ("pack", "unpack", "inspect", "model", "diff", "manifest")


class JsonLinesReporter(Reporter):
    """Machine-readable JSON lines reporter."""

    supports_progress = False

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}

    def _emit(self, obj: dict) -> None:
        self.stream.write(json.dumps(obj, sort_keys=True) + "\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        self._emit(
            {
                "event": "task_start",
                "id": task_id,
                "name": name,
                "total": total,
                **meta,
            }
        )

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec:
            return
        rec.completed += step
        self._emit(
            {
                "event": "task_progress",
                "id": task_id,
                "completed": rec.completed,
                **meta,
            }
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
        self._emit(
            {
                "event": "task_end",
                "id": task_id,
                "status": status.name.lower(),
                "completed": rec.completed,
                "total": rec.total,
                "duration_seconds": rec.duration,
                **rec.meta,
            }
        )

    def _maybe_summary(self, message: str, **fields: Any) -> None:
        head, sep, tail = message.partition(":")
        words = head.strip().lower().split()
        if not sep or len(words) != 2 or words[1] != "summary":
            return
        if words[0] not in _SUMMARY_TYPES:
            return
        kv_pairs = {}
        for token in tail.split():
            k, eq, v = token.partition("=")
            if eq:
                kv_pairs[k] = v
        self._emit(
            {
                "event": "summary",
                "summary_type": words[0],
                "raw": message,
                **kv_pairs,
                **fields,
            }
        )

    def _status(self, message: str, level: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": level, **fields}
        )

    def status(self, message: str, **fields: Any) -> None:
        self._maybe_summary(message, **fields)
        self._status(message, "info", **fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._status(message, f"verbose{level}", vlevel=level, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._status(message, "error", **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._status(message, "warning", **fields)

    def section(self, title: str) -> None:
        self._emit({"event": "section", "title": title})
