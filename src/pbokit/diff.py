"""Structured diff of two archives.

Compares what a decoder observes: metadata pairs and entry payloads. Header
bookkeeping (timestamps, reserved fields) and on-disk order are ignored, so
two archives differing only there compare equal.

The result is JSON-serialisable::

    {"metadata": [...], "entries": [...], "summary": {"count": N}}
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Dict, List

from .archive.models import Archive, entry_sort_key
from .archive.reader import read_archive

__all__ = ["diff_archive_models", "diff_archives"]


def _sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def diff_archive_models(left: Archive, right: Archive) -> Dict[str, Any]:
    metadata_changes: List[Dict[str, Any]] = []
    for key in sorted(set(left.metadata) | set(right.metadata)):
        lv = left.metadata.get(key)
        rv = right.metadata.get(key)
        if lv != rv:
            metadata_changes.append({"key": key, "left": lv, "right": rv})

    entry_changes: List[Dict[str, Any]] = []
    names = set(left.names()) | set(right.names())
    for name in sorted(names, key=entry_sort_key):
        a = left.get(name)
        b = right.get(name)
        if b is None:
            entry_changes.append({"name": name, "status": "removed"})
        elif a is None:
            entry_changes.append({"name": name, "status": "added"})
        elif a.data != b.data:
            entry_changes.append(
                {
                    "name": name,
                    "status": "changed",
                    "left_size": len(a.data),
                    "right_size": len(b.data),
                    "left_sha1": _sha1(a.data),
                    "right_sha1": _sha1(b.data),
                }
            )
    return {
        "metadata": metadata_changes,
        "entries": entry_changes,
        "summary": {"count": len(metadata_changes) + len(entry_changes)},
    }


def diff_archives(left: str | Path, right: str | Path) -> Dict[str, Any]:
    """Diff two archive files on disk."""
    with Path(left).open("rb") as f:
        a = read_archive(f)
    with Path(right).open("rb") as f:
        b = read_archive(f)
    return diff_archive_models(a, b)
