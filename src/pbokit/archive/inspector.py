"""Archive inspection utilities.

Public functions:
- inspect_archive(path) -> dict
- inspect_archive_bytes(data) -> dict
- validate_archive(info) -> list[str]

Inspection always recomputes the trailer digest and reports the outcome
instead of raising, so damaged archives can still be listed.
"""

from __future__ import annotations

import hashlib
import io
from pathlib import Path
from typing import Any, Dict, List

from .constants import (
    DIGEST_NAME,
    DIGEST_SIZE,
    PACKING_STORED,
    TRAILER_SEPARATOR,
    TRAILER_SIZE,
)
from .reader import ArchiveReader

__all__ = [
    "inspect_archive",
    "inspect_archive_bytes",
    "validate_archive",
    "compute_digest",
]


def compute_digest(data: bytes) -> bytes:
    return hashlib.new(DIGEST_NAME, data).digest()


def inspect_archive_bytes(data: bytes) -> Dict[str, Any]:
    reader = ArchiveReader(io.BytesIO(data))
    archive = reader.read()
    body_end = reader.header_size + reader.payload_size
    trailer = data[body_end : body_end + TRAILER_SIZE]
    trailer_present = len(trailer) == TRAILER_SIZE
    calculated = compute_digest(data[:body_end])
    stored = trailer[-DIGEST_SIZE:] if trailer_present else b""
    entries = [
        {
            "name": e.header.name,
            "packing_method": e.header.packing_method,
            "original_size": e.header.original_size,
            "reserved": e.header.reserved,
            "timestamp": e.header.timestamp,
            "data_size": e.header.data_size,
        }
        for e in archive
    ]
    return {
        "file_size": len(data),
        "header_size": reader.header_size,
        "payload_size": reader.payload_size,
        "metadata": dict(archive.metadata),
        "entries": entries,
        "trailer": {
            "present": trailer_present,
            "separator_ok": trailer_present
            and trailer[:1] == TRAILER_SEPARATOR,
            "stored_digest": stored.hex(),
            "calculated_digest": calculated.hex(),
            "digest_match": trailer_present and stored == calculated,
            "extra_bytes": max(0, len(data) - body_end - TRAILER_SIZE),
        },
    }


def inspect_archive(path: str | Path) -> Dict[str, Any]:
    return inspect_archive_bytes(Path(path).read_bytes())


def validate_archive(info: Dict[str, Any]) -> List[str]:
    issues: List[str] = []
    trailer = info["trailer"]
    if not trailer["present"]:
        issues.append("Digest trailer missing")
    else:
        if not trailer["separator_ok"]:
            issues.append("Trailer separator byte is not zero")
        if not trailer["digest_match"]:
            issues.append("Digest mismatch")
    if trailer.get("extra_bytes"):
        issues.append(f"{trailer['extra_bytes']} unexpected bytes after trailer")
    for e in info["entries"]:
        if (
            e["packing_method"] == PACKING_STORED
            and e["original_size"] not in (0, e["data_size"])
        ):
            issues.append(
                f"Entry {e['name']} original size {e['original_size']} "
                f"differs from stored size {e['data_size']}"
            )
    return issues
