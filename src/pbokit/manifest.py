"""Pack manifest generation.

The manifest is an optional JSON artifact summarising a packed archive. It is
only produced when explicitly requested (``pack --emit-manifest``).

Contents:
- archive prefix and metadata
- per-entry name, size, absolute payload offset and SHA-1
- header block size, total size and archive digest
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

from .archive.models import Archive
from .archive.writer import WriteResult

__all__ = ["build_manifest", "manifest_dict"]

MANIFEST_VERSION = 1


def manifest_dict(archive: Archive, result: WriteResult) -> dict[str, Any]:
    # Payload offsets follow the on-disk (sorted) order.
    offset = result.header_size
    entries = []
    for entry in archive.sorted_entries():
        entries.append(
            {
                "name": entry.name,
                "size": len(entry.data),
                "offset": offset,
                "sha1": hashlib.sha1(entry.data).hexdigest(),
            }
        )
        offset += len(entry.data)
    return {
        "version": MANIFEST_VERSION,
        "prefix": archive.prefix,
        "metadata": dict(archive.metadata),
        "file_size": result.bytes_written,
        "header_size": result.header_size,
        "payload_size": result.payload_size,
        "digest": result.digest.hex(),
        "counts": {
            "entries": len(entries),
            "metadata": len(archive.metadata),
        },
        "entries": entries,
    }


def build_manifest(
    archive: Archive, result: WriteResult, output_path: Path
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = manifest_dict(archive, result)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path
