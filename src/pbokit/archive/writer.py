"""PBO archive encoder.

Layout emitted::

    marker header | metadata pairs | "" | sorted entry headers | end header
    | payloads (same order) | 0x00 | sha1(everything before the trailer)

Entry order is case-insensitive by name and is the single ordering authority
for both the header table and the payload stream. Header bookkeeping fields
(``reserved``, ``timestamp``) are always written as zero and entries are
always stored uncompressed.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import io
import struct
from typing import BinaryIO, Iterable, List, Mapping

from ..binary import pack_cstring
from ..logging import get_logger
from ..reporting import get_reporter
from .constants import (
    DIGEST_NAME,
    MARKER_PACKING_METHOD,
    PACKING_STORED,
    PREFIX_KEY,
    TRAILER_SEPARATOR,
)
from .models import Archive, ArchiveEntry, EntryHeader

__all__ = [
    "WriteResult",
    "pack_entry_header",
    "pack_metadata_block",
    "pack_header_block",
    "write_archive",
    "encode_archive",
]

_HEADER_FIELDS = struct.Struct("<5I")

_MARKER_HEADER = EntryHeader(name="", packing_method=MARKER_PACKING_METHOD)
_END_HEADER = EntryHeader(name="", packing_method=PACKING_STORED)


@dataclass(frozen=True, slots=True)
class WriteResult:
    bytes_written: int
    header_size: int
    payload_size: int
    digest: bytes


def pack_entry_header(header: EntryHeader) -> bytes:
    return pack_cstring(header.name) + _HEADER_FIELDS.pack(
        header.packing_method,
        header.original_size,
        header.reserved,
        header.timestamp,
        header.data_size,
    )


def pack_metadata_block(metadata: Mapping[str, str]) -> bytes:
    """Key/value pairs (``prefix`` first) terminated by an empty key."""
    out = bytearray()
    if PREFIX_KEY in metadata:
        out += pack_cstring(PREFIX_KEY) + pack_cstring(metadata[PREFIX_KEY])
    for key, value in metadata.items():
        if key == PREFIX_KEY:
            continue
        out += pack_cstring(key) + pack_cstring(value)
    out += pack_cstring("")
    return bytes(out)


def pack_header_block(
    metadata: Mapping[str, str], entries: Iterable[ArchiveEntry]
) -> bytes:
    block = bytearray(pack_entry_header(_MARKER_HEADER))
    block += pack_metadata_block(metadata)
    for entry in entries:
        size = len(entry.data)
        block += pack_entry_header(
            EntryHeader(
                name=entry.name,
                packing_method=PACKING_STORED,
                original_size=size,
                data_size=size,
            )
        )
    block += pack_entry_header(_END_HEADER)
    return bytes(block)


def write_archive(archive: Archive, output: BinaryIO) -> WriteResult:
    """Serialize ``archive`` to ``output`` and return size/digest details."""
    logger = get_logger()
    rep = get_reporter()
    ordered: List[ArchiveEntry] = archive.sorted_entries()
    header_block = pack_header_block(archive.metadata, ordered)
    h = hashlib.new(DIGEST_NAME)

    output.write(header_block)
    h.update(header_block)

    payload_size = 0
    rep.start_task("write.payloads", "Entry payloads", total=len(ordered))
    for entry in ordered:
        output.write(entry.data)
        h.update(entry.data)
        payload_size += len(entry.data)
        rep.advance("write.payloads", current_item=entry.name)
    rep.end_task(
        "write.payloads", entries=len(ordered), bytes=payload_size
    )

    digest = h.digest()
    output.write(TRAILER_SEPARATOR)
    output.write(digest)
    total = (
        len(header_block) + payload_size + len(TRAILER_SEPARATOR) + len(digest)
    )
    logger.info(
        "Wrote archive: entries=%d header_bytes=%d payload_bytes=%d "
        "total=%d sha1=%s",
        len(ordered),
        len(header_block),
        payload_size,
        total,
        digest.hex()[:12],
    )
    return WriteResult(
        bytes_written=total,
        header_size=len(header_block),
        payload_size=payload_size,
        digest=digest,
    )


def encode_archive(archive: Archive) -> bytes:
    buf = io.BytesIO()
    write_archive(archive, buf)
    return buf.getvalue()
