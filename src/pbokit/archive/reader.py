"""PBO archive decoder.

The header table is read by a small state machine::

    EXPECT_FIRST_HEADER -> READING_METADATA -> READING_HEADERS
                        \\-------------------> READING_HEADERS
    READING_HEADERS -> READING_PAYLOADS -> DONE

Only ``EXPECT_FIRST_HEADER`` accepts the metadata marker; any later marker is
a :class:`~pbokit.errors.MalformedContainer` error. Digest verification is
performed only when requested.
"""

from __future__ import annotations

import hashlib
import io
from enum import Enum, auto
from typing import Any, BinaryIO, Dict, List, Optional

from ..binary import read_cstring, read_exact, read_u32
from ..errors import (
    DigestMismatch,
    E_BAD_TRAILER,
    E_DIGEST_MISMATCH,
    E_DUP_ENTRY,
    E_MARKER_POSITION,
    malformed,
)
from ..logging import get_logger
from .constants import (
    DIGEST_NAME,
    DIGEST_SIZE,
    MARKER_PACKING_METHOD,
    TRAILER_SEPARATOR,
)
from .models import Archive, ArchiveEntry, EntryHeader

__all__ = ["ArchiveReader", "read_archive", "decode_archive"]


class _State(Enum):
    EXPECT_FIRST_HEADER = auto()
    READING_METADATA = auto()
    READING_HEADERS = auto()
    READING_PAYLOADS = auto()
    DONE = auto()


class _TrackingStream:
    """Counts (and optionally hashes) every byte read through it."""

    def __init__(self, stream: BinaryIO, hasher: Optional[Any] = None):
        self.raw = stream
        self._hasher = hasher
        self.consumed = 0

    def read(self, size: int = -1) -> bytes:
        data = self.raw.read(size)
        if data:
            self.consumed += len(data)
            if self._hasher is not None:
                self._hasher.update(data)
        return data

    def tell(self) -> int:
        return self.consumed


def read_entry_header(stream) -> EntryHeader:
    return EntryHeader(
        name=read_cstring(stream, "entry name"),
        packing_method=read_u32(stream, "packing method"),
        original_size=read_u32(stream, "original size"),
        reserved=read_u32(stream, "reserved"),
        timestamp=read_u32(stream, "timestamp"),
        data_size=read_u32(stream, "data size"),
    )


class ArchiveReader:
    """Single-use decoder for one archive stream.

    After :meth:`read` returns, ``header_size`` and ``payload_size`` describe
    the byte span that precedes the trailer.
    """

    def __init__(self, stream: BinaryIO, *, verify_digest: bool = False):
        self.verify_digest = verify_digest
        self._hasher = hashlib.new(DIGEST_NAME) if verify_digest else None
        self._stream = _TrackingStream(stream, self._hasher)
        self._state = _State.EXPECT_FIRST_HEADER
        self._headers: List[EntryHeader] = []
        self._seen: set[str] = set()
        self._metadata: Dict[str, str] = {}
        self._entries: List[ArchiveEntry] = []
        self.header_size = 0
        self.payload_size = 0
        self.digest: Optional[bytes] = None

    # States -------------------------------------------------------------------
    def _on_header(self) -> None:
        offset = self._stream.consumed
        header = read_entry_header(self._stream)
        if header.packing_method == MARKER_PACKING_METHOD:
            if self._state is not _State.EXPECT_FIRST_HEADER:
                raise malformed(
                    E_MARKER_POSITION,
                    "Metadata marker header outside first position",
                    {"offset": offset, "index": len(self._headers)},
                )
            self._state = _State.READING_METADATA
            return
        self._state = _State.READING_HEADERS
        if header.name == "":
            self.header_size = self._stream.consumed
            self._state = _State.READING_PAYLOADS
            return
        if header.name in self._seen:
            raise malformed(
                E_DUP_ENTRY,
                f"Duplicate entry name '{header.name}'",
                {"offset": offset, "name": header.name},
            )
        self._seen.add(header.name)
        self._headers.append(header)

    def _on_metadata(self) -> None:
        while True:
            key = read_cstring(self._stream, "metadata key")
            if key == "":
                break
            self._metadata[key] = read_cstring(self._stream, "metadata value")
        self._state = _State.READING_HEADERS

    def _on_payloads(self) -> None:
        for header in self._headers:
            data = read_exact(
                self._stream, header.data_size, f"payload of {header.name}"
            )
            self._entries.append(ArchiveEntry(header, data))
            self.payload_size += header.data_size
        self._state = _State.DONE

    def _check_trailer(self) -> None:
        calculated = self._hasher.digest()
        # Trailer bytes bypass the hashing wrapper.
        raw = self._stream.raw
        separator = read_exact(raw, 1, "trailer separator")
        if separator != TRAILER_SEPARATOR:
            raise malformed(
                E_BAD_TRAILER,
                "Trailer separator byte is not zero",
                {
                    "offset": self.header_size + self.payload_size,
                    "found": separator.hex(),
                },
            )
        stored = read_exact(raw, DIGEST_SIZE, "trailer digest")
        if stored != calculated:
            raise DigestMismatch(
                code=E_DIGEST_MISMATCH,
                message="Archive digest does not match its contents",
                context={
                    "stored": stored.hex(),
                    "calculated": calculated.hex(),
                    "offset": self.header_size + self.payload_size,
                },
            )
        self.digest = stored

    def read(self) -> Archive:
        handlers = {
            _State.EXPECT_FIRST_HEADER: self._on_header,
            _State.READING_HEADERS: self._on_header,
            _State.READING_METADATA: self._on_metadata,
            _State.READING_PAYLOADS: self._on_payloads,
        }
        while self._state is not _State.DONE:
            handlers[self._state]()
        if self.verify_digest:
            self._check_trailer()
        archive = Archive(tuple(self._entries), self._metadata)
        get_logger().debug(
            "Decoded archive: entries=%d metadata=%d header_bytes=%d "
            "payload_bytes=%d verified=%s",
            len(archive),
            len(archive.metadata),
            self.header_size,
            self.payload_size,
            self.verify_digest,
        )
        return archive


def read_archive(stream: BinaryIO, *, verify_digest: bool = False) -> Archive:
    """Decode an archive from ``stream`` positioned at its first byte."""
    return ArchiveReader(stream, verify_digest=verify_digest).read()


def decode_archive(data: bytes, *, verify_digest: bool = False) -> Archive:
    return read_archive(io.BytesIO(data), verify_digest=verify_digest)
