"""Little-endian primitive reads/writes shared by the container codecs.

All readers work on any object with a ``read(n)`` method; ``skip`` prefers a
relative ``seek`` when the stream supports it. Short reads raise
:class:`~pbokit.errors.TruncatedInput`.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Optional

from .errors import truncated

__all__ = [
    "STRING_ENCODING",
    "STRING_ERRORS",
    "tell_or_none",
    "read_exact",
    "read_u8",
    "read_u32",
    "read_f32",
    "read_cstring",
    "write_u32",
    "write_f32",
    "write_cstring",
    "pack_cstring",
    "skip",
]

STRING_ENCODING = "utf-8"
# Round-trips arbitrary (non UTF-8) name bytes through str.
STRING_ERRORS = "surrogateescape"

_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


def tell_or_none(stream: BinaryIO) -> Optional[int]:
    try:
        return stream.tell()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None


def read_exact(stream: BinaryIO, size: int, label: str = "bytes") -> bytes:
    if size == 0:
        return b""
    offset = tell_or_none(stream)
    data = stream.read(size)
    if data is None or len(data) != size:
        raise truncated(label, size, len(data or b""), offset)
    return data


def read_u8(stream: BinaryIO, label: str = "u8") -> int:
    return read_exact(stream, 1, label)[0]


def read_u32(stream: BinaryIO, label: str = "u32") -> int:
    return _U32.unpack(read_exact(stream, 4, label))[0]


def read_f32(stream: BinaryIO, label: str = "f32") -> float:
    return _F32.unpack(read_exact(stream, 4, label))[0]


def read_cstring(stream: BinaryIO, label: str = "cstring") -> str:
    """Read bytes up to and including a NUL; return the text before it."""
    offset = tell_or_none(stream)
    buf = bytearray()
    while True:
        ch = stream.read(1)
        if not ch:
            raise truncated(label, len(buf) + 1, len(buf), offset)
        if ch == b"\x00":
            break
        buf += ch
    return buf.decode(STRING_ENCODING, STRING_ERRORS)


def write_u32(stream: BinaryIO, value: int) -> None:
    stream.write(_U32.pack(value))


def write_f32(stream: BinaryIO, value: float) -> None:
    stream.write(_F32.pack(value))


def pack_cstring(text: str) -> bytes:
    return text.encode(STRING_ENCODING, STRING_ERRORS) + b"\x00"


def write_cstring(stream: BinaryIO, text: str) -> None:
    stream.write(pack_cstring(text))


def skip(stream: BinaryIO, size: int, label: str = "skip") -> None:
    """Advance ``size`` bytes without interpreting them."""
    if size <= 0:
        return
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        stream.seek(size, io.SEEK_CUR)
        return
    read_exact(stream, size, label)
