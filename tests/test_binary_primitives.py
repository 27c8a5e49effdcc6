import io
import struct

import pytest

from pbokit.binary import (
    read_cstring,
    read_exact,
    read_f32,
    read_u32,
    skip,
    write_cstring,
    write_f32,
    write_u32,
)
from pbokit.errors import E_TRUNCATED, TruncatedInput


def test_u32_f32_are_little_endian():
    buf = io.BytesIO()
    write_u32(buf, 0x01020304)
    write_f32(buf, 1.5)
    assert buf.getvalue() == b"\x04\x03\x02\x01" + struct.pack("<f", 1.5)
    buf.seek(0)
    assert read_u32(buf) == 0x01020304
    assert read_f32(buf) == 1.5


def test_cstring_consumes_terminator():
    stream = io.BytesIO(b"abc\x00def\x00")
    assert read_cstring(stream) == "abc"
    assert stream.tell() == 4
    assert read_cstring(stream) == "def"


def test_empty_cstring():
    stream = io.BytesIO(b"\x00rest")
    assert read_cstring(stream) == ""
    assert stream.read() == b"rest"


def test_cstring_keeps_non_utf8_bytes():
    stream = io.BytesIO(b"caf\xe9\x00")
    name = read_cstring(stream)
    out = io.BytesIO()
    write_cstring(out, name)
    assert out.getvalue() == b"caf\xe9\x00"


def test_unterminated_cstring_is_truncated():
    with pytest.raises(TruncatedInput) as exc:
        read_cstring(io.BytesIO(b"abc"), "entry name")
    assert exc.value.code == E_TRUNCATED
    assert exc.value.context["field"] == "entry name"


def test_short_read_raises_eof_error():
    with pytest.raises(EOFError):
        read_u32(io.BytesIO(b"\x01\x02"))


def test_read_exact_zero_bytes():
    assert read_exact(io.BytesIO(b""), 0) == b""


class _Pipe:
    """Non-seekable sequential stream."""

    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)

    def read(self, size=-1):
        return self._inner.read(size)

    def seekable(self):
        return False


def test_skip_on_seekable_and_sequential_streams():
    seekable = io.BytesIO(b"0123456789")
    skip(seekable, 4)
    assert seekable.read(1) == b"4"

    pipe = _Pipe(b"0123456789")
    skip(pipe, 4)
    assert pipe.read(1) == b"4"


def test_skip_past_end_of_sequential_stream_fails():
    with pytest.raises(TruncatedInput):
        skip(_Pipe(b"01"), 4)
