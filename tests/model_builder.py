"""Byte builders for MLOD model fixtures.

Usage:
    from model_builder import face, lod, model
    data = model(1, [lod(faces=[face([(0, 0, 0.0, 0.0)] * 3)])])
"""

from __future__ import annotations

import struct
from typing import Iterable, Sequence, Tuple

VertexSpec = Tuple[int, int, float, float]

END_TAG = "#EndOfFile#"
# Padding slot written after triangle vertices.
PAD_VERTEX: VertexSpec = (0xDEAD, 0xBEEF, 9.5, -9.5)


def cstr(text: str) -> bytes:
    return text.encode("utf-8") + b"\x00"


def point(x: float, y: float, z: float, flags: int = 0) -> bytes:
    return struct.pack("<3fI", x, y, z, flags)


def normal(x: float, y: float, z: float) -> bytes:
    return struct.pack("<3f", x, y, z)


def vertex(spec: VertexSpec) -> bytes:
    return struct.pack("<2I2f", *spec)


def face(
    vertices: Sequence[VertexSpec],
    flags: int = 0,
    texture: str = "",
    material: str = "",
    *,
    count: int | None = None,
) -> bytes:
    out = struct.pack("<I", len(vertices) if count is None else count)
    for v in vertices:
        out += vertex(v)
    for _ in range(4 - len(vertices)):
        out += vertex(PAD_VERTEX)
    out += struct.pack("<I", flags) + cstr(texture) + cstr(material)
    return out


def tag(name: str, payload: bytes = b"", active: int = 1) -> bytes:
    return bytes([active]) + cstr(name) + struct.pack("<I", len(payload)) + payload


def tags(records: Iterable[Tuple[str, bytes]] = ()) -> bytes:
    out = b"TAGG"
    for name, payload in records:
        out += tag(name, payload)
    return out + tag(END_TAG)


def lod(
    points: Sequence[bytes] = (),
    normals: Sequence[bytes] = (),
    faces: Sequence[bytes] = (),
    *,
    resolution: float = 1.0,
    version: Tuple[int, int] = (28, 256),
    tag_block: bytes | None = None,
) -> bytes:
    out = b"P3DM" + struct.pack(
        "<5I", version[0], version[1], len(points), len(normals), len(faces)
    )
    out += b"\x00" * 4
    out += b"".join(points) + b"".join(normals) + b"".join(faces)
    out += tags() if tag_block is None else tag_block
    return out + struct.pack("<f", resolution)


def model(version: int, lods: Sequence[bytes]) -> bytes:
    return b"MLOD" + struct.pack("<2I", version, len(lods)) + b"".join(lods)
