"""MLOD model decoder.

Two modes share one code path: full geometry decode, and a dependency-only
mode (``geometry=False``) that skips the point and normal arrays by seeking
past them. Faces, textures, materials and tags are decoded in both modes.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, List

from ..binary import (
    read_cstring,
    read_exact,
    read_f32,
    read_u8,
    read_u32,
    skip,
    tell_or_none,
)
from ..errors import E_BAD_MAGIC, E_VERTEX_COUNT, malformed
from ..logging import get_logger
from .constants import (
    ALLOWED_VERTEX_COUNTS,
    END_OF_TAGS,
    FACE_VERTEX_SLOTS,
    LOD_MAGIC,
    MODEL_MAGIC,
    NORMAL_RECORD_SIZE,
    POINT_RECORD_SIZE,
    RESERVED_LOD_HEADER_BYTES,
    TAG_BLOCK_MAGIC,
    VERTEX_RECORD_SIZE,
)
from .models import DetailLevel, Face, Model, Point, TagRecord, Vec3, Vertex

__all__ = ["read_model", "decode_model"]

_POINT = struct.Struct("<3fI")
_NORMAL = struct.Struct("<3f")
_VERTEX = struct.Struct("<2I2f")


def _expect_magic(stream: BinaryIO, magic: bytes, label: str) -> None:
    offset = tell_or_none(stream)
    found = read_exact(stream, len(magic), label)
    if found != magic:
        raise malformed(
            E_BAD_MAGIC,
            f"Bad {label}: expected {magic!r}, found {found!r}",
            {"offset": offset, "expected": magic.hex(), "found": found.hex()},
        )


def _read_point(stream: BinaryIO) -> Point:
    x, y, z, flags = _POINT.unpack(
        read_exact(stream, POINT_RECORD_SIZE, "point")
    )
    return Point((x, y, z), flags)


def _read_normal(stream: BinaryIO) -> Vec3:
    return _NORMAL.unpack(read_exact(stream, NORMAL_RECORD_SIZE, "normal"))


def _read_vertex(stream: BinaryIO) -> Vertex:
    point_index, normal_index, u, v = _VERTEX.unpack(
        read_exact(stream, VERTEX_RECORD_SIZE, "vertex")
    )
    return Vertex(point_index, normal_index, (u, v))


def _read_face(stream: BinaryIO) -> Face:
    offset = tell_or_none(stream)
    count = read_u32(stream, "face vertex count")
    if count not in ALLOWED_VERTEX_COUNTS:
        raise malformed(
            E_VERTEX_COUNT,
            f"Face declares {count} vertices (expected 3 or 4)",
            {"offset": offset, "vertex_count": count},
        )
    vertices = tuple(_read_vertex(stream) for _ in range(count))
    # Triangles still reserve the fourth slot.
    for _ in range(FACE_VERTEX_SLOTS - count):
        _read_vertex(stream)
    flags = read_u32(stream, "face flags")
    texture = read_cstring(stream, "face texture")
    material = read_cstring(stream, "face material")
    return Face(vertices, flags, texture, material)


def _read_tags(stream: BinaryIO) -> List[TagRecord]:
    _expect_magic(stream, TAG_BLOCK_MAGIC, "tag block magic")
    tags: List[TagRecord] = []
    while True:
        active = read_u8(stream, "tag flag")
        name = read_cstring(stream, "tag name")
        size = read_u32(stream, "tag size")
        skip(stream, size, f"tag {name}")
        tags.append(TagRecord(name, active, size))
        if name == END_OF_TAGS:
            return tags


def _read_lod(stream: BinaryIO, geometry: bool) -> DetailLevel:
    _expect_magic(stream, LOD_MAGIC, "LOD magic")
    version_major = read_u32(stream, "LOD major version")
    version_minor = read_u32(stream, "LOD minor version")
    num_points = read_u32(stream, "point count")
    num_normals = read_u32(stream, "normal count")
    num_faces = read_u32(stream, "face count")
    read_exact(stream, RESERVED_LOD_HEADER_BYTES, "reserved")

    points: tuple = ()
    normals: tuple = ()
    if geometry:
        points = tuple(_read_point(stream) for _ in range(num_points))
        normals = tuple(_read_normal(stream) for _ in range(num_normals))
    else:
        skip(
            stream,
            num_points * POINT_RECORD_SIZE + num_normals * NORMAL_RECORD_SIZE,
            "geometry",
        )

    faces = tuple(_read_face(stream) for _ in range(num_faces))
    tags = _read_tags(stream)
    resolution = read_f32(stream, "resolution")
    return DetailLevel(
        version_major=version_major,
        version_minor=version_minor,
        resolution=resolution,
        points=points,
        face_normals=normals,
        faces=faces,
        tags=tuple(tags),
    )


def read_model(stream: BinaryIO, *, geometry: bool = True) -> Model:
    """Decode a model container from ``stream``.

    With ``geometry=False`` point and normal arrays are skipped and left
    empty; the stream still ends up positioned after the model.
    """
    _expect_magic(stream, MODEL_MAGIC, "model magic")
    version = read_u32(stream, "model version")
    num_lods = read_u32(stream, "LOD count")
    lods = tuple(_read_lod(stream, geometry) for _ in range(num_lods))
    get_logger().debug(
        "Decoded model: version=%d lods=%d geometry=%s",
        version,
        len(lods),
        geometry,
    )
    return Model(version, lods)


def decode_model(data: bytes, *, geometry: bool = True) -> Model:
    return read_model(io.BytesIO(data), geometry=geometry)
