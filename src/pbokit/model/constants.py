"""MLOD model container layout constants."""

from __future__ import annotations

MODEL_MAGIC = b"MLOD"
LOD_MAGIC = b"P3DM"
TAG_BLOCK_MAGIC = b"TAGG"
END_OF_TAGS = "#EndOfFile#"

# 3 x f32 position + u32 flags
POINT_RECORD_SIZE = 16
# 3 x f32
NORMAL_RECORD_SIZE = 12
# u32 point index + u32 normal index + 2 x f32 uv
VERTEX_RECORD_SIZE = 16
# Faces always occupy four vertex slots on disk.
FACE_VERTEX_SLOTS = 4
ALLOWED_VERTEX_COUNTS = (3, 4)
RESERVED_LOD_HEADER_BYTES = 4

__all__ = [
    "MODEL_MAGIC",
    "LOD_MAGIC",
    "TAG_BLOCK_MAGIC",
    "END_OF_TAGS",
    "POINT_RECORD_SIZE",
    "NORMAL_RECORD_SIZE",
    "VERTEX_RECORD_SIZE",
    "FACE_VERTEX_SLOTS",
    "ALLOWED_VERTEX_COUNTS",
    "RESERVED_LOD_HEADER_BYTES",
]
