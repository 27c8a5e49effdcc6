"""PBO archive layout constants."""

from __future__ import annotations

from ..utils.paths import ARCHIVE_SEPARATOR

# Packing method of the header that opens the metadata block ("Vers").
MARKER_PACKING_METHOD = 0x56657273
PACKING_STORED = 0

# name cstring + 5 x u32
HEADER_FIXED_SIZE = 20

DIGEST_NAME = "sha1"
DIGEST_SIZE = 20
TRAILER_SEPARATOR = b"\x00"
TRAILER_SIZE = len(TRAILER_SEPARATOR) + DIGEST_SIZE

PREFIX_KEY = "prefix"
PREFIX_FILE_NAME = "$PBOPREFIX$"

__all__ = [
    "MARKER_PACKING_METHOD",
    "PACKING_STORED",
    "HEADER_FIXED_SIZE",
    "DIGEST_NAME",
    "DIGEST_SIZE",
    "TRAILER_SEPARATOR",
    "TRAILER_SIZE",
    "PREFIX_KEY",
    "PREFIX_FILE_NAME",
    "ARCHIVE_SEPARATOR",
]
