"""Error definitions for pbokit.

Every failure raised by the codecs is a :class:`CodecError` carrying a stable
code, a human message and an optional context mapping (file offset, field
label, expected/actual values). Callers can report which file and offset
failed without the process being terminated.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_TRUNCATED = "E_TRUNCATED"
E_BAD_MAGIC = "E_BAD_MAGIC"
E_VERTEX_COUNT = "E_VERTEX_COUNT"
E_MARKER_POSITION = "E_MARKER_POSITION"
E_DUP_ENTRY = "E_DUP_ENTRY"
E_SIZE_MISMATCH = "E_SIZE_MISMATCH"
E_DIGEST_MISMATCH = "E_DIGEST_MISMATCH"
E_UNSAFE_PATH = "E_UNSAFE_PATH"
E_BAD_METADATA = "E_BAD_METADATA"
E_BAD_NAME = "E_BAD_NAME"
E_BAD_TRAILER = "E_BAD_TRAILER"


@dataclass
class CodecError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class TruncatedInput(CodecError, EOFError):
    """Stream ran out before a field could be read completely."""


class MalformedContainer(CodecError):
    """Structural violation: bad magic, vertex count, marker position, etc."""


class DigestMismatch(CodecError):
    pass


def truncated(
    label: str, wanted: int, got: int, offset: Optional[int] = None
) -> TruncatedInput:
    ctx: Dict[str, Any] = {"field": label, "wanted": wanted, "got": got}
    if offset is not None:
        ctx["offset"] = offset
    return TruncatedInput(
        code=E_TRUNCATED,
        message=f"Unexpected end of stream reading {label}",
        context=ctx,
    )


def malformed(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> MalformedContainer:
    return MalformedContainer(code=code, message=message, context=context)


__all__ = [
    "CodecError",
    "TruncatedInput",
    "MalformedContainer",
    "DigestMismatch",
    "truncated",
    "malformed",
    "E_TRUNCATED",
    "E_BAD_MAGIC",
    "E_VERTEX_COUNT",
    "E_MARKER_POSITION",
    "E_DUP_ENTRY",
    "E_SIZE_MISMATCH",
    "E_DIGEST_MISMATCH",
    "E_UNSAFE_PATH",
    "E_BAD_METADATA",
    "E_BAD_NAME",
    "E_BAD_TRAILER",
]
