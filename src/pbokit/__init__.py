"""pbokit package

Codecs for two game-asset containers: PBO archives (named blobs, metadata
and a SHA-1 trailer) and MLOD models (detail levels with faces and tags).

Prefer :mod:`pbokit.api` for file-based helpers and :mod:`pbokit.archive` /
:mod:`pbokit.model` for stream codecs.
"""

from .errors import CodecError, DigestMismatch, MalformedContainer, TruncatedInput

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CodecError",
    "DigestMismatch",
    "MalformedContainer",
    "TruncatedInput",
]
