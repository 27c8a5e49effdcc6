"""Path utilities (archive names and safe resolution)."""

from __future__ import annotations
from pathlib import Path, PurePosixPath

from ..errors import CodecError, E_UNSAFE_PATH

__all__ = ["ARCHIVE_SEPARATOR", "archive_name", "safe_file_path"]

ARCHIVE_SEPARATOR = "\\"


def archive_name(path: Path, root: Path) -> str:
    """Root-relative path of ``path`` using backslash separators."""
    return ARCHIVE_SEPARATOR.join(path.relative_to(root).parts)


def safe_file_path(base_dir: Path, name: str) -> Path:
    """Resolve an archive entry name below ``base_dir``.

    Raises :class:`CodecError` (``E_UNSAFE_PATH``) if it escapes the base.
    """
    base_dir = base_dir.resolve()
    relative = PurePosixPath(name.replace(ARCHIVE_SEPARATOR, "/"))
    resolved = (base_dir / relative).resolve()
    try:
        resolved.relative_to(base_dir)
    except ValueError as e:
        raise CodecError(
            code=E_UNSAFE_PATH,
            message=f"Entry '{name}' resolves outside {base_dir}",
            context={"name": name},
        ) from e
    if resolved == base_dir:
        raise CodecError(
            code=E_UNSAFE_PATH,
            message=f"Entry '{name}' does not name a file",
            context={"name": name},
        )
    return resolved
