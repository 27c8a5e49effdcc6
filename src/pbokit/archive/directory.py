"""Projection between a directory tree and an :class:`Archive`.

``$PBOPREFIX$`` files hold the archive metadata: one bare value (the prefix)
or ``key=value`` per line, up to the first empty line. They are never stored
as payload entries.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Tuple

from ..binary import STRING_ENCODING, STRING_ERRORS
from ..errors import E_BAD_METADATA, malformed
from ..logging import get_logger
from ..reporting import get_reporter
from ..utils.paths import archive_name, safe_file_path
from .constants import PREFIX_FILE_NAME, PREFIX_KEY
from .models import Archive, ArchiveEntry

__all__ = [
    "list_files",
    "parse_prefix_file",
    "format_prefix_file",
    "archive_from_directory",
    "write_directory",
]


def list_files(root: Path) -> List[Path]:
    """All regular files below ``root`` (explicit stack, sorted per level)."""
    files: List[Path] = []
    stack: List[Path] = [root]
    while stack:
        current = stack.pop()
        children = sorted(current.iterdir(), key=lambda p: p.name)
        subdirs: List[Path] = []
        for child in children:
            if child.is_dir():
                subdirs.append(child)
            else:
                files.append(child)
        # Reverse so the alphabetically first directory is walked next.
        stack.extend(reversed(subdirs))
    return files


def parse_prefix_file(text: str) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if not line:
            break
        key, sep, value = line.partition("=")
        if sep and not key:
            raise malformed(
                E_BAD_METADATA,
                f"Metadata line without a key: {line!r}",
                {"line": line},
            )
        if sep:
            metadata[key] = value
        else:
            metadata[PREFIX_KEY] = line
    return metadata


def format_prefix_file(metadata: Dict[str, str]) -> str:
    lines: List[str] = []
    for key, value in metadata.items():
        # Each pair must survive parse_prefix_file unchanged.
        if "=" in key or any(c in key + value for c in "\r\n"):
            raise malformed(
                E_BAD_METADATA,
                f"Metadata pair {key!r}={value!r} cannot be stored in "
                f"{PREFIX_FILE_NAME}",
                {"key": key, "value": value},
            )
        lines.append(f"{key}={value}\n")
    return "".join(lines)


def archive_from_directory(root: Path) -> Archive:
    """Build an archive from every file under ``root``."""
    logger = get_logger()
    root = Path(root)
    metadata: Dict[str, str] = {}
    entries: List[Tuple[str, bytes]] = []
    for path in list_files(root):
        if path.name == PREFIX_FILE_NAME:
            metadata.update(
                parse_prefix_file(
                    path.read_text(
                        encoding=STRING_ENCODING, errors=STRING_ERRORS
                    )
                )
            )
            logger.debug("Read metadata from %s", path)
            continue
        entries.append((archive_name(path, root), path.read_bytes()))
    if PREFIX_KEY not in metadata:
        metadata[PREFIX_KEY] = root.resolve().name
    logger.debug(
        "Projected %s: entries=%d prefix=%s",
        root,
        len(entries),
        metadata[PREFIX_KEY],
    )
    return Archive(
        tuple(ArchiveEntry.stored(n, d) for n, d in entries), metadata
    )


def write_directory(archive: Archive, root: Path) -> List[Path]:
    """Materialize ``archive`` below ``root``; returns the files written.

    Every target path and the metadata file are checked before anything is
    written, so a rejected archive leaves ``root`` untouched.
    """
    root = Path(root)
    targets = [(entry, safe_file_path(root, entry.name)) for entry in archive]
    prefix_text = (
        format_prefix_file(archive.metadata) if archive.metadata else None
    )
    root.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    if prefix_text is not None:
        prefix_path = root / PREFIX_FILE_NAME
        prefix_path.write_text(
            prefix_text, encoding=STRING_ENCODING, errors=STRING_ERRORS
        )
        written.append(prefix_path)
    rep = get_reporter()
    rep.start_task("unpack.entries", "Extract entries", total=len(archive))
    for entry, target in targets:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(entry.data)
        written.append(target)
        rep.advance("unpack.entries", current_item=entry.name)
    rep.end_task("unpack.entries", entries=len(archive))
    return written
