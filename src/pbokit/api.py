"""High-level API for pbokit.

Thin file-based wrappers over the codecs. Every function opens and closes
its own files; the codecs themselves only ever see open streams.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .archive.directory import archive_from_directory, write_directory
from .archive.inspector import (
    inspect_archive as _inspect_archive_impl,
    validate_archive as _validate_archive_impl,
)
from .archive.models import Archive
from .archive.reader import read_archive
from .archive.writer import write_archive
from .diff import diff_archives
from .logging import get_logger, section
from .manifest import build_manifest
from .model.models import Model
from .model.reader import read_model
from .reporting import get_reporter, task

__all__ = [
    "PackOptions",
    "PackResult",
    "pack_directory",
    "read_archive_file",
    "unpack_archive",
    "cat_entry",
    "inspect_archive",
    "validate_archive",
    "load_model",
    "inspect_model",
    "diff_archives",
]


@dataclass(slots=True)
class PackOptions:
    source: Path
    output_path: Path
    # When set, a JSON manifest is written alongside the archive.
    manifest_path: Path | None = None


@dataclass(slots=True)
class PackResult:
    output_file: Path
    bytes_written: int
    entry_count: int
    digest: bytes


def pack_directory(options: PackOptions) -> PackResult:
    logger = get_logger()
    rep = get_reporter()
    source = Path(options.source)
    output = Path(options.output_path)
    with section(f"Pack {source.name}"):
        with task("pack.scan", "Scan source directory"):
            archive = archive_from_directory(source)
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("wb") as f:
            result = write_archive(archive, f)
        if options.manifest_path is not None:
            with task("manifest.emit", "Emit manifest"):
                build_manifest(archive, result, Path(options.manifest_path))
            logger.info("Emitted manifest: %s", options.manifest_path)
    rep.status(
        "Pack summary: "
        + f"file={output.name} entries={len(archive)} "
        + f"bytes={result.bytes_written} prefix={archive.prefix} "
        + f"sha1={result.digest.hex()[:12]}"
    )
    return PackResult(
        output_file=output,
        bytes_written=result.bytes_written,
        entry_count=len(archive),
        digest=result.digest,
    )


def read_archive_file(
    path: str | Path, *, verify_digest: bool = False
) -> Archive:
    with Path(path).open("rb") as f:
        return read_archive(f, verify_digest=verify_digest)


def unpack_archive(
    archive_path: str | Path,
    output_dir: str | Path,
    *,
    verify_digest: bool = False,
) -> Archive:
    """Decode ``archive_path`` and materialize it under ``output_dir``.

    Nothing is written when decoding (or verification) fails.
    """
    rep = get_reporter()
    archive_path = Path(archive_path)
    with section(f"Unpack {archive_path.name}"):
        archive = read_archive_file(archive_path, verify_digest=verify_digest)
        written = write_directory(archive, Path(output_dir))
    rep.status(
        "Unpack summary: "
        + f"file={archive_path.name} entries={len(archive)} "
        + f"files_written={len(written)} verified={verify_digest}"
    )
    return archive


def cat_entry(archive_path: str | Path, name: str) -> bytes:
    """Payload of entry ``name``; raises ``KeyError`` when absent."""
    archive = read_archive_file(archive_path)
    entry = archive.get(name)
    if entry is None:
        raise KeyError(name)
    return entry.data


def inspect_archive(path: str | Path) -> dict:
    return _inspect_archive_impl(path)


def validate_archive(path: str | Path) -> list[str]:
    return _validate_archive_impl(_inspect_archive_impl(path))


def load_model(path: str | Path, *, geometry: bool = True) -> Model:
    with Path(path).open("rb") as f:
        return read_model(f, geometry=geometry)


def inspect_model(path: str | Path, *, geometry: bool = True) -> dict:
    model = load_model(path, geometry=geometry)
    lods: list[dict[str, Any]] = []
    for lod in model.lods:
        textures = sorted({f.texture for f in lod.faces if f.texture})
        materials = sorted({f.material for f in lod.faces if f.material})
        lods.append(
            {
                "resolution": lod.resolution,
                "version": f"{lod.version_major}.{lod.version_minor}",
                "points": len(lod.points),
                "face_normals": len(lod.face_normals),
                "faces": len(lod.faces),
                "triangles": sum(1 for f in lod.faces if f.is_triangle),
                "textures": textures,
                "materials": materials,
                "tags": lod.tag_names,
            }
        )
    info: dict[str, Any] = {
        "version": model.version,
        "lod_count": len(model.lods),
        "geometry": geometry,
        "lods": lods,
    }
    get_reporter().status(
        "Model summary: "
        + f"file={Path(path).name} version={model.version} lods={len(lods)} "
        + f"faces={sum(l['faces'] for l in lods)}"
    )
    return info
