"""Dataclass models for decoded MLOD models."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

Vec3 = Tuple[float, float, float]
UV = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class Point:
    coords: Vec3
    flags: int = 0


@dataclass(frozen=True, slots=True)
class Vertex:
    point_index: int
    normal_index: int
    uv: UV = (0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Face:
    vertices: Tuple[Vertex, ...]
    flags: int = 0
    texture: str = ""
    material: str = ""

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def is_triangle(self) -> bool:
        return len(self.vertices) == 3


@dataclass(frozen=True, slots=True)
class Selection:
    # Weights keyed by point / face index.
    points: Dict[int, float] = field(default_factory=dict)
    faces: Dict[int, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TagRecord:
    name: str
    active: int
    size: int


@dataclass(frozen=True, slots=True)
class DetailLevel:
    """One resolution-tagged mesh section.

    ``selections`` and ``properties`` are never filled by the decoder: the
    tag payloads they would come from are skipped uninterpreted. Only the
    tag names and sizes are kept in ``tags``.
    """

    version_major: int
    version_minor: int
    resolution: float
    points: Tuple[Point, ...] = ()
    face_normals: Tuple[Vec3, ...] = ()
    faces: Tuple[Face, ...] = ()
    sharp_edges: Tuple[Tuple[int, int], ...] = ()
    selections: Dict[str, Selection] = field(default_factory=dict)
    properties: Dict[str, str] = field(default_factory=dict)
    tags: Tuple[TagRecord, ...] = ()

    @property
    def tag_names(self) -> List[str]:
        return [t.name for t in self.tags]


@dataclass(frozen=True, slots=True)
class Model:
    version: int
    lods: Tuple[DetailLevel, ...] = ()

    @property
    def resolutions(self) -> List[float]:
        return [lod.resolution for lod in self.lods]

    def find_lod(self, resolution: float) -> Optional[DetailLevel]:
        for lod in self.lods:
            if lod.resolution == resolution:
                return lod
        return None


__all__ = [
    "Vec3",
    "UV",
    "Point",
    "Vertex",
    "Face",
    "Selection",
    "TagRecord",
    "DetailLevel",
    "Model",
]
