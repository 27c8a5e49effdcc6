"""Dataclass models for PBO archives.

An :class:`Archive` is one ordered sequence of entries (header + payload),
indexed additionally by name. Header-table order is the sequence order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from ..errors import (
    CodecError,
    E_BAD_METADATA,
    E_BAD_NAME,
    E_DUP_ENTRY,
    E_SIZE_MISMATCH,
    malformed,
)
from .constants import PACKING_STORED, PREFIX_KEY

__all__ = ["EntryHeader", "ArchiveEntry", "Archive", "entry_sort_key"]


def entry_sort_key(name: str) -> Tuple[str, str]:
    # Case-insensitive order; exact name only breaks ties.
    return (name.lower(), name)


@dataclass(frozen=True, slots=True)
class EntryHeader:
    name: str
    packing_method: int = PACKING_STORED
    original_size: int = 0
    reserved: int = 0
    timestamp: int = 0
    data_size: int = 0


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    header: EntryHeader
    data: bytes

    def __post_init__(self) -> None:
        if self.header.data_size != len(self.data):
            raise CodecError(
                code=E_SIZE_MISMATCH,
                message=f"Entry '{self.header.name}' declares "
                f"{self.header.data_size} bytes but holds {len(self.data)}",
                context={
                    "name": self.header.name,
                    "declared": self.header.data_size,
                    "actual": len(self.data),
                },
            )

    @property
    def name(self) -> str:
        return self.header.name

    @classmethod
    def stored(cls, name: str, data: bytes) -> "ArchiveEntry":
        size = len(data)
        return cls(
            EntryHeader(
                name=name,
                packing_method=PACKING_STORED,
                original_size=size,
                data_size=size,
            ),
            bytes(data),
        )


@dataclass(frozen=True, slots=True)
class Archive:
    entries: Tuple[ArchiveEntry, ...] = ()
    metadata: Dict[str, str] = field(default_factory=dict)
    _index: Dict[str, ArchiveEntry] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        entries = tuple(self.entries)
        index: Dict[str, ArchiveEntry] = {}
        for entry in entries:
            if not entry.name or "\x00" in entry.name:
                raise malformed(
                    E_BAD_NAME,
                    f"Invalid entry name {entry.name!r}",
                    {"name": entry.name},
                )
            if entry.name in index:
                raise malformed(
                    E_DUP_ENTRY,
                    f"Duplicate entry name '{entry.name}'",
                    {"name": entry.name},
                )
            index[entry.name] = entry
        for key, value in self.metadata.items():
            # An empty key terminates the metadata block on disk.
            if not key or "\x00" in key or "\x00" in value:
                raise malformed(
                    E_BAD_METADATA,
                    f"Invalid metadata pair {key!r}={value!r}",
                    {"key": key, "value": value},
                )
        object.__setattr__(self, "entries", entries)
        object.__setattr__(self, "metadata", dict(self.metadata))
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_files(
        cls,
        files: Mapping[str, bytes],
        metadata: Optional[Mapping[str, str]] = None,
    ) -> "Archive":
        return cls(
            tuple(ArchiveEntry.stored(n, d) for n, d in files.items()),
            dict(metadata or {}),
        )

    @property
    def prefix(self) -> Optional[str]:
        return self.metadata.get(PREFIX_KEY)

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def get(self, name: str) -> Optional[ArchiveEntry]:
        return self._index.get(name)

    def files(self) -> Dict[str, bytes]:
        return {e.name: e.data for e in self.entries}

    def sorted_entries(self) -> List[ArchiveEntry]:
        return sorted(self.entries, key=lambda e: entry_sort_key(e.name))

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return iter(self.entries)
