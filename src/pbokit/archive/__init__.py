from .models import Archive, ArchiveEntry, EntryHeader
from .reader import ArchiveReader, read_archive, decode_archive
from .writer import WriteResult, write_archive, encode_archive
from .directory import archive_from_directory, write_directory

__all__ = [
    "Archive",
    "ArchiveEntry",
    "EntryHeader",
    "ArchiveReader",
    "read_archive",
    "decode_archive",
    "WriteResult",
    "write_archive",
    "encode_archive",
    "archive_from_directory",
    "write_directory",
]
