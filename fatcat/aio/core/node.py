"""Scan data model.

Plain value types passed between the enumerator, the scheduler and the
collectors. Everything here is immutable once created.
"""

from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# A directory waiting to be enumerated. Consumed exactly once by a worker.
ScanTask = namedtuple('ScanTask', ['path'])


class EntryKind(Enum):
    """Classification of a single directory entry."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"          # sockets, fifos, devices


@dataclass(frozen=True)
class DirEntryInfo:
    """One classified entry produced by a path enumerator.

    Attributes:
        path: Absolute path of the entry
        name: Final path component
        kind: Entry classification
        size: Size in bytes, only set for FILE entries
    """
    path: str
    name: str
    kind: EntryKind
    size: Optional[int] = None

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class FileRecord:
    """A qualifying file: an immutable (path, size) pair."""
    path: str
    size_bytes: int

    def rank_key(self):
        """Sort key giving the final report order.

        Larger files first; equal sizes fall back to ascending path so the
        order never depends on discovery order.
        """
        return (-self.size_bytes, self.path)

    def outranks(self, other: 'FileRecord') -> bool:
        """True if this record belongs above ``other`` in the ranking."""
        if self.size_bytes != other.size_bytes:
            return self.size_bytes > other.size_bytes
        return self.path < other.path

    def __repr__(self) -> str:
        return f"FileRecord({self.path!r}, {self.size_bytes})"


@dataclass(frozen=True)
class ScanStats:
    """Counters for one scan run.

    files_scanned and bytes_scanned cover every regular file visited,
    qualifying or not. files_matched counts files that passed the size
    filter, whether or not they made the top N.
    """
    files_scanned: int = 0
    dirs_scanned: int = 0
    bytes_scanned: int = 0
    errors: int = 0
    files_matched: int = 0


class ScanResult(namedtuple('ScanResult', ['top_files', 'stats', 'root', 'elapsed_seconds'])):
    """Outcome of a completed scan.

    Attributes:
        top_files: Ranked list of FileRecords, largest first
        stats: Final ScanStats
        root: Absolute path of the scanned root
        elapsed_seconds: Wall-clock duration of the scan
    """

    __slots__ = ()

    @property
    def total_size(self) -> int:
        """Combined size of the reported files."""
        return sum(record.size_bytes for record in self.top_files)
