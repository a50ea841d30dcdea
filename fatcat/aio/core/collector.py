"""Shared result collectors for a scan.

Collectors receive data from every worker while the scan runs. Each one
owns a single lock around its state, and no collector call ever happens
while another lock is held.
"""

import heapq
import threading
from abc import ABC, abstractmethod
from dataclasses import fields, replace
from typing import Any, Iterable, List

from .node import FileRecord, ScanStats


class ScanCollector(ABC):
    """Abstract base class for scan collectors.

    Collectors aggregate data submitted by workers. They can be reset
    between runs and expose their result through ``snapshot``.
    """

    def __init__(self):
        """Initialize collector with empty state."""
        self._lock = threading.Lock()
        self.reset()

    @abstractmethod
    def reset(self):
        """Reset collector state.

        Called before starting a new scan.
        """
        pass

    @abstractmethod
    def snapshot(self) -> Any:
        """Get a consistent copy of the collected result."""
        pass


class _Ranked:
    """Heap entry ordering FileRecords from worst to best.

    The heap root is the record that would be evicted first: the smallest
    size, and among equal sizes the lexicographically largest path.
    """

    __slots__ = ('record',)

    def __init__(self, record: FileRecord):
        self.record = record

    def __lt__(self, other: '_Ranked') -> bool:
        return other.record.outranks(self.record)


class TopKCollector(ScanCollector):
    """Keeps the N largest FileRecords seen so far.

    A bounded min-heap holds at most ``top_n`` records; a candidate replaces
    the current smallest member only if it outranks it. Submission is
    O(log N) under a single lock, so it is safe from any worker.

    Example:
        top = TopKCollector(2)
        top.submit(FileRecord('/a', 10))
        top.submit(FileRecord('/b', 30))
        top.submit(FileRecord('/c', 20))
        top.snapshot()   # [FileRecord('/b', 30), FileRecord('/c', 20)]
    """

    def __init__(self, top_n: int):
        """Initialize the aggregator.

        Args:
            top_n: Maximum number of records to keep
        """
        if top_n < 0:
            raise ValueError("top_n cannot be negative")
        self.top_n = top_n
        super().__init__()

    def reset(self):
        """Drop all collected records."""
        with self._lock:
            self._heap: List[_Ranked] = []

    def submit(self, record: FileRecord) -> None:
        """Offer a record; keep it only if it ranks in the top N."""
        if self.top_n == 0:
            return

        entry = _Ranked(record)
        with self._lock:
            if len(self._heap) < self.top_n:
                heapq.heappush(self._heap, entry)
            elif self._heap[0] < entry:
                heapq.heapreplace(self._heap, entry)

    def merge(self, other: 'TopKCollector') -> None:
        """Fold another collector's records into this one.

        Lets callers keep one collector per worker and combine them once
        the scan completes.
        """
        for record in other.snapshot():
            self.submit(record)

    def extend(self, records: Iterable[FileRecord]) -> None:
        """Submit each of ``records`` in turn."""
        for record in records:
            self.submit(record)

    def snapshot(self) -> List[FileRecord]:
        """Get collected records, largest first, ties by ascending path.

        Returns:
            New list of at most ``top_n`` records
        """
        with self._lock:
            records = [entry.record for entry in self._heap]
        records.sort(key=FileRecord.rank_key)
        return records

    def smallest(self):
        """Current eviction candidate, or None when empty."""
        with self._lock:
            return self._heap[0].record if self._heap else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)


class ScanStatsCollector(ScanCollector):
    """Thread-safe counters behind ScanStats.

    All counters only ever grow during a scan.
    """

    FIELDS = tuple(f.name for f in fields(ScanStats))

    def reset(self):
        """Zero all counters."""
        with self._lock:
            self._stats = ScanStats()

    def increment(self, field: str, delta: int = 1) -> None:
        """Add ``delta`` to one counter.

        Args:
            field: ScanStats field name
            delta: Non-negative amount to add

        Raises:
            ValueError: For unknown fields or negative deltas
        """
        if field not in self.FIELDS:
            raise ValueError(f"Unknown statistics field: {field}")
        if delta < 0:
            raise ValueError("Statistics counters cannot decrease")

        with self._lock:
            self._stats = replace(self._stats, **{field: getattr(self._stats, field) + delta})

    def record_file(self, size_bytes: int, matched: bool) -> None:
        """Count one visited regular file in a single update."""
        with self._lock:
            s = self._stats
            self._stats = replace(
                s,
                files_scanned=s.files_scanned + 1,
                bytes_scanned=s.bytes_scanned + size_bytes,
                files_matched=s.files_matched + (1 if matched else 0),
            )

    def snapshot(self) -> ScanStats:
        """Get the current counters as an immutable ScanStats."""
        with self._lock:
            return self._stats
