"""Core abstractions for concurrent scanning.

This module defines the data model, the enumerator interface, the shared
collectors and the scheduler that ties them together.
"""

from .node import (
    ScanTask,
    EntryKind,
    DirEntryInfo,
    FileRecord,
    ScanStats,
    ScanResult,
)
from .adapter import AsyncPathEnumerator
from .collector import (
    ScanCollector,
    TopKCollector,
    ScanStatsCollector,
)
from .traverser import (
    ScanState,
    TraversalScheduler,
)

__all__ = [
    # Data model
    'ScanTask',
    'EntryKind',
    'DirEntryInfo',
    'FileRecord',
    'ScanStats',
    'ScanResult',
    # Enumerator
    'AsyncPathEnumerator',
    # Collectors
    'ScanCollector',
    'TopKCollector',
    'ScanStatsCollector',
    # Scheduler
    'ScanState',
    'TraversalScheduler',
]
