"""Asynchronous implementation of fatcat.

Workers are asyncio tasks sharing one work queue; directory reads run on a
thread pool so several directories are listed at once.
"""

# Core abstractions
from .core import (
    ScanTask,
    EntryKind,
    DirEntryInfo,
    FileRecord,
    ScanStats,
    ScanResult,
    AsyncPathEnumerator,
    ScanCollector,
    TopKCollector,
    ScanStatsCollector,
    ScanState,
    TraversalScheduler,
)

# Adapters
from .adapters import (
    ScandirEnumerator,
    SizeThresholdFilter,
    passes,
)

# Errors and policies
from .error_policies import (
    ScanError,
    RootInvalid,
    InvalidConfig,
    FileScanError,
    AccessError,
    MetadataError,
    ErrorPolicy,
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
)

# High-level API
from .api import (
    scan_async,
    scan_with_config,
    resolve_root,
)

__all__ = [
    # Data model
    'ScanTask',
    'EntryKind',
    'DirEntryInfo',
    'FileRecord',
    'ScanStats',
    'ScanResult',
    # Core
    'AsyncPathEnumerator',
    'ScanCollector',
    'TopKCollector',
    'ScanStatsCollector',
    'ScanState',
    'TraversalScheduler',
    # Adapters
    'ScandirEnumerator',
    'SizeThresholdFilter',
    'passes',
    # Errors
    'ScanError',
    'RootInvalid',
    'InvalidConfig',
    'FileScanError',
    'AccessError',
    'MetadataError',
    'ErrorPolicy',
    'CollectErrorsPolicy',
    'ContinueOnErrorsPolicy',
    # High-level API
    'scan_async',
    'scan_with_config',
    'resolve_root',
]
