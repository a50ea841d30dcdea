"""fatcat - Hunt down the fat files hogging your disk space.

fatcat walks a directory tree with a pool of concurrent workers and reports
the N largest files above a size threshold.

Choose your entry point:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous:
    from fatcat import scan

Asynchronous:
    from fatcat.aio import scan_async
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.2.0"

from . import aio
from .api import scan, scan_config
from .config import ScanConfig
from .aio import (
    FileRecord,
    ScanStats,
    ScanResult,
    ScanError,
    RootInvalid,
    InvalidConfig,
    AccessError,
    MetadataError,
)

__all__ = [
    "__version__",
    "aio",
    "scan",
    "scan_config",
    "ScanConfig",
    "FileRecord",
    "ScanStats",
    "ScanResult",
    "ScanError",
    "RootInvalid",
    "InvalidConfig",
    "AccessError",
    "MetadataError",
]
