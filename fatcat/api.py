"""Synchronous API for fatcat.

Thin blocking wrappers around the async scanner for callers that are not
running an event loop.
"""

import asyncio
from typing import Optional

from .aio.api import scan_async, scan_with_config
from .aio.core import ScanResult
from .aio.core.traverser import ProgressCallback
from .config import DEFAULT_PROGRESS_INTERVAL, ScanConfig


def scan(
    root_path,
    min_size_bytes: int,
    top_n: int,
    worker_count: Optional[int] = None,
    follow_file_symlinks: bool = False,
    progress_callback: Optional[ProgressCallback] = None,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    verbose: bool = False,
) -> ScanResult:
    """Find the ``top_n`` largest files of at least ``min_size_bytes``.

    Blocking version of ``fatcat.aio.scan_async``; must not be called from
    inside a running event loop.

    Raises:
        RootInvalid: If the root is missing or not a directory
        InvalidConfig: If a parameter is out of range

    Example:
        >>> top_files, stats, *_ = scan('/home', 100 * 1024 * 1024, 20)
        >>> print(stats.files_scanned, len(top_files))
    """
    return asyncio.run(scan_async(
        root_path,
        min_size_bytes,
        top_n,
        worker_count=worker_count,
        follow_file_symlinks=follow_file_symlinks,
        progress_callback=progress_callback,
        progress_interval=progress_interval,
        verbose=verbose,
    ))


def scan_config(config: ScanConfig, progress_callback: Optional[ProgressCallback] = None,
                verbose: bool = False) -> ScanResult:
    """Blocking scan driven by a ScanConfig."""
    return asyncio.run(scan_with_config(config, progress_callback=progress_callback,
                                        verbose=verbose))
