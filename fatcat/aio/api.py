"""High-level async API for fatcat.

This module wires the enumerator, filter, collectors and scheduler
together for a single scan.
"""

import logging
import os
import time
from typing import Optional

from ..config import DEFAULT_PROGRESS_INTERVAL, ScanConfig
from .adapters import ScandirEnumerator, SizeThresholdFilter
from .core import (
    AsyncPathEnumerator,
    ScanResult,
    ScanStatsCollector,
    TopKCollector,
    TraversalScheduler,
)
from .core.traverser import ProgressCallback
from .error_policies import ContinueOnErrorsPolicy, ErrorPolicy, InvalidConfig, RootInvalid


logger = logging.getLogger(__name__)


def resolve_root(root_path) -> str:
    """Return the absolute root path, or raise RootInvalid.

    Args:
        root_path: str or PathLike pointing at the directory to scan

    Raises:
        RootInvalid: If the path does not exist or is not a directory
    """
    root = os.path.abspath(os.fspath(root_path))
    if not os.path.exists(root):
        raise RootInvalid(root, "does not exist")
    if not os.path.isdir(root):
        raise RootInvalid(root, "not a directory")
    return root


async def scan_with_config(
    config: ScanConfig,
    progress_callback: Optional[ProgressCallback] = None,
    verbose: bool = False,
    error_policy: Optional[ErrorPolicy] = None,
    enumerator: Optional[AsyncPathEnumerator] = None,
) -> ScanResult:
    """Run one scan described by ``config``.

    Args:
        config: Scan parameters
        progress_callback: Called with ScanStats snapshots while scanning
        verbose: Log per-entry errors as warnings instead of debug output
        error_policy: Policy for non-fatal errors (default: ContinueOnErrorsPolicy)
        enumerator: Directory lister (default: ScandirEnumerator)

    Returns:
        ScanResult with the ranked files and final statistics

    Raises:
        InvalidConfig: If the configuration does not validate
        RootInvalid: If the root is missing or not a directory
    """
    problems = config.validate()
    if problems:
        raise InvalidConfig(problems)

    root = resolve_root(config.root_path)

    stats = ScanStatsCollector()
    top_k = TopKCollector(config.top_n)

    policy = error_policy or ContinueOnErrorsPolicy(verbose=verbose)

    if enumerator is None:
        enumerator = ScandirEnumerator(policy, follow_file_symlinks=config.follow_file_symlinks)

    scheduler = TraversalScheduler(
        enumerator,
        SizeThresholdFilter(config.min_size_bytes),
        top_k,
        stats,
        error_policy=policy,
        progress_callback=progress_callback,
        progress_interval=config.progress_interval,
    )

    logger.info("Scanning '%s' for files >= %d bytes", root, config.min_size_bytes)
    start = time.monotonic()
    top_files, final_stats = await scheduler.run(root, config.effective_worker_count)
    elapsed = time.monotonic() - start

    if final_stats.errors:
        logger.info("Scan finished with %d errors; results may be incomplete", final_stats.errors)

    return ScanResult(top_files, final_stats, root, elapsed)


async def scan_async(
    root_path,
    min_size_bytes: int,
    top_n: int,
    worker_count: Optional[int] = None,
    follow_file_symlinks: bool = False,
    progress_callback: Optional[ProgressCallback] = None,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    verbose: bool = False,
    error_policy: Optional[ErrorPolicy] = None,
    enumerator: Optional[AsyncPathEnumerator] = None,
) -> ScanResult:
    """Find the ``top_n`` largest files of at least ``min_size_bytes``.

    Args:
        root_path: Directory to scan
        min_size_bytes: Inclusive size threshold
        top_n: Number of files to keep
        worker_count: Concurrent workers (None = one per CPU)
        follow_file_symlinks: Count symlinks to regular files by target size
        progress_callback: Called with ScanStats snapshots while scanning
        progress_interval: Directories between progress callbacks
        verbose: Log per-entry errors as warnings
        error_policy: Policy for non-fatal errors
        enumerator: Directory lister

    Returns:
        ScanResult; unpack ``top_files, stats = result[:2]``

    Example:
        >>> result = await scan_async('/data', 100 * 1024 * 1024, 20)
        >>> for record in result.top_files:
        ...     print(record.size_bytes, record.path)
    """
    config = ScanConfig(
        root_path=os.fspath(root_path),
        min_size_bytes=min_size_bytes,
        top_n=top_n,
        worker_count=worker_count,
        follow_file_symlinks=follow_file_symlinks,
        progress_interval=progress_interval,
    )
    return await scan_with_config(
        config,
        progress_callback=progress_callback,
        verbose=verbose,
        error_policy=error_policy,
        enumerator=enumerator,
    )
