"""Concurrent directory traversal.

The scheduler replaces recursive directory walking with an explicit work
queue shared by a fixed pool of worker tasks. Each worker hands the
blocking directory read to a thread pool, so up to ``worker_count``
directories are read at the same time.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .adapter import AsyncPathEnumerator
from .collector import ScanStatsCollector, TopKCollector
from .node import EntryKind, FileRecord, ScanStats, ScanTask
from ..error_policies import AccessError, ContinueOnErrorsPolicy, ErrorPolicy


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanStats], None]


class ScanState(Enum):
    """Lifecycle of a scheduler. There is no paused or cancelled state."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class _CountingPolicy(ErrorPolicy):
    """Counts every non-fatal error into the scan statistics, then delegates."""

    def __init__(self, policy: ErrorPolicy, stats: ScanStatsCollector):
        self.policy = policy
        self.stats = stats

    def handle_sync(self, error, operation: str) -> None:
        self.stats.increment('errors')
        self.policy.handle_sync(error, operation)

    async def handle(self, error, operation: str) -> None:
        self.stats.increment('errors')
        await self.policy.handle(error, operation)


class TraversalScheduler:
    """Distributes directory expansion across a bounded pool of workers.

    Termination protocol: every ScanTask put on the queue is unfinished
    until the worker that took it has enqueued all of its subdirectories
    and called ``task_done``. The unfinished count therefore only reaches
    zero when the queue is empty *and* no worker is active, which is what
    ``queue.join()`` waits for. A queue that is momentarily empty while a
    worker is still listing a directory does not end the scan.

    Traversal order across subtrees is unspecified; results do not depend
    on it because the collectors impose a total order.
    """

    def __init__(
        self,
        enumerator: AsyncPathEnumerator,
        size_filter: Callable[[int], bool],
        top_k: TopKCollector,
        stats: ScanStatsCollector,
        error_policy: Optional[ErrorPolicy] = None,
        progress_callback: Optional[ProgressCallback] = None,
        progress_interval: int = 100,
    ):
        """Initialize the scheduler.

        Args:
            enumerator: Lists directories
            size_filter: Predicate deciding which file sizes qualify
            top_k: Shared aggregator receiving qualifying files
            stats: Shared statistics collector
            error_policy: Receives non-fatal errors (default: ContinueOnErrorsPolicy)
            progress_callback: Called with a ScanStats snapshot every
                               ``progress_interval`` enumerated directories
            progress_interval: Directories between progress callbacks
        """
        self.enumerator = enumerator
        self.size_filter = size_filter
        self.top_k = top_k
        self.stats = stats
        self.error_policy = error_policy or ContinueOnErrorsPolicy()
        self._counted_policy = _CountingPolicy(self.error_policy, stats)
        self.progress_callback = progress_callback
        self.progress_interval = progress_interval
        self.state = ScanState.IDLE
        self.active_workers = 0
        self.peak_active_workers = 0

    async def run(self, root_path: str, worker_count: int) -> Tuple[List[FileRecord], ScanStats]:
        """Scan everything below ``root_path``.

        Args:
            root_path: Absolute path of the root directory
            worker_count: Number of concurrent workers (at least 1)

        Returns:
            Tuple of (top-K records, final statistics)
        """
        if self.state is not ScanState.IDLE:
            raise RuntimeError("TraversalScheduler instances run only once")
        if worker_count < 1:
            raise ValueError("worker_count must be positive")

        queue: asyncio.Queue = asyncio.Queue()
        start = time.monotonic()

        executor = ThreadPoolExecutor(max_workers=worker_count,
                                      thread_name_prefix='fatcat-scan')
        self.enumerator.bind(executor, self._counted_policy)
        queue.put_nowait(ScanTask(root_path))
        self.state = ScanState.RUNNING
        logger.debug("Scan of '%s' started with %d workers", root_path, worker_count)

        workers = [
            asyncio.ensure_future(self._worker(queue))
            for _ in range(worker_count)
        ]
        try:
            await self._wait_for_completion(queue, workers)
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            # Reads still in flight after a crash finish off the event loop
            await asyncio.get_running_loop().run_in_executor(None, executor.shutdown)
            self.enumerator.bind(None, self.error_policy)

        self.state = ScanState.COMPLETED
        stats = self.stats.snapshot()
        logger.debug(
            "Scan of '%s' completed in %.2fs: %d files, %d dirs, %d errors",
            root_path, time.monotonic() - start,
            stats.files_scanned, stats.dirs_scanned, stats.errors,
        )
        return self.top_k.snapshot(), stats

    async def _wait_for_completion(self, queue: asyncio.Queue, workers: List[asyncio.Future]):
        """Wait until all work is done, or re-raise the first worker failure."""
        join = asyncio.ensure_future(queue.join())
        try:
            await asyncio.wait(
                [join, *workers], return_when=asyncio.FIRST_COMPLETED
            )
        except BaseException:
            join.cancel()
            raise

        # Workers loop forever, so a finished worker means it crashed
        crashed = [w for w in workers if w.done() and not w.cancelled()]
        if crashed:
            join.cancel()
            crashed[0].result()

    async def _worker(self, queue: asyncio.Queue):
        while True:
            task = await queue.get()
            self.active_workers += 1
            self.peak_active_workers = max(self.peak_active_workers, self.active_workers)
            try:
                await self._process(task, queue)
            finally:
                self.active_workers -= 1
                queue.task_done()

    async def _process(self, task: ScanTask, queue: asyncio.Queue):
        try:
            entries = await self.enumerator.list_directory(task.path)
        except AccessError as err:
            await self._counted_policy.handle(err, 'list_directory')
            return

        self.stats.increment('dirs_scanned')

        for entry in entries:
            if entry.kind is EntryKind.DIRECTORY:
                queue.put_nowait(ScanTask(entry.path))
            elif entry.kind is EntryKind.FILE:
                matched = self.size_filter(entry.size)
                self.stats.record_file(entry.size, matched)
                if matched:
                    self.top_k.submit(FileRecord(entry.path, entry.size))
            # SYMLINK and OTHER entries are neither followed nor counted

        self._report_progress()

    def _report_progress(self):
        if self.progress_callback is None or self.progress_interval <= 0:
            return
        snapshot = self.stats.snapshot()
        if snapshot.dirs_scanned % self.progress_interval == 0:
            self.progress_callback(snapshot)
