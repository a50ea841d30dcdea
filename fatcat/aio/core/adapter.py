"""Path enumerator abstraction.

Defines how a directory listing is turned into classified entries. The
scheduler only talks to this interface, so tests and other backends can
supply their own listings.
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import List, Optional

from .node import DirEntryInfo


class AsyncPathEnumerator(ABC):
    """Abstract base class for async path enumerators.

    Subclasses implement the blocking ``scan`` method; ``list_directory``
    runs it on the executor the scheduler hands over, so enumeration of
    several directories proceeds in parallel.
    """

    def __init__(self, error_policy=None):
        """
        Args:
            error_policy: ErrorPolicy receiving per-entry MetadataErrors
        """
        self.error_policy = error_policy
        self.executor: Optional[Executor] = None

    def bind(self, executor: Optional[Executor], error_policy=None) -> None:
        """Attach the executor (and optionally policy) used for a scan run."""
        self.executor = executor
        if error_policy is not None:
            self.error_policy = error_policy

    @abstractmethod
    def scan(self, path: str) -> List[DirEntryInfo]:
        """List the immediate entries of ``path``. Blocking.

        Args:
            path: Directory to list

        Returns:
            Classified entries, in no particular order

        Raises:
            AccessError: If the directory itself cannot be read
        """
        pass

    async def list_directory(self, path: str) -> List[DirEntryInfo]:
        """List the immediate entries of ``path`` without blocking the loop.

        Raises:
            AccessError: If the directory itself cannot be read
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self.scan, path)

    def report_error(self, error) -> None:
        """Hand a per-entry error to the policy. Called from worker threads."""
        if self.error_policy is None:
            raise error
        self.error_policy.handle_sync(error, 'stat_entry')
