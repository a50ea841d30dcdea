"""Configuration for fatcat scans.

This module defines how callers describe a scan: where to start, what
counts as a large file, how many results to keep and how much concurrency
to use. Defaults live here, not in the scanning core.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


MEGABYTE = 1024 * 1024

DEFAULT_MIN_SIZE_MB = 100
DEFAULT_TOP_N = 20
DEFAULT_PROGRESS_INTERVAL = 100


def default_worker_count() -> int:
    """Worker count matching the available hardware concurrency."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ScanConfig:
    """Complete, immutable description of one scan.

    Attributes:
        root_path: Directory to scan
        min_size_bytes: Inclusive size threshold for reported files
        top_n: Number of largest files to keep
        worker_count: Concurrent workers (None = one per CPU)
        follow_file_symlinks: Count symlinks to regular files by target size
        progress_interval: Directories between progress callbacks
    """

    root_path: str = "./"
    min_size_bytes: int = DEFAULT_MIN_SIZE_MB * MEGABYTE
    top_n: int = DEFAULT_TOP_N
    worker_count: Optional[int] = None
    follow_file_symlinks: bool = False
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL

    @classmethod
    def from_megabytes(cls, root_path: str, min_size_mb: float = DEFAULT_MIN_SIZE_MB,
                       top_n: int = DEFAULT_TOP_N, **kwargs) -> 'ScanConfig':
        """Create a config with the threshold given in megabytes.

        Args:
            root_path: Directory to scan
            min_size_mb: Threshold in MB (1 MB = 1024 * 1024 bytes)
            top_n: Number of largest files to keep

        Returns:
            ScanConfig with ``min_size_bytes`` filled in
        """
        return cls(
            root_path=root_path,
            min_size_bytes=int(min_size_mb * MEGABYTE),
            top_n=top_n,
            **kwargs
        )

    @property
    def effective_worker_count(self) -> int:
        """Worker count with the hardware default applied."""
        if self.worker_count is None:
            return default_worker_count()
        return self.worker_count

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.root_path:
            errors.append("root_path cannot be empty")

        if self.min_size_bytes < 0:
            errors.append("min_size_bytes cannot be negative")

        if self.top_n < 0:
            errors.append("top_n cannot be negative")

        if self.worker_count is not None and self.worker_count <= 0:
            errors.append("worker_count must be positive")

        if self.progress_interval < 0:
            errors.append("progress_interval cannot be negative")

        return errors
