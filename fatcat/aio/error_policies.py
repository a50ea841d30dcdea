"""
Error taxonomy and error handling policies for fatcat.

Fatal errors (ScanError subclasses other than FileScanError) abort a scan
before it starts. Non-fatal errors (AccessError, MetadataError) are handed
to an ErrorPolicy, which records them and lets traversal continue.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Base class for everything a scan can raise."""


class RootInvalid(ScanError):
    """The scan root is missing or is not a directory."""

    def __init__(self, path, reason: str = "not a directory"):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid scan root '{path}': {reason}")


class InvalidConfig(ScanError, ValueError):
    """Scan parameters are out of range."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid scan configuration: " + "; ".join(self.problems))


class FileScanError(ScanError):
    """A non-fatal error tied to one path."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{self.__class__.__name__} for '{path}'{detail}")


class AccessError(FileScanError):
    """A directory could not be opened; its subtree is skipped."""


class MetadataError(FileScanError):
    """A single entry's metadata could not be read; the entry is skipped."""


class ErrorPolicy(ABC):
    """
    Base class for non-fatal error handling policies.

    The scheduler calls ``handle`` from the event loop; enumerators running
    on worker threads call ``handle_sync``. Both must be safe to call
    concurrently. Policies decide what to record or log; the scan's error
    counter is kept by the scheduler, whatever the policy does.
    """

    @abstractmethod
    def handle_sync(self, error: FileScanError, operation: str) -> None:
        """
        Handle an error synchronously.

        Args:
            error: The non-fatal error that occurred
            operation: Name of the operation that failed (e.g. 'list_directory')
        """
        pass

    async def handle(self, error: FileScanError, operation: str) -> None:
        """Handle an error from async code. Same contract as handle_sync."""
        self.handle_sync(error, operation)


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects errors without logging them.

    Useful for collecting all errors and presenting them at the end.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []

    def handle_sync(self, error: FileScanError, operation: str) -> None:
        self._record(error, operation)

    def _record(self, error: FileScanError, operation: str) -> None:
        # list.append is atomic, no lock needed for the record itself
        self.errors.append({
            'path': error.path,
            'operation': operation,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error.cause or error),
        })
        if isinstance(error, AccessError):
            self.skipped_paths.append(error.path)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'access_errors': sum(1 for e in self.errors if e['error_type'] == 'AccessError'),
            'metadata_errors': sum(1 for e in self.errors if e['error_type'] == 'MetadataError'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that logs errors and continues traversal.

    This is the default policy. Every error is recorded; with ``verbose``
    the log line is a warning, otherwise it is debug output.
    """

    def __init__(self, verbose: bool = False):
        super().__init__()
        self.verbose = verbose

    def handle_sync(self, error: FileScanError, operation: str) -> None:
        self._record(error, operation)

        level = logging.WARNING if self.verbose else logging.DEBUG
        if isinstance(error, AccessError):
            logger.log(level, "Skipping inaccessible directory '%s': %s", error.path, error.cause)
        else:
            logger.log(level, "Error in %s for '%s': %s", operation, error.path, error.cause)
