"""Filesystem path enumerator built on os.scandir.

os.scandir hands back DirEntry objects whose type information usually comes
straight from the directory listing, so only regular files need an extra
stat call for their size.

Symlink policy: symlinks are never followed into directories. By default
every symlink is reported as SYMLINK and left out of size accounting. With
``follow_file_symlinks`` a symlink whose target is a regular file is
reported as FILE with the target's size; symlinks to directories and
dangling symlinks stay SYMLINK.
"""

import logging
import os
import stat as stat_module  # To avoid name collision with stat results
from typing import List

from ..core.adapter import AsyncPathEnumerator
from ..core.node import DirEntryInfo, EntryKind
from ..error_policies import AccessError, MetadataError


logger = logging.getLogger(__name__)


class ScandirEnumerator(AsyncPathEnumerator):
    """Path enumerator for local filesystems.

    Raises AccessError when a directory cannot be listed. Entries whose
    metadata cannot be read are reported to the error policy as
    MetadataError and left out of the listing.
    """

    def __init__(self, error_policy=None, follow_file_symlinks: bool = False):
        """Initialize the enumerator.

        Args:
            error_policy: ErrorPolicy receiving per-entry errors
            follow_file_symlinks: Count symlinks to regular files by target size
        """
        super().__init__(error_policy)
        self.follow_file_symlinks = follow_file_symlinks

    def scan(self, path: str) -> List[DirEntryInfo]:
        results = []
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    try:
                        results.append(self._classify(entry))
                    except MetadataError as err:
                        self.report_error(err)
        except OSError as e:
            # Covers permission denied, removed mid-scan and failures
            # while reading the listing itself
            raise AccessError(path, e) from e
        return results

    def _classify(self, entry: os.DirEntry) -> DirEntryInfo:
        """Turn a DirEntry into a DirEntryInfo.

        Raises:
            MetadataError: If the entry's type or size cannot be read
        """
        try:
            if entry.is_symlink():
                return self._classify_symlink(entry)

            if entry.is_dir(follow_symlinks=False):
                return DirEntryInfo(entry.path, entry.name, EntryKind.DIRECTORY)

            if entry.is_file(follow_symlinks=False):
                st = entry.stat(follow_symlinks=False)
                return DirEntryInfo(entry.path, entry.name, EntryKind.FILE, st.st_size)
        except OSError as e:
            raise MetadataError(entry.path, e) from e

        return DirEntryInfo(entry.path, entry.name, EntryKind.OTHER)

    def _classify_symlink(self, entry: os.DirEntry) -> DirEntryInfo:
        if self.follow_file_symlinks:
            try:
                st = entry.stat(follow_symlinks=True)
            except OSError:
                # Dangling or looping link, nothing to count
                logger.debug("Unresolvable symlink '%s'", entry.path)
            else:
                if stat_module.S_ISREG(st.st_mode):
                    return DirEntryInfo(entry.path, entry.name, EntryKind.FILE, st.st_size)

        return DirEntryInfo(entry.path, entry.name, EntryKind.SYMLINK)

    def __repr__(self) -> str:
        return f"ScandirEnumerator(follow_file_symlinks={self.follow_file_symlinks})"
