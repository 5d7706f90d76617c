"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/lister.py
Lists the immediate entries of one directory. All blocking directory I/O of a
traversal level goes through here; no recursion happens in this module.
"""

import os
import logging
from typing import List

from treesize.core.interfaces import DirectoryLister
from treesize.core.models import ListedEntry

logger = logging.getLogger(__name__)


class DirectoryListerImpl(DirectoryLister):
    """
    Enumerates a directory with os.scandir, keeping the OS enumeration order.
    """

    def list(self, directory: str) -> List[ListedEntry]:
        """
        List the entries of a directory together with their lstat results.

        Args:
            directory: Directory to enumerate
        Returns:
            Entries in native enumeration order
        Raises:
            OSError: If the directory itself cannot be opened or read
        """
        entries = []
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    stat_result = entry.stat(follow_symlinks=False)
                except OSError as e:
                    # Vanished or unreadable entry: leave it out of the listing
                    logger.debug(f"Dropping {entry.path} from listing: {e}")
                    continue
                entries.append(ListedEntry(path=entry.path, name=entry.name, stat=stat_result))

        logger.debug(f"Listed {len(entries)} entries in {directory}")
        return entries
