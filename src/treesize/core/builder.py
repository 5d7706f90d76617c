"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/builder.py
Implements the concurrent size tree traversal.
Features:
- Iterative, level-by-level traversal over an arena of pending nodes
  (no call recursion, so tree depth is not bounded by the interpreter stack)
- Directory listings and symlink resolution of each level run on a bounded thread pool
- Hard links are counted once through a shared IdentityRegistry
- Only the root may fail the computation; deeper failures become empty nodes
"""

import os
import stat
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import repeat
from typing import List, Optional, Callable, Tuple

from treesize.core.errors import RootNotFoundError, RootAccessError
from treesize.core.interfaces import TreeBuilder, DirectoryLister, IdentityRegistry
from treesize.core.lister import DirectoryListerImpl
from treesize.core.models import (
    EntryKind, ErrorMode, ListedEntry, PhysicalIdentity, SizeTree, TraversalStats
)

logger = logging.getLogger(__name__)

# (resolved kind, identity or None, byte length)
ResolvedLeaf = Tuple[EntryKind, Optional[PhysicalIdentity], int]


@dataclass
class _PendingNode:
    """Mutable node used while the traversal is running. Parents precede children in the arena."""
    name: str
    path: str
    parent: int
    size: int = 0
    children: List[int] = field(default_factory=list)


class TreeBuilderImpl(TreeBuilder):
    """
    Builds a SizeTree breadth-first.

    Each level of the tree is one fork-join round: all directories of the level
    are listed on the pool, then all leaves of the level are resolved on the pool.
    Results are consumed in submission order, so children always appear in the
    order their directory listed them. Identities are claimed on the calling
    thread in that same order, which makes repeated runs produce identical trees.
    """

    def __init__(self, lister: Optional[DirectoryLister] = None, max_workers: Optional[int] = None):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.lister = lister or DirectoryListerImpl()
        self.max_workers = max_workers or os.cpu_count() or 1

    def build(
        self,
        root_path: str,
        registry: IdentityRegistry,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[SizeTree, TraversalStats]:
        root_path = os.fspath(root_path)
        stats = TraversalStats()
        start_time = time.time()

        logger.debug(f"Starting traversal of {root_path} with {self.max_workers} workers")

        root_stat = self._stat_root(root_path)
        root_name = os.path.basename(os.path.normpath(root_path))
        if root_name in ("", os.curdir, os.pardir):
            root_name = root_path
        root_entry = ListedEntry(path=root_path, name=root_name, stat=root_stat)

        arena = [_PendingNode(name=root_name, path=root_path, parent=-1)]

        if root_entry.kind is EntryKind.DIRECTORY:
            self._traverse(arena, registry, stats, progress_callback)
        else:
            stats.levels = 1
            arena[0].size = self._claim(registry, root_entry, self._resolve_leaf(root_entry), stats)

        tree = self._assemble(arena)

        stats.total_bytes = tree.size
        stats.total_time = time.time() - start_time
        logger.debug(
            f"Traversal of {root_path} finished: {tree.size} bytes, "
            f"{len(arena)} nodes, {stats.total_time:.2f} seconds"
        )
        return tree, stats

    @staticmethod
    def _stat_root(root_path: str) -> os.stat_result:
        """The root is named explicitly by the caller, so a symlink root is followed."""
        try:
            return os.stat(root_path)
        except (FileNotFoundError, NotADirectoryError) as e:
            logger.error(f"Root path does not exist: {root_path}")
            raise RootNotFoundError(root_path) from e
        except OSError as e:
            logger.error(f"Cannot stat root path {root_path}: {e}")
            raise RootAccessError(root_path, e.strerror or "Cannot stat path") from e

    def _traverse(
        self,
        arena: List[_PendingNode],
        registry: IdentityRegistry,
        stats: TraversalStats,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]]
    ) -> None:
        """Expand the arena level by level until no directories are left."""
        frontier = [0]
        mode = ErrorMode.STRICT

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="TreeSizeWorker") as executor:
            while frontier:
                stats.levels += 1
                paths = [arena[index].path for index in frontier]
                listings = executor.map(self._list_directory, paths, repeat(mode))

                next_frontier: List[int] = []
                leaves: List[Tuple[int, ListedEntry]] = []

                for dir_index, listing in zip(frontier, listings):
                    if listing is None:
                        stats.entries_degraded += 1
                        stats.degraded_paths.append(arena[dir_index].path)
                        continue

                    stats.directories_listed += 1
                    for entry in listing:
                        child_index = len(arena)
                        arena.append(_PendingNode(name=entry.name, path=entry.path, parent=dir_index))
                        arena[dir_index].children.append(child_index)

                        if entry.kind is EntryKind.DIRECTORY:
                            next_frontier.append(child_index)
                        else:
                            leaves.append((child_index, entry))

                resolved = executor.map(self._resolve_leaf, [entry for _, entry in leaves])
                for (leaf_index, entry), leaf in zip(leaves, resolved):
                    arena[leaf_index].size = self._claim(registry, entry, leaf, stats)

                if progress_callback:
                    progress_callback("scanning", stats.entries_seen, None)

                frontier = next_frontier
                mode = ErrorMode.DEGRADE

    def _list_directory(self, path: str, mode: ErrorMode) -> Optional[List[ListedEntry]]:
        """
        List one directory under the given error mode.
        Returns None for a degraded directory; raises for a STRICT one.
        """
        try:
            return self.lister.list(path)
        except FileNotFoundError as e:
            if mode is ErrorMode.STRICT:
                logger.error(f"Root directory vanished before listing: {path}")
                raise RootNotFoundError(path) from e
            logger.warning(f"Directory vanished during scan: {path}")
            return None
        except OSError as e:
            if mode is ErrorMode.STRICT:
                logger.error(f"Cannot list root directory {path}: {e}")
                raise RootAccessError(path, e.strerror or "Cannot list directory") from e
            logger.warning(f"Skipping unreadable directory {path}: {e}")
            return None

    @staticmethod
    def _resolve_leaf(entry: ListedEntry) -> ResolvedLeaf:
        """
        Decide whether a non-directory entry counts as a file.
        A symlink to a regular file is a file entry carrying its own lstat
        identity and size; any other symlink or special file is sized 0.
        """
        kind = entry.kind

        if kind is EntryKind.SYMLINK:
            try:
                target = os.stat(entry.path)
            except OSError as e:
                logger.debug(f"Broken symbolic link {entry.path}: {e}")
                return EntryKind.OTHER, None, 0
            if not stat.S_ISREG(target.st_mode):
                logger.debug(f"Not following symbolic link {entry.path}")
                return EntryKind.OTHER, None, 0
            kind = EntryKind.FILE

        if kind is not EntryKind.FILE:
            return EntryKind.OTHER, None, 0

        file_stat = entry.stat
        if not file_stat.st_ino:
            # DirEntry.stat() leaves st_ino and st_dev at 0 on Windows
            try:
                file_stat = os.lstat(entry.path)
            except OSError as e:
                logger.debug(f"Cannot lstat {entry.path} for its file id: {e}")
                return EntryKind.FILE, None, entry.stat.st_size

        return EntryKind.FILE, PhysicalIdentity.from_stat(file_stat), file_stat.st_size

    @staticmethod
    def _claim(registry: IdentityRegistry, entry: ListedEntry, leaf: ResolvedLeaf, stats: TraversalStats) -> int:
        """Size contribution of one leaf after claiming its identity."""
        kind, identity, size = leaf

        if kind is EntryKind.OTHER:
            stats.other_entries += 1
            return 0

        if identity is None:
            logger.debug(f"No physical identity for {entry.path}, counting 0 bytes")
            stats.entries_degraded += 1
            stats.degraded_paths.append(entry.path)
            return 0

        if registry.claim(identity):
            stats.files_counted += 1
            return size

        logger.debug(f"Already counted (hard link): {entry.path}")
        stats.hardlinks_skipped += 1
        return 0

    @staticmethod
    def _assemble(arena: List[_PendingNode]) -> SizeTree:
        """
        Fold sizes into parents and freeze the arena into SizeTree nodes.
        Walking the arena backwards visits every child before its parent.
        """
        for index in range(len(arena) - 1, 0, -1):
            node = arena[index]
            arena[node.parent].size += node.size

        built: List[Optional[SizeTree]] = [None] * len(arena)
        for index in range(len(arena) - 1, -1, -1):
            node = arena[index]
            built[index] = SizeTree(
                name=node.name,
                size=node.size,
                children=tuple(built[child] for child in node.children)
            )
            for child in node.children:
                built[child] = None  # owned by the parent now

        return built[0]
