"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for the size tree computation: physical identities, listed entries,
the immutable SizeTree result, run parameters and traversal statistics.
"""

import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple


# =============================
# Enums
# =============================

class EntryKind(Enum):
    """
    Kind of a directory entry as seen without following symbolic links.
    """
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "EntryKind":
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        return cls.OTHER

    def __repr__(self) -> str:
        return self.value


class ErrorMode(Enum):
    """
    How a failed directory listing is handled.
    STRICT raises (used for the root), DEGRADE turns the node into an empty one.
    """
    STRICT = "strict"
    DEGRADE = "degrade"

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

class PhysicalIdentity(NamedTuple):
    """
    Identifies the storage behind a directory entry.
    All hard links to one file share the same (device, inode) pair.
    """
    device: int
    inode: int

    @classmethod
    def from_stat(cls, stat_result: os.stat_result) -> Optional["PhysicalIdentity"]:
        """Returns None when the filesystem reports no usable inode number."""
        if not stat_result.st_ino:
            return None
        return cls(stat_result.st_dev, stat_result.st_ino)


class ListedEntry(NamedTuple):
    """One immediate child of a directory, with the lstat taken while listing it."""
    path: str
    name: str
    stat: os.stat_result

    @property
    def kind(self) -> EntryKind:
        return EntryKind.from_mode(self.stat.st_mode)


@dataclass(frozen=True)
class SizeTree:
    """
    Result node of a size computation.
    Directory sizes are the sum of their children; files carry their length
    only if their physical identity was claimed by them first, otherwise 0.
    Children keep the order in which the directory listed them.
    """
    name: str
    size: int
    children: Tuple["SizeTree", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_all(self) -> Iterator["SizeTree"]:
        """Yield this node and all of its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count(self) -> int:
        """Number of nodes in this subtree, including this one."""
        return sum(1 for _ in self.iter_all())

    def find(self, *names: str) -> Optional["SizeTree"]:
        """
        Look up a descendant by its chain of child names.
        find() with no names returns the node itself.
        """
        node = self
        for name in names:
            node = next((child for child in node.children if child.name == name), None)
            if node is None:
                return None
        return node

    def __repr__(self):
        return f"<SizeTree name={self.name}, size={self.size}, children={len(self.children)}>"


"""
DTO for traversal parameters with built-in validation.
Interface-agnostic — used by both GUI and CLI.
"""

@dataclass
class TraversalParams:
    """Parameters for one size tree computation."""
    root_dir: str
    max_workers: Optional[int] = None  # None → os.cpu_count()
    registry_shards: int = 1

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        self.root_dir = os.fspath(self.root_dir)

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("Worker count must be at least 1")

        if self.registry_shards < 1:
            raise ValueError("Registry shard count must be at least 1")

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1


@dataclass
class TraversalStats:
    """
    Statistics collected during one traversal.
    Only updated from the coordinating thread.
    """
    files_counted: int = 0
    hardlinks_skipped: int = 0
    directories_listed: int = 0
    entries_degraded: int = 0
    other_entries: int = 0
    total_bytes: int = 0
    levels: int = 0
    total_time: float = 0.0
    degraded_paths: List[str] = field(default_factory=list)

    @property
    def entries_seen(self) -> int:
        return (self.files_counted + self.hardlinks_skipped + self.directories_listed
                + self.entries_degraded + self.other_entries)

    def as_dict(self) -> Dict[str, float]:
        return {
            "files": self.files_counted,
            "hardlinks": self.hardlinks_skipped,
            "directories": self.directories_listed,
            "degraded": self.entries_degraded,
            "other": self.other_entries,
            "bytes": self.total_bytes,
            "levels": self.levels,
            "time": self.total_time,
        }

    def print_summary(self) -> str:
        lines = [
            "📊 Traversal Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"📁 Directories listed: {self.directories_listed}",
            f"📄 Files counted: {self.files_counted}",
            f"🔗 Hard links skipped: {self.hardlinks_skipped}",
            f"⚠️ Unreadable entries: {self.entries_degraded}",
            f"❔ Other entries: {self.other_entries}",
            f"🧱 Tree depth: {self.levels}",
            f"Total bytes: {self.total_bytes}",
        ]
        return "\n".join(lines)
