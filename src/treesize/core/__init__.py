"""
Core size tree engine — identity registry, directory lister and tree builder.

This package contains the concurrency-sensitive foundation of treesize:
- IdentityRegistryImpl: lock-guarded "first caller wins" set of (device, inode) pairs
- DirectoryListerImpl: single-level directory enumeration in native order
- TreeBuilderImpl: iterative, thread-pooled traversal producing a SizeTree
- Models: SizeTree, PhysicalIdentity, TraversalParams, TraversalStats

All components are pure Python with no GUI dependencies — suitable for CLI and server usage.
"""

from .registry import IdentityRegistryImpl
from .lister import DirectoryListerImpl
from .builder import TreeBuilderImpl
from .errors import TraversalError, RootNotFoundError, RootAccessError
from .models import (
    SizeTree, PhysicalIdentity, ListedEntry, EntryKind, ErrorMode,
    TraversalParams, TraversalStats)

__all__ = [
    "IdentityRegistryImpl",
    "DirectoryListerImpl",
    "TreeBuilderImpl",
    "TraversalError",
    "RootNotFoundError",
    "RootAccessError",
    "SizeTree",
    "PhysicalIdentity",
    "ListedEntry",
    "EntryKind",
    "ErrorMode",
    "TraversalParams",
    "TraversalStats",
]
