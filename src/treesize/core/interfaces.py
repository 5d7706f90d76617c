"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the size tree computation.
These protocols enforce structural typing using Python's `typing.Protocol` so the
builder can be handed alternative listers or registries (e.g. in tests).

Key Components:
---------------
- IdentityRegistry: Thread-safe "first caller wins" set of physical identities.
- DirectoryLister: Enumerates the immediate entries of one directory.
- TreeBuilder: Turns a root path into a SizeTree.
"""

from typing import Protocol, List, Optional, Callable, Tuple
from treesize.core.models import (
    PhysicalIdentity,
    ListedEntry,
    SizeTree,
    TraversalStats,
)


# ===== Interfaces =====

class IdentityRegistry(Protocol):
    """
    Interface for the shared set of already-counted physical identities.

    Methods:
        claim: Atomically records an identity, True only for the first caller.
    """
    def claim(self, identity: PhysicalIdentity) -> bool:
        """
        Claim an identity.

        Returns:
            True exactly once per distinct identity, False afterwards.
        """
        ...

    def __len__(self) -> int: ...


class DirectoryLister(Protocol):
    """
    Interface for listing one directory level.

    Implementations raise OSError when the directory itself cannot be read and
    silently drop entries whose metadata cannot be read.
    """
    def list(self, directory: str) -> List[ListedEntry]: ...


class TreeBuilder(Protocol):
    """
    Interface for the traversal engine.
    """
    def build(
        self,
        root_path: str,
        registry: IdentityRegistry,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[SizeTree, TraversalStats]:
        """
        Compute the size tree of root_path.

        Raises:
            TraversalError: If the root path is missing or unreadable.
        """
        ...
