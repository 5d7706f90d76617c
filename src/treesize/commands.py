"""
Unified command orchestrator for size tree computation.
This is the SINGLE source of truth for business logic — used by both GUI and CLI.
No Qt/PySide6 dependencies — pure Python.
"""
from typing import Optional, Callable, Tuple
from treesize.core.models import SizeTree, TraversalParams, TraversalStats
from treesize.core.registry import IdentityRegistryImpl
from treesize.core.builder import TreeBuilderImpl
from treesize.core.interfaces import DirectoryLister


class SizeTreeCommand:
    """
    Orchestrates one computation:
    1. Create a fresh IdentityRegistry scoped to this run
    2. Build the tree with a pool sized from the parameters
    3. Return the tree together with traversal statistics

    Usage:
        params = TraversalParams(root_dir="/var/log")
        tree, stats = SizeTreeCommand().execute(params, progress_callback=printer)
    """

    def __init__(self, lister: Optional[DirectoryLister] = None):
        self._lister = lister

    def execute(
            self,
            params: TraversalParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[SizeTree, TraversalStats]:
        """
        Execute the computation with given parameters.

        Args:
            params: Validated traversal parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (size_tree, statistics)

        Raises:
            TraversalError: If the root path is missing or unreadable
        """
        registry = IdentityRegistryImpl(shards=params.registry_shards)
        builder = TreeBuilderImpl(lister=self._lister, max_workers=params.worker_count)
        return builder.build(params.root_dir, registry, progress_callback=progress_callback)


def compute_size_tree(root_path, max_workers: Optional[int] = None) -> SizeTree:
    """
    Compute the deduplicated size tree of root_path.

    Raises:
        RootNotFoundError: If root_path does not exist
        RootAccessError: If root_path cannot be stat-ed or listed
    """
    tree, _ = SizeTreeCommand().execute(TraversalParams(root_dir=root_path, max_workers=max_workers))
    return tree
