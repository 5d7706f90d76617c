"""
treesize — apparent disk usage of a directory tree, counting hard links once.

Core features:
- Concurrent, level-by-level traversal on a bounded thread pool
- Each physical file (device + inode) is counted exactly once per run
- Unreadable subdirectories degrade to empty nodes instead of failing the run
- CLI interface for headless usage, optional GUI with PySide6 (install with [gui] extra)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("treesize")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    from pathlib import Path as _Path
    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API — only what users should import directly
from treesize.commands import SizeTreeCommand, compute_size_tree
from treesize.core import (
    SizeTree, PhysicalIdentity, TraversalParams, TraversalStats,
    TraversalError, RootNotFoundError, RootAccessError,
)
from treesize.utils.convert_utils import ConvertUtils

__all__ = [
    "SizeTreeCommand",
    "compute_size_tree",
    "SizeTree",
    "PhysicalIdentity",
    "TraversalParams",
    "TraversalStats",
    "TraversalError",
    "RootNotFoundError",
    "RootAccessError",
    "ConvertUtils",
    "__version__",
]
