"""
Shared fixtures for size tree tests.
Creates isolated temporary directories with controlled file layouts.
"""
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from treesize.core.lister import DirectoryListerImpl
from treesize.core.models import ListedEntry


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a small tree:
    - a.bin (100 bytes), b.bin (200 bytes) at the root
    - sub/c.bin (50 bytes)
    - sub/deeper/d.bin (25 bytes)
    - empty/ (no entries)
    Total: 375 bytes, no hard links.
    """
    paths = {"root": temp_dir}

    paths["a"] = temp_dir / "a.bin"
    paths["a"].write_bytes(b"A" * 100)
    paths["b"] = temp_dir / "b.bin"
    paths["b"].write_bytes(b"B" * 200)

    paths["sub"] = temp_dir / "sub"
    paths["sub"].mkdir()
    paths["c"] = paths["sub"] / "c.bin"
    paths["c"].write_bytes(b"C" * 50)

    paths["deeper"] = paths["sub"] / "deeper"
    paths["deeper"].mkdir()
    paths["d"] = paths["deeper"] / "d.bin"
    paths["d"].write_bytes(b"D" * 25)

    paths["empty"] = temp_dir / "empty"
    paths["empty"].mkdir()

    return paths


def listing_order(directory: Path) -> List[str]:
    """Names in the order the OS enumerates them."""
    with os.scandir(directory) as it:
        return [entry.name for entry in it]


class FailingLister(DirectoryListerImpl):
    """Lister that raises a chosen OSError for selected directories."""

    def __init__(self, failing: Dict[str, OSError]):
        self.failing = {os.path.normpath(str(path)): error for path, error in failing.items()}
        self.calls: List[str] = []

    def list(self, directory: str) -> List[ListedEntry]:
        self.calls.append(directory)
        error: Optional[OSError] = self.failing.get(os.path.normpath(directory))
        if error is not None:
            raise error
        return super().list(directory)
