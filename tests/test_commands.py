"""
Tests for SizeTreeCommand and the compute_size_tree entry point.
"""
import os
import pytest
from unittest.mock import Mock
from treesize import compute_size_tree, SizeTreeCommand, RootNotFoundError, RootAccessError
from treesize.core.models import TraversalParams
from conftest import FailingLister


class TestComputeSizeTree:
    def test_returns_tree(self, sample_tree):
        tree = compute_size_tree(sample_tree["root"])

        assert tree.size == 375
        assert tree.name == sample_tree["root"].name

    def test_single_worker(self, sample_tree):
        assert compute_size_tree(str(sample_tree["root"]), max_workers=1).size == 375

    def test_not_found(self, temp_dir):
        with pytest.raises(RootNotFoundError):
            compute_size_tree(temp_dir / "nope")

    def test_hard_links_counted_once(self, temp_dir):
        (temp_dir / "a").write_bytes(b"a" * 100)
        try:
            os.link(temp_dir / "a", temp_dir / "a_link")
        except (OSError, NotImplementedError):
            pytest.skip("Hard links not supported")

        assert compute_size_tree(temp_dir).size == 100

    def test_idempotent(self, sample_tree):
        assert compute_size_tree(sample_tree["root"]) == compute_size_tree(sample_tree["root"])


class TestSizeTreeCommand:
    def test_execute_returns_tree_and_stats(self, sample_tree):
        tree, stats = SizeTreeCommand().execute(TraversalParams(root_dir=str(sample_tree["root"])))

        assert tree.size == 375
        assert stats.total_bytes == 375
        assert stats.files_counted == 4
        assert stats.total_time >= 0

    def test_each_run_gets_a_fresh_registry(self, sample_tree):
        """A second run must not see the first run's claims."""
        command = SizeTreeCommand()
        params = TraversalParams(root_dir=str(sample_tree["root"]))

        first, _ = command.execute(params)
        second, _ = command.execute(params)

        assert first.size == second.size == 375

    def test_sharded_registry(self, sample_tree):
        tree, _ = SizeTreeCommand().execute(
            TraversalParams(root_dir=str(sample_tree["root"]), max_workers=2, registry_shards=8)
        )
        assert tree.size == 375

    def test_custom_lister_and_progress(self, sample_tree):
        lister = FailingLister({sample_tree["sub"]: PermissionError(13, "Permission denied")})
        progress = Mock()

        tree, stats = SizeTreeCommand(lister=lister).execute(
            TraversalParams(root_dir=str(sample_tree["root"])),
            progress_callback=progress
        )

        assert tree.size == 300
        assert stats.entries_degraded == 1
        assert progress.called

    def test_root_access_error(self, temp_dir):
        lister = FailingLister({temp_dir: PermissionError(13, "Permission denied")})

        with pytest.raises(RootAccessError):
            SizeTreeCommand(lister=lister).execute(TraversalParams(root_dir=str(temp_dir)))
