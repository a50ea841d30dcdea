"""End-to-end scans against real temporary directory trees."""

import os
import pytest

from fatcat import FileRecord, InvalidConfig, RootInvalid, ScanConfig, scan, scan_config
from fatcat.aio import AccessError, CollectErrorsPolicy, ScandirEnumerator, scan_async


def make_file(path, size):
    """Create a sparse file of exactly ``size`` bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        fh.truncate(size)
    return path


@pytest.fixture
def sample_tree(tmp_path):
    """A=50, B=500, C=500, D=10 bytes directly under the root."""
    make_file(tmp_path / "A.bin", 50)
    make_file(tmp_path / "B.bin", 500)
    make_file(tmp_path / "C.bin", 500)
    make_file(tmp_path / "D.bin", 10)
    return tmp_path


@pytest.fixture
def nested_tree(tmp_path):
    """Several levels of directories with assorted sizes."""
    sizes = {
        "a/one.bin": 300,
        "a/two.bin": 1200,
        "a/deep/er/three.bin": 700,
        "b/four.bin": 1200,
        "b/five.bin": 5,
        "c/d/e/f/six.bin": 999,
        "seven.bin": 64,
    }
    for rel, size in sizes.items():
        make_file(tmp_path / rel, size)
    (tmp_path / "empty").mkdir()
    return tmp_path


class TestScenarios:

    def test_top_two_of_four(self, sample_tree):
        top, stats, root, _ = scan(sample_tree, min_size_bytes=100, top_n=2, worker_count=2)

        assert top == [
            FileRecord(str(sample_tree / "B.bin"), 500),
            FileRecord(str(sample_tree / "C.bin"), 500),
        ]
        assert stats.files_scanned == 4
        assert stats.bytes_scanned == 1060
        assert stats.files_matched == 2
        assert stats.dirs_scanned == 1
        assert stats.errors == 0
        assert root == str(sample_tree)

    def test_nested(self, nested_tree):
        result = scan(nested_tree, min_size_bytes=500, top_n=3, worker_count=3)

        assert [(os.path.relpath(r.path, nested_tree), r.size_bytes) for r in result.top_files] == [
            ("a/two.bin", 1200),
            ("b/four.bin", 1200),
            ("c/d/e/f/six.bin", 999),
        ]
        assert result.stats.files_scanned == 7
        assert result.stats.files_matched == 4
        # root, a, a/deep, a/deep/er, b, c, c/d, c/d/e, c/d/e/f, empty
        assert result.stats.dirs_scanned == 10
        assert result.total_size == 3399

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_worker_count_does_not_change_result(self, nested_tree, workers):
        baseline = scan(nested_tree, min_size_bytes=0, top_n=5, worker_count=1)
        result = scan(nested_tree, min_size_bytes=0, top_n=5, worker_count=workers)

        assert result.top_files == baseline.top_files
        assert result.stats == baseline.stats

    def test_rerun_is_idempotent(self, nested_tree):
        first = scan(nested_tree, min_size_bytes=10, top_n=4)
        second = scan(nested_tree, min_size_bytes=10, top_n=4)

        assert first.top_files == second.top_files
        assert first.stats == second.stats

    def test_nothing_qualifies(self, sample_tree):
        result = scan(sample_tree, min_size_bytes=10_000, top_n=5)

        assert result.top_files == []
        assert result.stats.files_scanned == 4

    def test_symlinks_not_counted_by_default(self, sample_tree):
        os.symlink(sample_tree / "B.bin", sample_tree / "B.link")
        os.symlink(sample_tree, sample_tree / "loop")

        result = scan(sample_tree, min_size_bytes=0, top_n=10, worker_count=2)

        assert result.stats.files_scanned == 4
        assert all(not r.path.endswith(("B.link", "loop")) for r in result.top_files)

    def test_follow_file_symlinks(self, sample_tree):
        os.symlink(sample_tree / "B.bin", sample_tree / "B.link")
        os.symlink(sample_tree, sample_tree / "loop")

        result = scan(sample_tree, min_size_bytes=100, top_n=10, follow_file_symlinks=True)

        assert FileRecord(str(sample_tree / "B.link"), 500) in result.top_files
        assert result.stats.files_scanned == 5
        # The directory loop is never entered
        assert result.stats.dirs_scanned == 1


class TestErrors:

    def test_missing_root(self, tmp_path):
        with pytest.raises(RootInvalid) as exc_info:
            scan(tmp_path / "missing", min_size_bytes=0, top_n=1)
        assert "does not exist" in str(exc_info.value)

    def test_root_is_a_file(self, sample_tree):
        with pytest.raises(RootInvalid):
            scan(sample_tree / "A.bin", min_size_bytes=0, top_n=1)

    @pytest.mark.parametrize("kwargs", [
        {"min_size_bytes": -1, "top_n": 1},
        {"min_size_bytes": 0, "top_n": -1},
        {"min_size_bytes": 0, "top_n": 1, "worker_count": 0},
    ])
    def test_invalid_parameters(self, sample_tree, kwargs):
        with pytest.raises(InvalidConfig):
            scan(sample_tree, **kwargs)

    @pytest.mark.asyncio
    async def test_inaccessible_subdirectory(self, nested_tree):
        """A denied directory is counted as an error and its subtree skipped."""
        denied = str(nested_tree / "a")

        class DenyingEnumerator(ScandirEnumerator):
            def scan(self, path):
                if path == denied:
                    raise AccessError(path, PermissionError(13, "Permission denied"))
                return super().scan(path)

        result = await scan_async(nested_tree, 0, 10, worker_count=4,
                                  enumerator=DenyingEnumerator())

        assert result.stats.errors == 1
        assert all(not r.path.startswith(denied + os.sep) for r in result.top_files)
        assert result.stats.files_scanned == 4
        assert result.stats.dirs_scanned == 7

    @pytest.mark.asyncio
    async def test_caller_policy_still_counts_errors(self, nested_tree):
        """A caller-supplied policy sees the error and so do the scan stats."""
        denied = str(nested_tree / "b")

        class DenyingEnumerator(ScandirEnumerator):
            def scan(self, path):
                if path == denied:
                    raise AccessError(path, PermissionError(13, "Permission denied"))
                return super().scan(path)

        policy = CollectErrorsPolicy()
        result = await scan_async(nested_tree, 0, 5, error_policy=policy,
                                  enumerator=DenyingEnumerator())

        assert result.stats.errors == 1
        assert policy.skipped_paths == [denied]

    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0,
                        reason="permission bits are not enforced for root")
    def test_unreadable_directory_on_disk(self, nested_tree):
        locked = nested_tree / "b"
        locked.chmod(0)
        try:
            result = scan(nested_tree, min_size_bytes=0, top_n=10)
        finally:
            locked.chmod(0o755)

        assert result.stats.errors == 1
        assert result.stats.files_scanned == 5


class TestConfigEntryPoint:

    def test_scan_config(self, sample_tree):
        config = ScanConfig(root_path=str(sample_tree), min_size_bytes=100, top_n=1,
                            worker_count=2)

        result = scan_config(config)

        assert result.top_files == [FileRecord(str(sample_tree / "B.bin"), 500)]

    def test_progress_callback(self, nested_tree):
        seen = []
        config = ScanConfig(root_path=str(nested_tree), min_size_bytes=0, top_n=1,
                            progress_interval=2)

        scan_config(config, progress_callback=seen.append)

        assert [s.dirs_scanned for s in seen] == [2, 4, 6, 8, 10]
