"""Tests for change classification of staged files."""

import pytest
from pathlib import Path
from unittest.mock import patch

from distribvc.domain import ChangeType
from distribvc.errors import IOFailureError
from distribvc.services.change_detector import ChangeDetector, classify


@pytest.fixture
def trees(tmp_path):
    root = tmp_path / "work"
    staging = tmp_path / "staging"
    root.mkdir()
    staging.mkdir()
    return root, staging


def _put(base: Path, rel: str, data: bytes) -> Path:
    path = base / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


class TestClassify:

    def test_missing_original_is_added(self, trees):
        root, staging = trees
        staged = _put(staging, "new.txt", b"x")
        assert classify(staged, root / "new.txt") == ChangeType.ADDED

    def test_directory_in_place_of_file_is_added(self, trees):
        root, staging = trees
        staged = _put(staging, "thing", b"x")
        (root / "thing").mkdir()
        assert classify(staged, root / "thing") == ChangeType.ADDED

    def test_different_bytes_is_modified(self, trees):
        root, staging = trees
        staged = _put(staging, "a.txt", b"v1")
        _put(root, "a.txt", b"v2")
        assert classify(staged, root / "a.txt") == ChangeType.MODIFIED

    def test_identical_bytes_is_deleted(self, trees):
        """A staged file equal to its working copy is recorded as DELETED."""
        root, staging = trees
        staged = _put(staging, "a.txt", b"same")
        _put(root, "a.txt", b"same")
        assert classify(staged, root / "a.txt") == ChangeType.DELETED


class TestChangeDetector:

    def test_collect_sorted_with_contents(self, trees):
        root, staging = trees
        _put(staging, "z.txt", b"zz")
        _put(staging, "dir/b.txt", b"staged")
        _put(root, "dir/b.txt", b"working")
        _put(staging, "a.txt", b"same")
        _put(root, "a.txt", b"same")

        changes = ChangeDetector().collect(staging, root)

        assert [c.file_path for c in changes] == ["a.txt", "dir/b.txt", "z.txt"]
        assert [c.change_type for c in changes] == [
            ChangeType.DELETED, ChangeType.MODIFIED, ChangeType.ADDED,
        ]
        assert changes[0].content is None
        assert changes[1].content == b"staged"
        assert changes[2].content == b"zz"

    def test_empty_staging(self, trees):
        root, staging = trees
        assert ChangeDetector().collect(staging, root) == []

    def test_read_failure_raises(self, trees):
        root, staging = trees
        _put(staging, "a.txt", b"x")
        with patch.object(Path, 'read_bytes', side_effect=PermissionError("denied")):
            with pytest.raises(IOFailureError):
                ChangeDetector().collect(staging, root)
