"""Tests for the infrastructure layer: JSON documents, walking and locking."""

import json
import os
import threading
import time

import pytest
from unittest.mock import patch

from distribvc.errors import AlreadyExistsError, IOFailureError, NotFoundError
from distribvc.infra import JsonDocument, repository_lock, walk_files


class TestJsonDocument:

    def test_write_and_read(self, tmp_path):
        doc = JsonDocument(tmp_path / "sub" / "record.json")
        doc.write({"name": "master", "items": [1, 2]})
        assert doc.exists()
        assert doc.read() == {"name": "master", "items": [1, 2]}
        assert (tmp_path / "sub" / "record.json").read_text().endswith("\n")

    def test_overwrite(self, tmp_path):
        doc = JsonDocument(tmp_path / "record.json")
        doc.write({"v": 1})
        doc.write({"v": 2})
        assert doc.read() == {"v": 2}

    def test_exclusive(self, tmp_path):
        doc = JsonDocument(tmp_path / "record.json")
        doc.write({"v": 1}, exclusive=True)
        with pytest.raises(AlreadyExistsError):
            doc.write({"v": 2}, exclusive=True)
        assert doc.read() == {"v": 1}

    def test_read_missing(self, tmp_path):
        with pytest.raises(NotFoundError):
            JsonDocument(tmp_path / "missing.json").read()

    def test_read_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2]))
        with pytest.raises(ValueError):
            JsonDocument(path).read()

    def test_failed_write_keeps_old_content(self, tmp_path):
        doc = JsonDocument(tmp_path / "record.json")
        doc.write({"v": 1})
        with patch("distribvc.infra.file_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(IOFailureError):
                doc.write({"v": 2})
        assert doc.read() == {"v": 1}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["record.json"]

    def test_delete(self, tmp_path):
        doc = JsonDocument(tmp_path / "record.json")
        doc.write({})
        assert doc.delete() is True
        assert doc.delete() is False


class TestWalkFiles:

    def _tree(self, root):
        for rel in ("b.txt", "a.txt", "sub/z.txt", "sub/deep/y.txt", "skip/x.txt", "a_dir/q.txt"):
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(rel)

    def test_order(self, tmp_path):
        self._tree(tmp_path)
        rels = [p.relative_to(tmp_path).as_posix() for p, _ in walk_files(tmp_path)]
        assert rels == [
            "a.txt", "b.txt",
            "a_dir/q.txt",
            "skip/x.txt",
            "sub/z.txt", "sub/deep/y.txt",
        ]

    def test_prune(self, tmp_path):
        self._tree(tmp_path)
        seen = []

        def prune(path, is_dir):
            seen.append((path.name, is_dir))
            return path.name in ("skip", "b.txt")

        rels = [p.relative_to(tmp_path).as_posix() for p, _ in walk_files(tmp_path, prune)]
        assert "skip/x.txt" not in rels
        assert "b.txt" not in rels
        assert ("skip", True) in seen
        assert ("b.txt", False) in seen

    def test_yields_stat(self, tmp_path):
        (tmp_path / "a.txt").write_text("12345")
        [(path, info)] = list(walk_files(tmp_path))
        assert info.st_size == 5

    def test_missing_root(self, tmp_path):
        assert list(walk_files(tmp_path / "nope")) == []

    def test_dangling_link_skipped(self, tmp_path):
        os.symlink(tmp_path / "target", tmp_path / "link")
        (tmp_path / "real.txt").write_text("x")
        assert [p.name for p, _ in walk_files(tmp_path)] == ["real.txt"]

    def test_lazy_and_restartable(self, tmp_path):
        self._tree(tmp_path)
        walker = walk_files(tmp_path)
        first = next(walker)
        assert first[0].name == "a.txt"
        assert len(list(walk_files(tmp_path))) == 6


class TestRepositoryLock:

    def test_creates_lock_file(self, tmp_path):
        with repository_lock(tmp_path):
            pass
        assert (tmp_path / "lock").exists()

    def test_no_lock_file_without_directory(self, tmp_path):
        repo = tmp_path / "not-yet"
        with repository_lock(repo):
            pass
        assert not repo.exists()

    def test_reentrant(self, tmp_path):
        with repository_lock(tmp_path):
            with repository_lock(tmp_path):
                pass

    def test_excludes_other_threads(self, tmp_path):
        entered = threading.Event()
        order = []

        def worker():
            with repository_lock(tmp_path):
                order.append("worker")
                entered.set()

        with repository_lock(tmp_path):
            thread = threading.Thread(target=worker)
            thread.start()
            time.sleep(0.1)
            assert not entered.is_set()
            order.append("main")

        thread.join(timeout=5)
        assert entered.is_set()
        assert order == ["main", "worker"]
