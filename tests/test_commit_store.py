"""Tests for the commit store."""

import json
import logging

import pytest

from distribvc.domain import ChangeType, Commit, FileChange
from distribvc.errors import (
    AlreadyExistsError, InvalidOperationError, IOFailureError, NotFoundError,
)
from distribvc.infra import CommitStore


@pytest.fixture
def store(tmp_path):
    commits_dir = tmp_path / "commits"
    commits_dir.mkdir()
    return CommitStore(commits_dir)


def _changes():
    return [FileChange("a.txt", ChangeType.ADDED, b"hello")]


class TestCreateCommit:

    def test_no_changes_returns_none(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="distribvc"):
            assert store.create_commit("msg", None, [], "alice") is None
        assert "Nothing to commit" in caplog.text
        assert list(store.commits_dir.iterdir()) == []

    def test_create_does_not_persist(self, store):
        commit = store.create_commit("msg", None, _changes(), "alice")
        assert commit is not None
        assert not store.exists(commit.id)

    def test_parent_is_recorded(self, store):
        commit = store.create_commit("msg", "parent-id", _changes(), "alice")
        assert commit.parent_commit_id == "parent-id"


class TestPersist:

    def test_writes_record(self, store):
        commit = store.create_commit("First", None, _changes(), "alice")
        store.persist(commit)

        record = json.loads((store.commits_dir / f"{commit.id}.json").read_text())
        assert record['id'] == commit.id
        assert record['message'] == "First"
        assert record['parentCommitID'] is None
        assert record['changes'] == [
            {'filePath': 'a.txt', 'changeType': 'ADDED', 'content': 'hello'}
        ]

    def test_write_once(self, store):
        commit = store.create_commit("First", None, _changes(), "alice")
        store.persist(commit)
        with pytest.raises(AlreadyExistsError):
            store.persist(commit)

    def test_refuses_empty_commit(self, store):
        empty = Commit.create("empty", None, [], "alice")
        with pytest.raises(InvalidOperationError):
            store.persist(empty)
        assert not store.exists(empty.id)

    def test_no_temp_files_left(self, store):
        store.persist(store.create_commit("First", None, _changes(), "alice"))
        names = [p.name for p in store.commits_dir.iterdir()]
        assert len(names) == 1
        assert names[0].endswith(".json")


class TestLoad:

    def test_load_round_trip(self, store):
        commit = store.create_commit("First", None, [
            FileChange("a.txt", ChangeType.ADDED, b"hello"),
            FileChange("bin.dat", ChangeType.MODIFIED, b"\x00\xff"),
            FileChange("c.txt", ChangeType.DELETED),
        ], "alice")
        store.persist(commit)
        assert store.load(commit.id) == commit

    def test_load_missing(self, store):
        with pytest.raises(NotFoundError):
            store.load("does-not-exist")

    def test_load_rejects_path_like_ids(self, store):
        for bad in ("", "../escape", "a/b", ".hidden"):
            with pytest.raises(NotFoundError):
                store.load(bad)
            assert not store.exists(bad)

    def test_load_corrupt(self, store):
        (store.commits_dir / "broken.json").write_text("{not json")
        with pytest.raises(IOFailureError):
            store.load("broken")

    def test_load_wrong_shape(self, store):
        (store.commits_dir / "list.json").write_text("[1, 2]")
        with pytest.raises(IOFailureError):
            store.load("list")

    def test_load_many_skips_unreadable(self, store, caplog):
        first = store.create_commit("one", None, _changes(), "alice")
        second = store.create_commit("two", first.id, _changes(), "alice")
        store.persist(first)
        store.persist(second)
        (store.commits_dir / "bad.json").write_text("garbage")

        with caplog.at_level(logging.WARNING, logger="distribvc"):
            loaded = store.load_many([first.id, "missing", "bad", second.id])

        assert [c.id for c in loaded] == [first.id, second.id]
        assert "missing" in caplog.text
        assert "bad" in caplog.text


class TestDiscard:

    def test_discard(self, store):
        commit = store.create_commit("First", None, _changes(), "alice")
        store.persist(commit)
        assert store.discard(commit.id) is True
        assert not store.exists(commit.id)
        assert store.discard(commit.id) is False
