"""Tests for the high-level Python API."""

import pytest

import distribvc
from distribvc import (
    AlreadyExistsError, ChangeType, FileStatus, NotFoundError, RepositoryLayout,
)


class TestApiWorkflow:
    """End-to-end use of the module-level functions."""

    def test_full_workflow(self, tmp_path):
        repo = distribvc.init_repository(tmp_path)
        (tmp_path / "notes.txt").write_text("draft")

        summary = distribvc.stage_files(repo, ["notes.txt"])
        assert summary.staged_paths == ["notes.txt"]

        status = distribvc.get_repository_status(repo)
        assert status.staged_files == {"notes.txt": FileStatus.STAGED}

        (tmp_path / "notes.txt").write_text("final")
        commit = distribvc.commit(repo, "Save notes", author="alice")
        assert commit.changes[0].change_type == ChangeType.MODIFIED
        assert commit.changes[0].content == b"draft"

        assert distribvc.commit(repo, "again", author="alice") is None
        assert [c.id for c in distribvc.get_commit_log(repo)] == [commit.id]

    def test_load_sees_previous_work(self, tmp_path):
        repo = distribvc.init_repository(tmp_path)
        (tmp_path / "a.txt").write_text("a")
        distribvc.stage_files(repo, ["a.txt"])
        commit = distribvc.commit(repo, "first", author="alice")

        loaded = distribvc.load_repository(tmp_path)
        assert loaded.current_branch.head_commit_id == commit.id

    def test_branches(self, tmp_path):
        repo = distribvc.init_repository(tmp_path)
        distribvc.create_branch(repo, "dev")
        branch = distribvc.switch_branch(repo, "dev")
        assert branch.name == "dev"
        assert distribvc.get_commit_log(repo) == []

    def test_errors(self, tmp_path):
        with pytest.raises(NotFoundError):
            distribvc.load_repository(tmp_path)
        distribvc.init_repository(tmp_path)
        with pytest.raises(AlreadyExistsError):
            distribvc.init_repository(tmp_path)

    def test_custom_layout_is_kept(self, tmp_path):
        layout = RepositoryLayout(repo_dir=".vc", ignore_file=".vcignore")
        repo = distribvc.init_repository(tmp_path, layout=layout)
        (tmp_path / "a.txt").write_text("a")
        distribvc.stage_files(repo, ["a.txt"])
        distribvc.commit(repo, "first", author="alice")
        assert list((tmp_path / ".vc" / "commits").iterdir())
        assert not (tmp_path / ".distribvc").exists()

    def test_author_from_config_file(self, tmp_path, isolated_home):
        config_dir = isolated_home / ".distribvc"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("general:\n  author: frank\n")

        repo = distribvc.init_repository(tmp_path / "work")
        (tmp_path / "work" / "a.txt").write_text("a")
        distribvc.stage_files(repo, ["a.txt"])
        assert distribvc.commit(repo, "first").author == "frank"

    def test_version(self):
        assert distribvc.__version__ == "0.1.0"
