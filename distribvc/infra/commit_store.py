"""
Commit store for distribvc.

Creates commits and keeps one JSON record per commit under the
commits directory, named <id>.json. Records are write-once.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence
import logging

from ..domain import Commit, FileChange
from ..errors import InvalidOperationError, IOFailureError, NotFoundError
from .file_store import JsonDocument

logger = logging.getLogger(__name__)


class CommitStore:
    """
    Creates, persists and resolves commits.

    Example:
        store = CommitStore(repo_path / "commits")
        commit = store.create_commit("msg", None, changes, "alice")
        if commit is not None:
            store.persist(commit)
        same = store.load(commit.id)
    """

    def __init__(self, commits_dir: Path):
        self.commits_dir = Path(commits_dir)

    def _document(self, commit_id: str) -> JsonDocument:
        if not commit_id or '/' in commit_id or '\\' in commit_id or commit_id.startswith('.'):
            raise NotFoundError(f"Invalid commit id: {commit_id!r}")
        return JsonDocument(self.commits_dir / f"{commit_id}.json")

    def create_commit(
        self,
        message: str,
        parent_id: Optional[str],
        changes: Sequence[FileChange],
        author: str
    ) -> Optional[Commit]:
        """
        Build a new commit with a fresh id and timestamp.

        Returns:
            The commit, or None when there are no changes to commit
        """
        if not changes:
            logger.warning("Nothing to commit")
            return None
        return Commit.create(message, parent_id, changes, author)

    def persist(self, commit: Commit) -> None:
        """
        Write a commit record exactly once.

        Raises:
            InvalidOperationError: If the commit has no changes
            AlreadyExistsError: If a record with this id exists
            IOFailureError: If the write fails
        """
        if not commit.changes:
            raise InvalidOperationError(f"Refusing to persist empty commit {commit.id}")
        self._document(commit.id).write(commit.to_dict(), exclusive=True)
        logger.debug(f"Persisted commit {commit.id}")

    def exists(self, commit_id: str) -> bool:
        try:
            return self._document(commit_id).exists()
        except NotFoundError:
            return False

    def load(self, commit_id: str) -> Commit:
        """
        Resolve a commit id.

        Raises:
            NotFoundError: If no such commit exists
            IOFailureError: If the record cannot be read or parsed
        """
        document = self._document(commit_id)
        try:
            return Commit.from_dict(document.read())
        except ValueError as e:
            raise IOFailureError(f"Corrupt commit record {commit_id}: {e}", document.path) from e

    def load_many(self, commit_ids: Iterable[str]) -> list:
        """
        Resolve ids in order, skipping commits that cannot be loaded.

        Each skipped commit is logged as a warning.
        """
        commits = []
        for commit_id in commit_ids:
            try:
                commits.append(self.load(commit_id))
            except (NotFoundError, IOFailureError) as e:
                logger.warning(f"Could not read commit {commit_id}: {e}")
        return commits

    def discard(self, commit_id: str) -> bool:
        """Remove a record written by a commit attempt that did not complete."""
        removed = self._document(commit_id).delete()
        if removed:
            logger.warning(f"Discarded commit record {commit_id}")
        return removed
