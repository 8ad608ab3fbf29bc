"""
Branch ledger for distribvc.

Tracks every branch of a repository and which one is current.
Branch records live in branches/<name>.json; the HEAD file holds
the current branch name.
"""

from pathlib import Path
from typing import Dict, Optional
import logging
import re

from ..domain import Branch, Commit
from ..errors import AlreadyExistsError, IOFailureError, NotFoundError
from ..infra import JsonDocument

logger = logging.getLogger(__name__)

BRANCH_NAME_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')


def validate_branch_name(name: str) -> str:
    """Branch names become file names, so keep them simple."""
    if not name or not BRANCH_NAME_RE.match(name) or name.endswith('.json'):
        raise ValueError(f"Invalid branch name: {name!r}")
    return name


class BranchLedger:
    """
    Branch map plus current-branch pointer for one repository.

    Example:
        ledger = BranchLedger(repo_path / "branches", repo_path / "HEAD")
        ledger.load()
        branch = ledger.current_branch()
        ledger.add_commit(branch, commit)
    """

    def __init__(self, branches_dir: Path, head_file: Path):
        self.branches_dir = Path(branches_dir)
        self.head_file = Path(head_file)
        self._branches: Dict[str, Branch] = {}
        self._current: Optional[str] = None

    def _document(self, name: str) -> JsonDocument:
        return JsonDocument(self.branches_dir / f"{name}.json")

    def _write_head(self, name: str) -> None:
        try:
            self.head_file.write_text(name + "\n", encoding='utf-8')
        except OSError as e:
            raise IOFailureError(f"Could not update current branch: {e}", self.head_file) from e

    def initialize(self, default_branch: str) -> Branch:
        """Create the default branch and point HEAD at it."""
        validate_branch_name(default_branch)
        branch = Branch(default_branch)
        self._document(default_branch).write(branch.to_dict())
        self._write_head(default_branch)
        self._branches = {default_branch: branch}
        self._current = default_branch
        return branch

    def load(self, default_branch: str = "master") -> None:
        """
        Read all branch records and the HEAD file.

        Raises:
            IOFailureError: If the records cannot be read
        """
        branches: Dict[str, Branch] = {}
        try:
            record_files = sorted(self.branches_dir.glob('*.json'))
        except OSError as e:
            raise IOFailureError(f"Could not list branches: {e}", self.branches_dir) from e

        for record_file in record_files:
            document = JsonDocument(record_file)
            try:
                data = document.read()
                branch = Branch.from_dict(data)
            except ValueError as e:
                raise IOFailureError(f"Corrupt branch record {record_file.name}: {e}", record_file) from e
            stored_head = data.get('headCommitID')
            if stored_head != branch.head_commit_id:
                logger.warning(
                    f"Branch {branch.name}: stored head {stored_head} does not match history; using history"
                )
            branches[branch.name] = branch

        try:
            current = self.head_file.read_text(encoding='utf-8').strip()
        except FileNotFoundError:
            current = ''
        except OSError as e:
            raise IOFailureError(f"Could not read HEAD: {e}", self.head_file) from e

        if not current:
            logger.warning(f"HEAD is empty; using {default_branch}")
            current = default_branch
        try:
            validate_branch_name(current)
        except ValueError:
            logger.warning(f"HEAD holds invalid branch name {current!r}; using {default_branch}")
            current = default_branch
        if current not in branches:
            logger.warning(f"HEAD names unknown branch {current}; starting it empty")
            branches[current] = Branch(current)

        self._branches = branches
        self._current = current

    def current_branch(self) -> Branch:
        if self._current is None:
            raise NotFoundError("No current branch")
        return self._branches[self._current]

    @property
    def current_name(self) -> Optional[str]:
        return self._current

    def branches(self) -> Dict[str, Branch]:
        """Snapshot of all branches by name."""
        return {name: branch.copy() for name, branch in sorted(self._branches.items())}

    def get_branch(self, name: str) -> Branch:
        try:
            return self._branches[name]
        except KeyError:
            raise NotFoundError(f"Branch does not exist: {name}") from None

    def add_commit(self, branch: Branch, commit: Commit) -> None:
        """
        Append a commit to a branch and persist the branch record.

        The in-memory branch only changes once the record is written,
        so a failed write leaves history and head where they were.
        """
        target = self.get_branch(branch.name)
        updated = target.copy()
        updated.add_commit(commit)
        self._document(updated.name).write(updated.to_dict())
        target.add_commit(commit)
        logger.debug(f"Branch {target.name} head is now {commit.id}")

    def create_branch(self, name: str) -> Branch:
        """
        Create an empty branch.

        Raises:
            AlreadyExistsError: If the name is taken
            ValueError: If the name is not a valid branch name
        """
        validate_branch_name(name)
        if name in self._branches:
            raise AlreadyExistsError(f"Branch already exists: {name}")
        branch = Branch(name)
        self._document(name).write(branch.to_dict(), exclusive=True)
        self._branches[name] = branch
        logger.info(f"Created branch {name}")
        return branch

    def switch_branch(self, name: str) -> Branch:
        """
        Make another branch current.

        Only the pointer and HEAD change; the working tree and staging
        area are left alone.

        Raises:
            NotFoundError: If the branch does not exist
        """
        branch = self.get_branch(name)
        self._write_head(name)
        self._current = name
        logger.info(f"Switched to branch {name}")
        return branch
