"""
Repository service for distribvc.

Provides the repository workflow: init/load, staging, commit, status,
log and branch switching. This is the primary API for commands to use.

Commit workflow:
    Clean --stage()--> Staged --commit()--> Committed --clear--> Clean

A commit collects changes from the staging mirror, persists a commit
record, advances the current branch and only then clears the staging
mirror. Any failure before the clear step leaves staged files in place
so the commit can be retried.
"""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union
from pathlib import Path
import getpass
import logging
import os
import shutil

from ..config import RepositoryLayout
from ..domain import (
    Branch, Commit, FileStatus, OperationStatus, RepositoryStatus,
    StageDetail, StageSummary,
)
from ..errors import (
    AlreadyExistsError, IOFailureError, NotFoundError, VCSError,
)
from ..ignore import IgnoreMatcher, default_ignore_content
from ..infra import CommitStore, repository_lock, walk_files
from .branch_ledger import BranchLedger
from .change_detector import ChangeDetector

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COMPARE_CHUNK_SIZE = 64 * 1024


class Repository:
    """
    An initialized repository: working tree root plus metadata directory.

    Owns the ignore matcher and the branch ledger. Paths are derived
    from the layout so nothing here is hard-coded.
    """

    def __init__(
        self,
        root_path: Path,
        layout: RepositoryLayout,
        ignore: IgnoreMatcher,
        ledger: BranchLedger
    ):
        self.root_path = root_path
        self.layout = layout
        self.ignore = ignore
        self.ledger = ledger

    @property
    def repo_path(self) -> Path:
        return self.root_path / self.layout.repo_dir

    @property
    def commits_path(self) -> Path:
        return self.repo_path / self.layout.commits_dir

    @property
    def staging_path(self) -> Path:
        return self.repo_path / self.layout.staging_dir

    @property
    def ignore_path(self) -> Path:
        return self.root_path / self.layout.ignore_file

    @property
    def current_branch(self) -> Branch:
        return self.ledger.current_branch()

    @property
    def branches(self) -> Dict[str, Branch]:
        return self.ledger.branches()

    def lock(self):
        """Exclusive access to this repository for one operation."""
        return repository_lock(self.repo_path, self.layout.lock_file)

    def is_metadata(self, path: Path) -> bool:
        """True for the metadata directory and anything inside it."""
        try:
            path.relative_to(self.repo_path)
            return True
        except ValueError:
            return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root_path': str(self.root_path),
            'repo_path': str(self.repo_path),
            'current_branch': self.ledger.current_name,
            'branches': sorted(self.ledger.branches()),
            'ignore_patterns': sorted(self.ignore.patterns),
        }

    def __repr__(self) -> str:
        return f"Repository({str(self.root_path)!r})"


def default_author(config: Optional[Dict[str, Any]] = None) -> str:
    """Configured author, else the login name."""
    author = (config or {}).get('general', {}).get('author')
    if author:
        return str(author)
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "unknown"


class RepositoryService:
    """
    Service coordinating ignore matching, change detection, the commit
    store and the branch ledger.

    Example:
        service = RepositoryService()
        repo = service.init(Path("/path/to/project"))
        service.stage(repo, ["README.md"])
        commit = service.commit(repo, "Add readme", "alice")
        for c in service.log(repo):
            print(c.id, c.message)
    """

    def __init__(
        self,
        layout: Optional[RepositoryLayout] = None,
        config: Optional[Dict[str, Any]] = None,
        change_detector: Optional[ChangeDetector] = None,
        store_factory: Optional[Callable[[Path], CommitStore]] = None
    ):
        """
        Initialize RepositoryService.

        Args:
            layout: On-disk names (built from config if None)
            config: Configuration dict (defaults if None)
            change_detector: Change detector instance (creates default if None)
            store_factory: Builds the commit store for a commits directory
        """
        self.config = config or {}
        self.layout = layout or RepositoryLayout.from_config(self.config)
        self.detector = change_detector or ChangeDetector()
        self.store_factory = store_factory or CommitStore

    def store(self, repository: Repository) -> CommitStore:
        return self.store_factory(repository.commits_path)

    # Repository lifecycle

    def init(self, root_path: PathLike) -> Repository:
        """
        Initialize a new repository.

        Raises:
            AlreadyExistsError: If the metadata directory already exists
            IOFailureError: If the layout cannot be created
        """
        root = Path(root_path).expanduser().resolve()
        layout = self.layout
        repo_path = root / layout.repo_dir

        with repository_lock(repo_path, layout.lock_file):
            if repo_path.exists():
                raise AlreadyExistsError(f"Repository already exists in {root}")

            try:
                root.mkdir(parents=True, exist_ok=True)
                repo_path.mkdir()
                for name in (layout.commits_dir, layout.staging_dir, layout.branches_dir):
                    (repo_path / name).mkdir()

                ignore_path = root / layout.ignore_file
                if not ignore_path.exists():
                    ignore_path.write_text(
                        default_ignore_content(
                            layout.repo_dir,
                            layout.ignore_file,
                            layout.default_ignore_patterns,
                        ),
                        encoding='utf-8',
                    )
            except OSError as e:
                logger.error(f"Failed to initialize repository: {e}")
                raise IOFailureError(f"Could not initialize repository: {e}", root) from e

            ledger = BranchLedger(repo_path / layout.branches_dir, repo_path / layout.head_file)
            ledger.initialize(layout.default_branch)

            repository = Repository(root, layout, self._matcher(root), ledger)

        logger.info(f"Initialized empty repository in {repo_path}")
        return repository

    def load(self, root_path: PathLike) -> Repository:
        """
        Open an existing repository.

        Raises:
            NotFoundError: If there is no metadata directory
        """
        root = Path(root_path).expanduser().resolve()
        layout = self.layout
        repo_path = root / layout.repo_dir

        if not repo_path.is_dir():
            raise NotFoundError(f"No repository exists in {root}")

        with repository_lock(repo_path, layout.lock_file):
            ledger = BranchLedger(repo_path / layout.branches_dir, repo_path / layout.head_file)
            ledger.load(layout.default_branch)
            repository = Repository(root, layout, self._matcher(root), ledger)

        logger.debug(f"Loaded repository {root} on branch {ledger.current_name}")
        return repository

    def _matcher(self, root: Path) -> IgnoreMatcher:
        matcher = IgnoreMatcher(root)
        ignore_path = root / self.layout.ignore_file
        try:
            matcher.load(ignore_path)
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailureError(f"Could not read ignore file: {e}", ignore_path) from e
        return matcher

    # Staging

    def stage(self, repository: Repository, paths: Iterable[PathLike]) -> StageSummary:
        """
        Copy files into the staging mirror.

        Best effort: every path is handled on its own. Ignored, missing,
        unreadable and out-of-tree paths are skipped with a log message;
        an I/O error on one file does not stop the others. Directories
        are staged recursively.

        Args:
            repository: Target repository
            paths: Absolute paths, or paths relative to the repository root

        Returns:
            StageSummary with one detail per file considered
        """
        summary = StageSummary()
        with repository.lock():
            for raw in paths:
                for detail in self._stage_path(repository, raw):
                    summary.add_detail(detail)

        logger.info(
            f"Staged {summary.staged} file(s), skipped {summary.skipped}, failed {summary.failed}"
        )
        return summary

    def _resolve(self, repository: Repository, raw: PathLike) -> Path:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = repository.root_path / path
        path = Path(os.path.abspath(path))
        # Resolve the directory part only; a symlinked file stays in the tree
        return path.parent.resolve() / path.name if path.name else path.resolve()

    def _stage_path(self, repository: Repository, raw: PathLike) -> Iterator[StageDetail]:
        path = self._resolve(repository, raw)
        root = repository.root_path

        try:
            rel = path.relative_to(root)
        except ValueError:
            logger.warning(f"Path is outside the repository: {raw}")
            yield StageDetail(str(raw), OperationStatus.SKIPPED, "outside repository")
            return

        display = rel.as_posix()
        if repository.is_metadata(path):
            logger.info(f"Skipping repository metadata: {display}")
            yield StageDetail(display, OperationStatus.SKIPPED, "repository metadata")
            return

        if display != '.' and repository.ignore.should_ignore(path):
            logger.info(f"Skipping ignored file: {display}")
            yield StageDetail(display, OperationStatus.SKIPPED, "ignored")
            return

        if path.is_dir():
            try:
                for file_path, _info in walk_files(path, prune=self._pruner(repository)):
                    yield self._stage_file(repository, file_path)
            except IOFailureError as e:
                logger.error(f"Error staging directory {display}: {e}")
                yield StageDetail(display, OperationStatus.FAILED, str(e))
            return

        if not path.is_file() or not os.access(path, os.R_OK):
            logger.warning(f"File does not exist or is not readable: {display}")
            yield StageDetail(display, OperationStatus.SKIPPED, "missing or unreadable")
            return

        yield self._stage_file(repository, path)

    def _stage_file(self, repository: Repository, path: Path) -> StageDetail:
        rel = path.relative_to(repository.root_path)
        staged = repository.staging_path / rel
        try:
            staged.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, staged)
        except OSError as e:
            logger.error(f"Error staging file {rel.as_posix()}: {e}")
            return StageDetail(rel.as_posix(), OperationStatus.FAILED, str(e))

        logger.info(f"Staged file: {rel.as_posix()}")
        return StageDetail(rel.as_posix(), OperationStatus.SUCCESS)

    def _pruner(self, repository: Repository):
        def prune(path: Path, is_dir: bool) -> bool:
            if repository.is_metadata(path):
                return True
            return repository.ignore.should_ignore(path)
        return prune

    # Commit

    def commit(
        self,
        repository: Repository,
        message: str,
        author: Optional[str] = None
    ) -> Optional[Commit]:
        """
        Commit everything in the staging mirror to the current branch.

        Returns:
            The new commit, or None when nothing is staged

        Raises:
            IOFailureError: If collecting or persisting fails (staging kept)
            NotFoundError: If the branch head points at a missing commit
        """
        author = author or default_author(self.config)

        with repository.lock():
            staging = repository.staging_path
            if next(walk_files(staging), None) is None:
                logger.warning("No changes to commit")
                return None

            changes = self.detector.collect(staging, repository.root_path)

            branch = repository.ledger.current_branch()
            parent_id = branch.head_commit_id
            store = self.store(repository)
            if parent_id is not None and not store.exists(parent_id):
                raise NotFoundError(f"Parent commit {parent_id} of branch {branch.name} is missing")

            commit = store.create_commit(message, parent_id, changes, author)
            if commit is None:
                return None

            store.persist(commit)
            try:
                repository.ledger.add_commit(branch, commit)
            except VCSError:
                logger.error(f"Could not advance branch {branch.name}; discarding {commit.id}")
                try:
                    store.discard(commit.id)
                except VCSError as cleanup_error:
                    logger.error(f"Could not discard commit {commit.id}: {cleanup_error}")
                raise

            self._clear_staging(staging)

        logger.info(f"Committed changes: {commit.id}")
        return commit

    def _clear_staging(self, staging: Path) -> None:
        """Delete every staged file and subdirectory, keeping the root."""
        try:
            for dirpath, dirnames, filenames in os.walk(staging, topdown=False):
                for filename in filenames:
                    os.unlink(os.path.join(dirpath, filename))
                for dirname in dirnames:
                    full = os.path.join(dirpath, dirname)
                    if os.path.islink(full):
                        os.unlink(full)
                    else:
                        os.rmdir(full)
        except OSError as e:
            logger.error(f"Commit recorded but staging area could not be cleared: {e}")
            raise IOFailureError(f"Could not clear staging area: {e}", staging) from e

    # Queries

    def status(self, repository: Repository) -> RepositoryStatus:
        """
        Compare the working tree with the staging mirror.

        Working-tree files without a staged copy are UNTRACKED, files
        whose staged copy differs are MODIFIED, matching files are
        omitted. Every staged file is also listed as STAGED.

        Raises:
            IOFailureError: If a directory or file cannot be read
        """
        with repository.lock():
            root = repository.root_path
            staging = repository.staging_path

            unstaged: Dict[str, FileStatus] = {}
            for file_path, _info in walk_files(root, prune=self._pruner(repository)):
                rel = file_path.relative_to(root)
                staged_copy = staging / rel
                if not staged_copy.is_file():
                    unstaged[rel.as_posix()] = FileStatus.UNTRACKED
                elif not self._same_content(file_path, staged_copy):
                    unstaged[rel.as_posix()] = FileStatus.MODIFIED

            staged: Dict[str, FileStatus] = {
                file_path.relative_to(staging).as_posix(): FileStatus.STAGED
                for file_path, _info in walk_files(staging)
            }

            return RepositoryStatus(
                branch=repository.ledger.current_name or '',
                staged_files=staged,
                unstaged_files=unstaged,
            )

    @staticmethod
    def _same_content(a: Path, b: Path) -> bool:
        try:
            if a.stat().st_size != b.stat().st_size:
                return False
            with open(a, 'rb') as fa, open(b, 'rb') as fb:
                while True:
                    chunk_a = fa.read(COMPARE_CHUNK_SIZE)
                    if chunk_a != fb.read(COMPARE_CHUNK_SIZE):
                        return False
                    if not chunk_a:
                        return True
        except OSError as e:
            raise IOFailureError(f"Could not compare {a}: {e}", a) from e

    def log(self, repository: Repository) -> List[Commit]:
        """
        Commits of the current branch, oldest first.

        Commits that cannot be loaded are skipped with a warning.
        """
        with repository.lock():
            branch = repository.ledger.current_branch()
            commits = self.store(repository).load_many(branch.commit_history)

        if not commits:
            logger.info(f"No commits found in branch: {branch.name}")
        return commits

    # Branches

    def create_branch(self, repository: Repository, name: str) -> Branch:
        with repository.lock():
            return repository.ledger.create_branch(name).copy()

    def switch_branch(self, repository: Repository, name: str) -> Branch:
        with repository.lock():
            return repository.ledger.switch_branch(name).copy()
