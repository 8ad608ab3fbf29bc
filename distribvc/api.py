"""
High-level Python API for distribvc.

Plain functions over RepositoryService for callers that do not need
to manage a service instance (CLI commands, an HTTP layer, scripts).

Example:
    import distribvc

    repo = distribvc.init_repository("/path/to/project")
    distribvc.stage_files(repo, ["README.md", "src"])
    commit = distribvc.commit(repo, "First snapshot", author="alice")
    if commit is None:
        print("Nothing to commit")

    status = distribvc.get_repository_status(repo)
    for path, state in status.unstaged_files.items():
        print(path, state.value)

    for c in distribvc.get_commit_log(repo):
        print(c.short_id, c.message)
"""

from typing import Any, Dict, Iterable, List, Optional, Union
from pathlib import Path
import logging

from .config import RepositoryLayout, load_config
from .domain import Branch, Commit, RepositoryStatus, StageSummary
from .services import Repository, RepositoryService

logger = logging.getLogger(__name__)


def create_service(
    layout: Optional[RepositoryLayout] = None,
    config: Optional[Dict[str, Any]] = None
) -> RepositoryService:
    """
    Build a RepositoryService.

    Args:
        layout: On-disk layout (from config if None)
        config: Full config dict (loaded from the config file if None)
    """
    if config is None:
        config = load_config()
    return RepositoryService(layout=layout, config=config)


def _service_for(repository: Repository) -> RepositoryService:
    return create_service(layout=repository.layout)


def init_repository(
    root_path: Union[str, Path],
    layout: Optional[RepositoryLayout] = None
) -> Repository:
    """Initialize a repository; AlreadyExistsError if one exists."""
    return create_service(layout).init(root_path)


def load_repository(
    root_path: Union[str, Path],
    layout: Optional[RepositoryLayout] = None
) -> Repository:
    """Open a repository; NotFoundError if there is none."""
    return create_service(layout).load(root_path)


def stage_files(repository: Repository, paths: Iterable[Union[str, Path]]) -> StageSummary:
    """Stage paths, best effort per path."""
    return _service_for(repository).stage(repository, paths)


def commit(
    repository: Repository,
    message: str,
    author: Optional[str] = None
) -> Optional[Commit]:
    """Commit staged files. None means there was nothing to commit."""
    return _service_for(repository).commit(repository, message, author)


def get_repository_status(repository: Repository) -> RepositoryStatus:
    return _service_for(repository).status(repository)


def get_commit_log(repository: Repository) -> List[Commit]:
    """Commits of the current branch, oldest first."""
    return _service_for(repository).log(repository)


def create_branch(repository: Repository, name: str) -> Branch:
    return _service_for(repository).create_branch(repository, name)


def switch_branch(repository: Repository, name: str) -> Branch:
    return _service_for(repository).switch_branch(repository, name)
