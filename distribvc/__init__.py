"""
distribvc - A local, snapshot-based version control engine.

distribvc tracks a working directory, lets you stage a subset of files
and records immutable, chained commits of those files on a branch.

Quick Start:
    import distribvc

    repo = distribvc.init_repository("~/projects/notes")
    distribvc.stage_files(repo, ["todo.txt"])
    commit = distribvc.commit(repo, "Add todo list", author="alice")

    status = distribvc.get_repository_status(repo)
    print(dict(status.staged_files), dict(status.unstaged_files))

    for c in distribvc.get_commit_log(repo):
        print(c.id, c.message)

Domain Objects:
    Commit - Immutable snapshot with message, author and parent link
    FileChange - One changed path (ADDED, MODIFIED or DELETED)
    Branch - Named commit history with a head pointer
    RepositoryStatus - Staged and unstaged files

Services:
    RepositoryService - init/load, stage, commit, status, log, branches

On disk:
    <root>/.distribvcignore       ignore patterns
    <root>/.distribvc/HEAD        current branch
    <root>/.distribvc/commits/    one JSON record per commit
    <root>/.distribvc/staging/    staged file copies
    <root>/.distribvc/branches/   branch records
"""

__version__ = "0.1.0"

# High-level API
from .api import (
    create_service,
    init_repository,
    load_repository,
    stage_files,
    commit,
    get_repository_status,
    get_commit_log,
    create_branch,
    switch_branch,
)

# Domain objects
from .domain import (
    Commit,
    FileChange,
    ChangeType,
    Branch,
    RepositoryStatus,
    FileStatus,
    StageSummary,
)

# Services (for advanced use)
from .services import Repository, RepositoryService

# Errors
from .errors import (
    VCSError,
    AlreadyExistsError,
    NotFoundError,
    InvalidOperationError,
    IOFailureError,
)

# Configuration
from .config import RepositoryLayout, load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "create_service",
    "init_repository",
    "load_repository",
    "stage_files",
    "commit",
    "get_repository_status",
    "get_commit_log",
    "create_branch",
    "switch_branch",
    # Domain objects
    "Commit",
    "FileChange",
    "ChangeType",
    "Branch",
    "RepositoryStatus",
    "FileStatus",
    "StageSummary",
    # Services
    "Repository",
    "RepositoryService",
    # Errors
    "VCSError",
    "AlreadyExistsError",
    "NotFoundError",
    "InvalidOperationError",
    "IOFailureError",
    # Configuration
    "RepositoryLayout",
    "load_config",
    "save_config",
]
