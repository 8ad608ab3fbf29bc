"""
Domain layer for distribvc.

Contains pure domain objects with no I/O or side effects:
- Commit / FileChange / ChangeType: immutable snapshots of staged changes
- Branch: named commit history with a derived head pointer
- RepositoryStatus / FileStatus: staged vs. working tree report
- StageSummary / StageDetail: per-path outcome of staging
"""

from .commit import Commit, FileChange, ChangeType, generate_commit_id
from .branch import Branch
from .status import RepositoryStatus, FileStatus
from .operation import StageSummary, StageDetail, OperationStatus

__all__ = [
    'Commit',
    'FileChange',
    'ChangeType',
    'generate_commit_id',
    'Branch',
    'RepositoryStatus',
    'FileStatus',
    'StageSummary',
    'StageDetail',
    'OperationStatus',
]
