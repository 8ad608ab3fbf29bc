"""
Service layer for distribvc.

Contains the versioning logic that orchestrates domain objects and
infrastructure:
- RepositoryService: init/load, stage, commit, status, log, branches
- BranchLedger: branch records and the HEAD pointer
- ChangeDetector: classification of staged files

Services are the primary API for commands to use.
"""

from .change_detector import ChangeDetector
from .branch_ledger import BranchLedger
from .repository_service import Repository, RepositoryService, default_author

__all__ = [
    'ChangeDetector',
    'BranchLedger',
    'Repository',
    'RepositoryService',
    'default_author',
]
