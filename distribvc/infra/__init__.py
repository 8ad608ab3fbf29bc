"""
Infrastructure layer for distribvc.

Contains everything that touches the disk directly:
- JsonDocument: atomic JSON record persistence
- CommitStore: write-once commit records
- walk_files: lazy directory traversal
- repository_lock: exclusive access to a repository

These provide clean interfaces that can be mocked for testing.
"""

from .file_store import JsonDocument
from .commit_store import CommitStore
from .fs_walk import walk_files
from .lock import repository_lock

__all__ = [
    'JsonDocument',
    'CommitStore',
    'walk_files',
    'repository_lock',
]
