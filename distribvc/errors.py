"""
Error taxonomy for distribvc.

Every failure raised by the versioning core is a VCSError subclass:
- AlreadyExistsError: re-initialization, duplicate branch or commit id
- NotFoundError: missing repository, commit, branch or parent commit
- InvalidOperationError: an operation that cannot apply in the current state
- IOFailureError: a disk read/write error, wrapping the original OSError
"""

from pathlib import Path
from typing import Optional, Union


class VCSError(Exception):
    """Base class for all distribvc errors."""


class AlreadyExistsError(VCSError):
    """Raised when creating something that already exists."""


class NotFoundError(VCSError):
    """Raised when a repository, commit or branch cannot be found."""


class InvalidOperationError(VCSError):
    """Raised when an operation is not valid in the current state."""


class IOFailureError(VCSError):
    """Raised when reading or writing the repository fails."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None
