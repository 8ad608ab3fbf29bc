"""
Change detection for distribvc.

Classifies every file in the staging mirror against the working tree:

- working copy missing            -> ADDED (content: staged bytes)
- working copy with other bytes   -> MODIFIED (content: staged bytes)
- working copy with same bytes    -> DELETED (no content)

Note the last rule: a staged file that still matches the working tree
is recorded as DELETED, not skipped. Commit records rely on this
classification.
"""

from pathlib import Path
from typing import List
import logging

from ..domain import ChangeType, FileChange
from ..errors import IOFailureError
from ..infra import walk_files

logger = logging.getLogger(__name__)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise IOFailureError(f"Could not read {path}: {e}", path) from e


def classify(staged_file: Path, original: Path) -> ChangeType:
    """Classify one staged file against its working-tree counterpart."""
    if not original.exists():
        return ChangeType.ADDED
    if not original.is_file():
        # A directory now sits where the file was
        return ChangeType.ADDED
    if _read_bytes(original) != _read_bytes(staged_file):
        return ChangeType.MODIFIED
    return ChangeType.DELETED


class ChangeDetector:
    """
    Produces the FileChange list for a commit.

    Example:
        changes = ChangeDetector().collect(staging_root, root_path)
    """

    def collect(self, staging_root: Path, root_path: Path) -> List[FileChange]:
        """
        Classify every staged file.

        Args:
            staging_root: Root of the staging mirror
            root_path: Root of the working tree

        Returns:
            One FileChange per staged file, sorted by relative path

        Raises:
            IOFailureError: If any file cannot be read; no partial result
        """
        staging_root = Path(staging_root)
        root_path = Path(root_path)
        changes = []

        for staged_file, _info in walk_files(staging_root):
            relative = staged_file.relative_to(staging_root)
            original = root_path / relative
            change_type = classify(staged_file, original)

            content = None
            if change_type != ChangeType.DELETED:
                content = _read_bytes(staged_file)

            changes.append(FileChange(
                file_path=relative.as_posix(),
                change_type=change_type,
                content=content,
            ))
            logger.debug(f"{change_type.value}: {relative.as_posix()}")

        changes.sort(key=lambda c: c.file_path)
        return changes
