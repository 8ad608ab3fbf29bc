"""
Directory traversal for distribvc.

walk_files() is an explicit-stack walk yielding (path, stat) pairs for
regular files. It is lazy and finite; to restart, call it again.
"""

import os
import stat
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple
import logging

from ..errors import IOFailureError

logger = logging.getLogger(__name__)

PruneFn = Callable[[Path, bool], bool]


def walk_files(
    root: Path,
    prune: Optional[PruneFn] = None
) -> Iterator[Tuple[Path, os.stat_result]]:
    """
    Yield every regular file below root.

    Within a directory, names are visited in sorted order and files come
    before the contents of subdirectories.

    Args:
        root: Directory to walk
        prune: Called as prune(path, is_dir); returning True skips the
            file, or the whole subtree for a directory

    Yields:
        (absolute path, stat result) for each file

    Raises:
        IOFailureError: If a directory cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        return

    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise IOFailureError(f"Could not list {directory}: {e}", directory) from e

        subdirs = []
        for entry in entries:
            path = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=False):
                    if prune is None or not prune(path, True):
                        subdirs.append(path)
                    continue
                info = entry.stat()
            except FileNotFoundError:
                logger.debug(f"Skipping dangling link {path}")
                continue
            except OSError as e:
                raise IOFailureError(f"Could not stat {path}: {e}", path) from e

            if not stat.S_ISREG(info.st_mode):
                continue
            if prune is not None and prune(path, False):
                continue
            yield path, info

        # Reverse so the smallest name is popped first
        stack.extend(reversed(subdirs))
