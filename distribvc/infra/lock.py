"""
Repository locking for distribvc.

Every top-level operation holds repository_lock() for its duration:
- a process-local re-entrant mutex keyed by the metadata directory
- an advisory fcntl lock on the lock file (POSIX only)

The file lock is only taken once the metadata directory exists, so
init is protected by the in-process mutex alone.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator
import logging
import warnings

try:
    import fcntl  # POSIX systems

    HAVE_FCNTL = True
except ImportError:
    HAVE_FCNTL = False

from ..errors import IOFailureError

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_mutexes: Dict[str, threading.RLock] = {}
_depth = threading.local()


def _mutex_for(key: str) -> threading.RLock:
    with _registry_lock:
        mutex = _mutexes.get(key)
        if mutex is None:
            mutex = threading.RLock()
            _mutexes[key] = mutex
        return mutex


def _held() -> Dict[str, int]:
    if not hasattr(_depth, 'counts'):
        _depth.counts = {}
    return _depth.counts


@contextmanager
def repository_lock(repo_path: Path, lock_file: str = "lock") -> Iterator[None]:
    """
    Hold exclusive access to a repository's metadata directory.

    Re-entrant within a thread: nested calls for the same repository
    only take the file lock once.

    Args:
        repo_path: Metadata directory of the repository
        lock_file: Name of the lock file inside repo_path
    """
    key = str(Path(repo_path).resolve())
    mutex = _mutex_for(key)

    with mutex:
        counts = _held()
        outermost = counts.get(key, 0) == 0
        counts[key] = counts.get(key, 0) + 1
        handle = None
        try:
            if outermost and Path(key).is_dir():
                if HAVE_FCNTL:
                    try:
                        handle = open(Path(key) / lock_file, 'a')
                        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
                    except OSError as e:
                        if handle is not None:
                            handle.close()
                        raise IOFailureError(f"Could not lock repository {key}: {e}", key) from e
                else:
                    warnings.warn("File locking not available on this platform", stacklevel=3)
            yield
        finally:
            if handle is not None:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
                handle.close()
            counts[key] -= 1
            if counts[key] == 0:
                del counts[key]
