"""
Repository status domain objects for distribvc.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping


class FileStatus(Enum):
    """Status of a single path in a status report."""
    UNTRACKED = "UNTRACKED"
    MODIFIED = "MODIFIED"
    STAGED = "STAGED"


def _freeze(entries: Mapping[str, FileStatus]) -> Mapping[str, FileStatus]:
    return MappingProxyType(dict(sorted(entries.items())))


@dataclass(frozen=True)
class RepositoryStatus:
    """
    Staged and unstaged files of a repository.

    Both maps are read-only views keyed by repository-relative POSIX
    paths. A path may appear in both: a file staged and then edited
    again is STAGED and MODIFIED at the same time.
    """
    branch: str
    staged_files: Mapping[str, FileStatus] = field(default_factory=dict)
    unstaged_files: Mapping[str, FileStatus] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'staged_files', _freeze(self.staged_files))
        object.__setattr__(self, 'unstaged_files', _freeze(self.unstaged_files))

    @property
    def clean(self) -> bool:
        return not self.staged_files and not self.unstaged_files

    def entries(self) -> Iterator[Dict[str, Any]]:
        """Yield one flat record per (section, path) for streaming output."""
        for path, status in self.staged_files.items():
            yield {'path': path, 'status': status.value, 'staged': True}
        for path, status in self.unstaged_files.items():
            yield {'path': path, 'status': status.value, 'staged': False}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch': self.branch,
            'staged': {p: s.value for p, s in self.staged_files.items()},
            'unstaged': {p: s.value for p, s in self.unstaged_files.items()},
            'clean': self.clean,
        }
