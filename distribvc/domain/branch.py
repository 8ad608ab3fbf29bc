"""
Branch domain object for distribvc.

A Branch is a named, linear sequence of commit ids with a head pointer.
The head is always the last id in the history, so the two can never
disagree.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .commit import Commit


@dataclass
class Branch:
    """
    Named commit history, oldest first.

    Only add_commit() mutates a branch. Accessors return tuples so
    callers cannot change the history behind the ledger's back.
    """
    name: str
    _history: List[str] = field(default_factory=list, repr=False)

    @classmethod
    def with_history(cls, name: str, history: Iterable[str]) -> 'Branch':
        return cls(name=name, _history=list(history))

    @property
    def commit_history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    @property
    def head_commit_id(self) -> Optional[str]:
        return self._history[-1] if self._history else None

    @property
    def is_empty(self) -> bool:
        return not self._history

    def add_commit(self, commit: Commit) -> None:
        """Append a commit; the head moves with it."""
        self._history.append(commit.id)

    def copy(self) -> 'Branch':
        return Branch.with_history(self.name, self._history)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'commitHistory': list(self._history),
            'headCommitID': self.head_commit_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Branch':
        """
        Rebuild a Branch from its stored record.

        The stored headCommitID is informational; the history decides.

        Raises:
            ValueError: If the record is malformed
        """
        try:
            name = data['name']
            history = data.get('commitHistory') or []
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed branch record: {e}") from e
        if not isinstance(history, list) or not all(isinstance(h, str) for h in history):
            raise ValueError(f"Malformed commit history for branch {name}")
        return cls.with_history(name, history)
