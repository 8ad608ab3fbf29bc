"""
Staging operation results for distribvc.

stage_files() is best effort: each requested path succeeds, is skipped
or fails on its own. These objects record what happened to each one.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OperationStatus(Enum):
    """Outcome of staging a single path."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StageDetail:
    """What happened to one path considered for staging."""
    path: str
    status: OperationStatus
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        record = {'path': self.path, 'status': self.status.value}
        if self.reason:
            record['reason'] = self.reason
        return record


@dataclass
class StageSummary:
    """Per-path results of a stage_files() call, in the order handled."""
    details: List[StageDetail] = field(default_factory=list)
    _counts: Counter = field(default_factory=Counter, repr=False)

    def add_detail(self, detail: StageDetail) -> None:
        self.details.append(detail)
        self._counts[detail.status] += 1

    @property
    def total(self) -> int:
        return len(self.details)

    @property
    def staged(self) -> int:
        return self._counts[OperationStatus.SUCCESS]

    @property
    def skipped(self) -> int:
        return self._counts[OperationStatus.SKIPPED]

    @property
    def failed(self) -> int:
        return self._counts[OperationStatus.FAILED]

    @property
    def success(self) -> bool:
        """True if no file failed with an I/O error."""
        return not self.failed

    @property
    def staged_paths(self) -> List[str]:
        return [d.path for d in self.details if d.status is OperationStatus.SUCCESS]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'total': self.total,
            'staged': self.staged,
            'skipped': self.skipped,
            'failed': self.failed,
        }
