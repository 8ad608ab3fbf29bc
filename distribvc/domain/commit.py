"""
Commit domain objects for distribvc.

A Commit is an immutable, timestamped snapshot of staged changes.
Each FileChange records one affected path and its post-change content.

Records serialize to the JSON layout stored under commits/<id>.json.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class ChangeType(Enum):
    """Classification of a staged file relative to the working tree."""
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class FileChange:
    """
    One changed path inside a commit.

    Attributes:
        file_path: Path relative to the repository root, POSIX separators
        change_type: ADDED, MODIFIED or DELETED
        content: Post-change bytes (None for DELETED)
    """
    file_path: str
    change_type: ChangeType
    content: Optional[bytes] = None

    @property
    def text(self) -> Optional[str]:
        """Content decoded as UTF-8, or None if absent or binary."""
        if self.content is None:
            return None
        try:
            return self.content.decode('utf-8')
        except UnicodeDecodeError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'filePath': self.file_path,
            'changeType': self.change_type.value,
        }
        if self.content is None:
            result['content'] = None
        elif self.text is not None:
            result['content'] = self.text
        else:
            result['content'] = base64.b64encode(self.content).decode('ascii')
            result['contentEncoding'] = 'base64'
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileChange':
        """
        Rebuild a FileChange from its stored form.

        Raises:
            ValueError: If the record is malformed
        """
        try:
            change_type = ChangeType(data['changeType'])
            file_path = data['filePath']
        except (KeyError, ValueError) as e:
            raise ValueError(f"Malformed file change record: {e}") from e

        raw = data.get('content')
        content = None
        if raw is not None:
            if data.get('contentEncoding') == 'base64':
                try:
                    content = base64.b64decode(raw, validate=True)
                except binascii.Error as e:
                    raise ValueError(f"Bad base64 content for {file_path}") from e
            else:
                content = raw.encode('utf-8')

        return cls(file_path=file_path, change_type=change_type, content=content)


def generate_commit_id() -> str:
    """Return a fresh random commit identifier (UUID4)."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Commit:
    """
    Immutable snapshot of staged changes.

    Use Commit.create() to stamp a new id and timestamp. A commit
    always carries at least one change; empty commits are refused
    before construction by the commit store.

    Attributes:
        id: Globally unique identifier
        message: Commit message
        timestamp: Creation time (naive local datetime)
        parent_commit_id: Previous head of the branch, None for the first commit
        changes: Ordered file changes
        author: Author name
    """
    id: str
    message: str
    timestamp: datetime
    parent_commit_id: Optional[str]
    changes: Tuple[FileChange, ...] = field(default_factory=tuple)
    author: str = ""

    @classmethod
    def create(
        cls,
        message: str,
        parent_commit_id: Optional[str],
        changes: Iterable[FileChange],
        author: str
    ) -> 'Commit':
        """Create a new commit with a fresh id and the current time."""
        return cls(
            id=generate_commit_id(),
            message=message,
            timestamp=datetime.now(),
            parent_commit_id=parent_commit_id,
            changes=tuple(changes),
            author=author,
        )

    @property
    def short_id(self) -> str:
        return self.id[:8]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'message': self.message,
            'timestamp': self.timestamp.isoformat(),
            'parentCommitID': self.parent_commit_id,
            'changes': [change.to_dict() for change in self.changes],
            'author': self.author,
        }

    def to_summary(self) -> Dict[str, Any]:
        """Compact form for log output (no file contents)."""
        return {
            'id': self.id,
            'author': self.author,
            'timestamp': self.timestamp.isoformat(),
            'message': self.message,
            'parent': self.parent_commit_id,
            'changes': [
                {'path': c.file_path, 'type': c.change_type.value}
                for c in self.changes
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Commit':
        """
        Rebuild a Commit from its stored form.

        Raises:
            ValueError: If the record is malformed
        """
        try:
            return cls(
                id=data['id'],
                message=data.get('message', ''),
                timestamp=datetime.fromisoformat(data['timestamp']),
                parent_commit_id=data.get('parentCommitID'),
                changes=tuple(FileChange.from_dict(c) for c in data.get('changes', [])),
                author=data.get('author') or '',
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed commit record: {e}") from e
