"""
JSON records on disk for distribvc.

Commit and branch records are single JSON objects, written through a
temp file in the same directory and renamed into place, so a reader
never sees half a record. Commit records use exclusive writes.

OSError is wrapped in IOFailureError; unparsable JSON raises ValueError.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict
import logging

from ..errors import AlreadyExistsError, IOFailureError, NotFoundError

logger = logging.getLogger(__name__)


class JsonDocument:
    """
    One JSON document on disk.

    Example:
        doc = JsonDocument(repo_path / "branches" / "master.json")
        doc.write({"name": "master", "commitHistory": []})
        data = doc.read()
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')

            os.replace(temp_path, self.path)

        except BaseException:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def read(self) -> Dict[str, Any]:
        """
        Read the document.

        Raises:
            NotFoundError: If the file does not exist
            IOFailureError: If the file cannot be read
            ValueError: If the content is not a JSON object
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise NotFoundError(f"No such record: {self.path}") from e
        except OSError as e:
            raise IOFailureError(f"Could not read {self.path}: {e}", self.path) from e

        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def write(self, data: Dict[str, Any], exclusive: bool = False) -> None:
        """
        Write the document, replacing any previous content.

        Args:
            data: JSON-serializable mapping
            exclusive: Refuse to overwrite an existing document

        Raises:
            AlreadyExistsError: If exclusive and the document exists
            IOFailureError: If the write fails
        """
        if exclusive and self.path.exists():
            raise AlreadyExistsError(f"Record already exists: {self.path}")
        try:
            self._write_atomic(data)
        except OSError as e:
            raise IOFailureError(f"Could not write {self.path}: {e}", self.path) from e
        logger.debug(f"Wrote {self.path}")

    def delete(self) -> bool:
        """Delete the document. Returns False if it did not exist."""
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise IOFailureError(f"Could not delete {self.path}: {e}", self.path) from e
