"""
JSON-based workflow store.

All saved workflows live in a single pretty-printed JSON list, newest
first. Writers serialize on a sidecar lock file (portalocker), so a CLI
and an editor process can share the same store.
"""

import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, List, Optional

import portalocker
from pydantic import ValidationError as PydanticValidationError

from cardflow.core import get_logger, StorageError
from cardflow.workflows.records import WorkflowRecord

logger = get_logger(__name__)


class JSONWorkflowStore:
    """
    JSON file store for WorkflowRecord.

    Features:
    - Upsert by record id, new records inserted at the front
    - created_at kept on update, updated_at bumped on every save
    - Missing or unreadable file lists as empty; writes refuse to clobber it
    - Invalid entries are skipped on read and preserved on write
    - Atomic replace of the store file
    - Cross-process write lock
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file holding the saved workflows
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        logger.info(f"Initialized workflow store at {self.path}")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a+")
        except OSError as e:
            raise StorageError(f"Cannot open lock file {self.lock_path}: {e}") from e

        with lock_file:
            portalocker.lock(lock_file, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(lock_file)

    def _load_raw(self) -> List[Any]:
        """Raw entries of the store file; a missing file is an empty store."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read workflow store {self.path}: {e}") from e
        if not isinstance(raw, list):
            raise StorageError(
                f"Cannot read workflow store {self.path}: "
                f"expected a list, got {type(raw).__name__}"
            )
        return raw

    def _parse(self, item: Any) -> Optional[WorkflowRecord]:
        try:
            return WorkflowRecord.model_validate(item)
        except PydanticValidationError as e:
            entry_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(f"Skipping invalid workflow entry {entry_id!r} in {self.path}: {e}")
            return None

    def _read(self) -> List[WorkflowRecord]:
        try:
            raw = self._load_raw()
        except StorageError as e:
            logger.warning(f"Ignoring unreadable workflow store: {e}")
            return []
        records = [self._parse(item) for item in raw]
        return [record for record in records if record is not None]

    def _write(self, entries: List[Any]) -> None:
        # Readers only ever see the old or the new file, never a partial one
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to write workflow store {self.path}: {e}") from e

    def list(self) -> List[WorkflowRecord]:
        """List all valid saved records, newest first."""
        return self._read()

    def get(self, workflow_id: str) -> Optional[WorkflowRecord]:
        for record in self._read():
            if record.id == workflow_id:
                return record
        return None

    def save(self, record: WorkflowRecord) -> WorkflowRecord:
        """
        Insert or update a record.

        Entries that fail validation are written back untouched, so one bad
        entry never costs the others.

        Args:
            record: Record to store

        Returns:
            The stored record (created_at from the existing entry on update)

        Raises:
            StorageError: If the store file is unreadable or cannot be written
        """
        with self._locked():
            entries = self._load_raw()
            now = datetime.now()
            for index, item in enumerate(entries):
                if _entry_id(item) != record.id:
                    continue
                existing = self._parse(item)
                created_at = existing.created_at if existing is not None else record.created_at
                stored = record.model_copy(update={
                    "created_at": created_at,
                    "updated_at": now,
                })
                entries[index] = stored.model_dump(mode="json")
                logger.debug(f"Updated workflow {record.id}")
                break
            else:
                stored = record.model_copy(update={"updated_at": now})
                entries.insert(0, stored.model_dump(mode="json"))
                logger.debug(f"Inserted workflow {record.id}")
            self._write(entries)
        return stored

    def delete(self, workflow_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was removed

        Raises:
            StorageError: If the store file is unreadable or cannot be written
        """
        with self._locked():
            entries = self._load_raw()
            remaining = [item for item in entries if _entry_id(item) != workflow_id]
            if len(remaining) == len(entries):
                return False
            self._write(remaining)
        logger.debug(f"Deleted workflow {workflow_id}")
        return True


def _entry_id(item: Any) -> Optional[str]:
    return item.get("id") if isinstance(item, dict) else None
