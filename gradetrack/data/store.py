"""
Record stores.

The official record lives behind a small create/read/update/delete
interface so the engines never care whether it is a hosted database or a
JSON file on disk.
"""

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ..config import COURSES_TABLE, SEMESTERS_TABLE
from ..exceptions import PersistenceError
from ..models.course import utc_now

logger = logging.getLogger(__name__)

# Child tables deleted along with a parent row: parent table -> (child table, foreign key)
CASCADES = {
    SEMESTERS_TABLE: (COURSES_TABLE, "semester_id"),
}


class RecordStore(ABC):
    """
    Persistence collaborator for semesters, courses and attendance profiles.

    Every method raises PersistenceError on failure.
    """

    @abstractmethod
    def list(self, table: str, filters: Optional[dict] = None, order: Optional[str] = None) -> list:
        """
        Rows of ``table`` matching every filter, ascending by ``order``.

        A filter value that is a list/tuple/set matches any of its members.
        """

    @abstractmethod
    def create(self, table: str, fields: dict) -> dict:
        """Insert a row and return it with its assigned ``id``."""

    @abstractmethod
    def update(self, table: str, row_id: str, fields: dict):
        """Change some fields of one row."""

    @abstractmethod
    def delete(self, table: str, row_id: str):
        """Delete one row; deleting a semester deletes its courses."""

    @abstractmethod
    def upsert(self, table: str, key: str, fields: dict):
        """Insert or overwrite the row whose ``key`` column equals ``fields[key]``."""


def _matches(row: dict, filters: dict) -> bool:
    for column, wanted in filters.items():
        if isinstance(wanted, (list, tuple, set)):
            if row.get(column) not in wanted:
                return False
        elif row.get(column) != wanted:
            return False
    return True


class LocalStore(RecordStore):
    """
    Dictionary-backed store, optionally saved to a JSON file.

    Used when no hosted database is configured, and in tests. With a
    ``path`` every write is saved immediately; the previous file is kept as
    ``<name>.json.bak`` while the new one is written.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self.tables = {}
        if self.path is not None and self.path.exists():
            self._load()

    def _load(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e
        self.tables = data.get("tables", {})
        logger.debug("Loaded local store from %s", self.path)

    def _save(self):
        if self.path is None:
            return

        backup = self.path.with_suffix(".json.bak")
        try:
            if self.path.exists():
                self.path.replace(backup)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"tables": self.tables}, f, ensure_ascii=False, indent=2)
        except OSError as e:
            if backup.exists():
                backup.replace(self.path)
            raise PersistenceError(f"Could not save {self.path}: {e}") from e

    def _rows(self, table: str) -> list:
        return self.tables.setdefault(table, [])

    def _find(self, table: str, row_id: str) -> Optional[dict]:
        for row in self._rows(table):
            if row.get("id") == row_id:
                return row
        return None

    @contextmanager
    def _writing(self):
        """Save after the block; on any failure the in-memory tables are put back."""
        before = copy.deepcopy(self.tables)
        try:
            yield
            self._save()
        except PersistenceError:
            self.tables = before
            raise

    def list(self, table, filters=None, order=None):
        rows = [copy.deepcopy(r) for r in self._rows(table) if _matches(r, filters or {})]
        if order:
            rows.sort(key=lambda r: (r.get(order) is None, r.get(order)))
        return rows

    def create(self, table, fields):
        row = dict(fields)
        row["id"] = uuid.uuid4().hex
        row.setdefault("created_at", utc_now())
        with self._writing():
            self._rows(table).append(row)
        return copy.deepcopy(row)

    def update(self, table, row_id, fields):
        with self._writing():
            row = self._find(table, row_id)
            if row is None:
                raise PersistenceError(f"No {table} row with id {row_id}")
            row.update(fields)

    def delete(self, table, row_id):
        if self._find(table, row_id) is None:
            return
        with self._writing():
            self._rows(table).remove(self._find(table, row_id))
            if table in CASCADES:
                child_table, foreign_key = CASCADES[table]
                self.tables[child_table] = [
                    r for r in self._rows(child_table) if r.get(foreign_key) != row_id
                ]

    def upsert(self, table, key, fields):
        if key not in fields:
            raise PersistenceError(f"Upsert into {table} needs a value for {key}")
        with self._writing():
            rows = self._rows(table)
            for row in rows:
                if row.get(key) == fields[key]:
                    row.clear()
                    row.update(copy.deepcopy(fields))
                    break
            else:
                rows.append(copy.deepcopy(fields))
