"""
Bug Store - SQLite Backend

Persistent storage for bug records in a single local database file.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Iterator, Optional, Union
from contextlib import contextmanager

from .errors import NotFoundError, SchemaError, StorageOperationError, ValidationError
from .models import Bug, BugPriority, BugStatus
from .validators import TITLE, DESCRIPTION, PRIORITY, is_valid_bug_id

logger = logging.getLogger(__name__)

BugId = Union[int, str]

# Largest ROWID SQLite can hold; larger IDs can never match a row
MAX_ROW_ID = 2 ** 63 - 1

SCHEMA = """
    CREATE TABLE IF NOT EXISTS bugs (
        ID INTEGER PRIMARY KEY AUTOINCREMENT,
        Title TEXT NOT NULL,
        Description TEXT,
        Status TEXT DEFAULT 'Open',
        Priority TEXT,
        Date TEXT DEFAULT CURRENT_DATE
    )
"""


class BugStore:
    """
    SQLite-based bug storage.

    One connection is held for the lifetime of the store; every statement
    uses bound parameters.

    Example:
        with BugStore("bugs.db") as store:
            store.ensure_schema()
            bug_id = store.insert("Crash on save", "Steps: ...", "High")
            store.update_status(bug_id, "resolved")
            for bug in store.list_all():
                print(bug.title, bug.status.value)
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> "BugStore":
        """Open the database file. Raises SchemaError if it cannot be opened."""
        if self._conn is not None:
            return self
        conn = None
        try:
            conn = sqlite3.connect(str(self.db_path))
            # connect() is lazy about some failures; touch the file now
            conn.execute("PRAGMA schema_version").fetchone()
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise SchemaError(f"Can't open database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        self._conn = conn
        logger.info(f"BugStore opened at {self.db_path}")
        return self

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info(f"BugStore closed at {self.db_path}")

    def __enter__(self) -> "BugStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @contextmanager
    def _transaction(self, action: str):
        """Commit on success, roll back and wrap sqlite errors otherwise."""
        conn = self._connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageOperationError(f"Failed to {action}: {e}") from e

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageOperationError("BugStore is not open")
        return self._conn

    def ensure_schema(self):
        """Create the bugs table if it does not exist. Safe to call repeatedly."""
        try:
            with self._transaction("create table") as conn:
                conn.execute(SCHEMA)
        except StorageOperationError as e:
            raise SchemaError(str(e)) from e

    def exists(self, bug_id: BugId) -> bool:
        """Return True if a bug with this ID is present."""
        row_id = _coerce_id(bug_id)
        if row_id > MAX_ROW_ID:
            return False
        with self._transaction("check bug") as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM bugs WHERE ID = ?", (row_id,)
            ).fetchone()[0]
        return count > 0

    def insert(self, title: str, description: str, priority: str) -> int:
        """
        Add a new bug with status Open and today's date.

        Args:
            title: Short summary
            description: Details
            priority: Low, Medium or High (any case)

        Returns:
            The new bug ID
        """
        for validator, value in ((TITLE, title), (DESCRIPTION, description), (PRIORITY, priority)):
            if not validator.validate(value):
                raise ValidationError(validator.error_message)

        with self._transaction("insert bug") as conn:
            cursor = conn.execute(
                "INSERT INTO bugs (Title, Description, Priority) VALUES (?, ?, ?)",
                (title, description, BugPriority.parse(priority).value),
            )
            bug_id = cursor.lastrowid

        logger.info(f"Inserted bug {bug_id}: {title}")
        return bug_id

    def get(self, bug_id: BugId) -> Optional[Bug]:
        row_id = _coerce_id(bug_id)
        if row_id > MAX_ROW_ID:
            return None
        with self._transaction("get bug") as conn:
            row = conn.execute("SELECT * FROM bugs WHERE ID = ?", (row_id,)).fetchone()
        return Bug.from_row(row) if row else None

    def list_all(self) -> Iterator[Bug]:
        """Yield every bug in ID order. Each call re-reads the table."""
        conn = self._connection()
        try:
            cursor = conn.execute("SELECT * FROM bugs ORDER BY ID")
            for row in cursor:
                yield Bug.from_row(row)
        except sqlite3.Error as e:
            logger.error(f"Failed to list bugs: {e}")
            raise StorageOperationError(f"Failed to list bugs: {e}") from e

    def count(self) -> int:
        with self._transaction("count bugs") as conn:
            return conn.execute("SELECT COUNT(*) FROM bugs").fetchone()[0]

    def update_status(self, bug_id: BugId, status: Union[str, BugStatus]) -> Bug:
        """
        Set the status of an existing bug.

        Args:
            bug_id: Bug ID
            status: Open, In Progress or Resolved (any case)

        Returns:
            The updated Bug

        Raises:
            NotFoundError: No bug with this ID
        """
        new_status = status if isinstance(status, BugStatus) else BugStatus.parse(status)
        row_id = _coerce_id(bug_id)
        if not self.exists(row_id):
            logger.warning(f"Bug {row_id} not found")
            raise NotFoundError(row_id)

        with self._transaction("update bug") as conn:
            conn.execute(
                "UPDATE bugs SET Status = ? WHERE ID = ?", (new_status.value, row_id)
            )

        logger.info(f"Updated bug {row_id} status to {new_status.value}")
        return self.get(row_id)

    def delete(self, bug_id: BugId):
        """
        Delete an existing bug.

        Raises:
            NotFoundError: No bug with this ID
        """
        row_id = _coerce_id(bug_id)
        if not self.exists(row_id):
            logger.warning(f"Bug {row_id} not found")
            raise NotFoundError(row_id)

        with self._transaction("delete bug") as conn:
            conn.execute("DELETE FROM bugs WHERE ID = ?", (row_id,))

        logger.info(f"Deleted bug {row_id}")


def _coerce_id(bug_id: BugId) -> int:
    """Accept a positive int or a string passing is_valid_bug_id."""
    if isinstance(bug_id, bool):
        raise ValidationError(f"Invalid bug ID {bug_id!r}")
    if isinstance(bug_id, int):
        if bug_id > 0:
            return bug_id
    elif isinstance(bug_id, str) and is_valid_bug_id(bug_id):
        return int(bug_id)
    raise ValidationError(f"Invalid bug ID {bug_id!r}")
