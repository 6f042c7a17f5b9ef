# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""SQLite key-value record store

Holds whole serialized records (e.g. the relation index) under fixed names.
Every put replaces the record; there is no merge and no history.
"""
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from file_catalog.errors import PersistenceError
from file_catalog.storage.interfaces import RecordStore

logger = logging.getLogger(__name__)


class SQLiteRecordStore(RecordStore):
    """Record store backed by a single SQLite table

    Opens a short-lived connection per call, so one instance can be shared
    by sequential callers without holding a file handle.
    """

    def __init__(self, db_path: Path):
        """Initialize store and create the records table if needed

        Args:
            db_path: Path to SQLite database file. Parent dirs are created.
        """
        self.db_path = Path(db_path)
        self._create_schema()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _create_schema(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_connection()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS records (
                        name TEXT PRIMARY KEY,
                        data BLOB NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Cannot initialize record store at {self.db_path}: {e}") from e

    def get(self, name: str) -> Optional[bytes]:
        try:
            conn = self._get_connection()
            try:
                row = conn.execute(
                    "SELECT data FROM records WHERE name = ?", (name,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            # Unavailable is not absent
            raise PersistenceError(f"Failed to read record '{name}': {e}", key=name) from e
        return bytes(row[0]) if row else None

    def put(self, name: str, data: bytes) -> None:
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO records (name, data, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    (name, sqlite3.Binary(data), datetime.now().isoformat())
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to write record '{name}': {e}", key=name) from e
        logger.debug(f"Wrote record '{name}' ({len(data)} bytes)")

    def names(self) -> List[str]:
        """List stored record names"""
        conn = self._get_connection()
        try:
            return [row[0] for row in conn.execute("SELECT name FROM records ORDER BY name")]
        finally:
            conn.close()
