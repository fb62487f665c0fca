# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Preference store SQLite implementation."""

import logging
import sqlite3

from datetime import datetime, timezone
from pathlib import Path

from sdefs.preferences import PreferencesError

logger = logging.getLogger(__name__)


class SQLitePreferenceStore:
    """Persist string preferences to a SQLite database."""

    def __init__(self, db_path: Path) -> None:
        """Initialize preference backend.

        Args:
            db_path: SQLite database file path.
        """
        self._db_path = db_path

    def get_string(self, key: str, default: str = "") -> str:
        """Read one preference value.

        Args:
            key: Preference key.
            default: Value returned when the key is not stored.

        Returns:
            Stored value or ``default``.

        Raises:
            PreferencesError: If schema setup or the query fails.
        """
        connection = sqlite3.connect(self._db_path)
        try:
            self._ensure_schema(connection=connection)
            row = connection.execute(
                "SELECT value FROM preferences WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.DatabaseError as exc:
            logger.warning(
                f"SQLite preference read failed (db_path={self._db_path} key={key} error={exc})"
            )
            raise PreferencesError(str(exc)) from exc
        finally:
            connection.close()
        if row is None:
            return default
        return str(row[0])

    def set_string(self, key: str, value: str) -> None:
        """Write one preference value atomically.

        Args:
            key: Preference key.
            value: Value to store.

        Raises:
            PreferencesError: If schema setup or the write fails.
        """
        updated_at = datetime.now(tz=timezone.utc).isoformat()
        connection = sqlite3.connect(self._db_path)
        try:
            self._ensure_schema(connection=connection)
            connection.execute("BEGIN")
            connection.execute(
                "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, updated_at = excluded.updated_at",
                (key, value, updated_at),
            )
            connection.commit()
        except sqlite3.DatabaseError as exc:
            connection.rollback()
            logger.warning(
                f"SQLite preference write failed (db_path={self._db_path} key={key} error={exc})"
            )
            raise PreferencesError(str(exc)) from exc
        finally:
            connection.close()

    def _ensure_schema(self, connection: sqlite3.Connection) -> None:
        """Create the preferences table when missing.

        Args:
            connection: Open SQLite connection.
        """
        connection.execute(
            "CREATE TABLE IF NOT EXISTS preferences ("
            "key TEXT PRIMARY KEY, "
            "value TEXT NOT NULL, "
            "updated_at TEXT NOT NULL"
            ")"
        )
