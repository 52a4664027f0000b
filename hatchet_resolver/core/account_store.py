"""
Account data store for hatchet-resolver.

Persists small per-account key/value fields across runs, most
importantly the Hatchet user id that the identity service resolves
once from the user name and then reuses for every identity-scoped
request.

Schema:
    schema_version:   Single row holding STORE_VERSION
    account_fields:   key (primary key), value, updated_at

Usage:
    store = AccountStore(Path("~/.hatchet-resolver/account.db").expanduser())
    store.set_account_field("hatchet_preference_user_id", "u123")
    store.get_account_field("hatchet_preference_user_id")  # "u123"
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

from hatchet_resolver.core.exceptions import AccountStoreError


STORE_VERSION = 1


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS account_fields (
    key TEXT PRIMARY KEY,
    value TEXT,
    updated_at TEXT
);
"""


class AccountStore:
    """
    Thread-safe SQLite key/value store for account data.

    Uses a single persistent connection with thread locking for safety.
    All public methods acquire self._lock before executing.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

        db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._init_database()
        except sqlite3.Error as e:
            raise AccountStoreError(
                f"Failed to initialize account store: {e}",
                details={"path": str(db_path)}
            ) from e

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Get the persistent connection as a context manager.

        The connection is created once and reused; exiting the context
        does not close it.
        """
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                check_same_thread=False  # We handle thread safety with _lock
            )
        yield self._conn

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _init_database(self) -> None:
        with self._get_connection() as conn:
            conn.executescript(_SCHEMA_SQL)

            cursor = conn.execute("SELECT version FROM schema_version LIMIT 1")
            row = cursor.fetchone()

            if row is None:
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (STORE_VERSION,))
            elif row[0] != STORE_VERSION:
                raise AccountStoreError(
                    f"Account store version mismatch: expected {STORE_VERSION}, got {row[0]}",
                    details={"expected": STORE_VERSION, "actual": row[0]}
                )
            conn.commit()

    def get_account_field(self, key: str) -> str | None:
        """Return the stored value for key, or None when absent."""
        with self._lock:
            try:
                with self._get_connection() as conn:
                    row = conn.execute(
                        "SELECT value FROM account_fields WHERE key = ?", (key,)
                    ).fetchone()
            except sqlite3.Error as e:
                raise AccountStoreError(
                    f"Failed to read account field '{key}': {e}",
                    details={"key": key}
                ) from e
        return row[0] if row else None

    def set_account_field(self, key: str, value: str) -> None:
        """Insert or overwrite the value stored for key."""
        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        INSERT INTO account_fields (key, value, updated_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                    """, (key, value, datetime.now(timezone.utc).isoformat()))
                    conn.commit()
            except sqlite3.Error as e:
                raise AccountStoreError(
                    f"Failed to write account field '{key}': {e}",
                    details={"key": key}
                ) from e

    def delete_account_field(self, key: str) -> None:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("DELETE FROM account_fields WHERE key = ?", (key,))
                    conn.commit()
            except sqlite3.Error as e:
                raise AccountStoreError(
                    f"Failed to delete account field '{key}': {e}",
                    details={"key": key}
                ) from e


class MemoryAccountStore:
    """In-process account store with the same interface as AccountStore."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._fields: dict[str, str] = dict(initial or {})

    def get_account_field(self, key: str) -> str | None:
        with self._lock:
            return self._fields.get(key)

    def set_account_field(self, key: str, value: str) -> None:
        with self._lock:
            self._fields[key] = value

    def delete_account_field(self, key: str) -> None:
        with self._lock:
            self._fields.pop(key, None)

    def close(self) -> None:
        pass
