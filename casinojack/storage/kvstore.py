"""
Key-value persistence for balances and statistics.

Values are stored as JSON so that numbers, strings and small dicts survive a
round trip. `SQLiteStore` keeps everything in one table and works against a
file or an in-memory database.
"""

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class KeyValueStore(ABC):
    """Minimal persistent mapping used by the ledger and statistics."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key`, or `default` if it was never set."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present."""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""

    def __contains__(self, key: str) -> bool:
        return key in set(self.keys())

    def close(self) -> None:
        pass


class MemoryStore(KeyValueStore):
    """Dictionary-backed store; nothing outlives the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class SQLiteStore(KeyValueStore):
    """
    Store key-value pairs in SQLite.

    Args:
        db_path: Path to the database file. If None, uses an in-memory database.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        self.conn = sqlite3.connect(
            db_path if db_path else ":memory:", check_same_thread=False
        )
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self.initialize_database()

    def initialize_database(self) -> None:
        with self._lock:
            self.conn.executescript(SCHEMA_SQL)
            self.conn.commit()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            row = self.conn.execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self.conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, json.dumps(value)),
            )
            self.conn.commit()

    def delete(self, key: str) -> None:
        with self._lock:
            self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            self.conn.commit()

    def keys(self) -> Iterator[str]:
        with self._lock:
            rows = self.conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        return iter([row["key"] for row in rows])

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
