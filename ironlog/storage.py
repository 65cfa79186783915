"""SQLite backed key/value store used to persist application state.

Each recognised key holds one JSON document.  The core reads every key once
at startup and writes a key back synchronously after each mutation of the
state it holds.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from ironlog import DEFAULT_DB_PATH

WORKOUTS_KEY = "workouts"
EXERCISES_KEY = "exercises"
NOTES_KEY = "notes"
UNIT_SYSTEM_KEY = "unit-system"
TIMER_KEY = "timer"
TIMER_PRESETS_KEY = "timer-presets"

KNOWN_KEYS = (
    WORKOUTS_KEY,
    EXERCISES_KEY,
    NOTES_KEY,
    UNIT_SYSTEM_KEY,
    TIMER_KEY,
    TIMER_PRESETS_KEY,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""

_MISSING = object()


class KeyValueStore:
    """Persist JSON values by key in a single SQLite table."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(_SCHEMA)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for ``key`` or ``default``.

        A value that cannot be decoded is logged and treated as missing.
        """

        with sqlite3.connect(str(self.db_path)) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logging.warning("Discarding unreadable value stored under %r", key)
            return default

    def set(self, key: str, value: Any) -> None:
        """Encode ``value`` as JSON and store it under ``key``."""

        payload = json.dumps(value)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, payload),
            )

    def set_many(self, values: dict[str, Any]) -> None:
        """Store several keys in one transaction."""

        rows = [(key, json.dumps(value)) for key, value in values.items()]
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.executemany(
                "INSERT INTO kv_store (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                rows,
            )

    def delete(self, key: str) -> None:
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def keys(self) -> list[str]:
        with sqlite3.connect(str(self.db_path)) as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r[0] for r in rows]
