"""Usage counter storage behind a small increment/read interface."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import RLock
from typing import Iterable, Optional, Protocol

from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class UsageCounterStore(Protocol):
    def increment(self, stat_name: str) -> int:
        ...

    def get_counters(self) -> dict[str, int]:
        ...


class InMemoryUsageCounterStore:
    """Process-local counters; reset on restart."""

    def __init__(self, stat_names: Iterable[str], initial: Optional[dict[str, int]] = None) -> None:
        seed = initial or {}
        self._counters = {name: int(seed.get(name, 0)) for name in stat_names}
        self._lock = RLock()

    def increment(self, stat_name: str) -> int:
        with self._lock:
            self._counters[stat_name] = self._counters.get(stat_name, 0) + 1
            return self._counters[stat_name]

    def get_counters(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)


class SqliteUsageCounterStore:
    """Encapsulates SQLite access so counter logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize_database(self) -> None:
        """Create the counter table and a zero row for every known stat."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS UsageCounters (
                        stat_name TEXT PRIMARY KEY,
                        count INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )
                cursor.executemany(
                    """
                    INSERT OR IGNORE INTO UsageCounters (stat_name, count)
                    VALUES (?, 0);
                    """,
                    [(name,) for name in self._settings.usage_stat_names],
                )
                conn.commit()
            logger.info("Usage counter database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Usage counter initialization failed: {exc}") from exc

    def increment(self, stat_name: str) -> int:
        with self._lock, self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO UsageCounters (stat_name, count)
                VALUES (?, 1)
                ON CONFLICT(stat_name) DO UPDATE SET
                    count = count + 1,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (stat_name,),
            )
            cursor.execute(
                "SELECT count FROM UsageCounters WHERE stat_name = ?;",
                (stat_name,),
            )
            row = cursor.fetchone()
            conn.commit()
            return int(row["count"])

    def get_counters(self) -> dict[str, int]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT stat_name, count FROM UsageCounters ORDER BY stat_name ASC;"
            )
            return {str(row["stat_name"]): int(row["count"]) for row in cursor.fetchall()}


def build_usage_store(settings: Optional[Settings] = None) -> UsageCounterStore:
    resolved = settings or get_settings()
    if resolved.usage_store_backend == "memory":
        return InMemoryUsageCounterStore(resolved.usage_stat_names)
    if resolved.usage_store_backend == "sqlite":
        store = SqliteUsageCounterStore(resolved)
        store.initialize_database()
        return store
    raise ValueError(
        f"Unsupported usage store backend {resolved.usage_store_backend!r}; "
        "expected 'sqlite' or 'memory'"
    )
