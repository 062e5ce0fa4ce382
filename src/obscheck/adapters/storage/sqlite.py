"""SQLite storage adapter for meter snapshots.

A process under test can save its registry to a SQLite file; the test
process loads the file back and asserts on it like any other
TaggedInstrumentSource.
"""

import asyncio
import json
import sqlite3
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import Any

import aiosqlite

from obscheck.core.models import MeterId, MeterKind
from obscheck.core.ports import TaggedInstrumentSource

_METERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS meters (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    kind TEXT NOT NULL,
    tags TEXT NOT NULL DEFAULT '{}',
    value REAL NOT NULL
);
"""

_INSERT_METER = """
INSERT INTO meters (name, kind, tags, value) VALUES (?, ?, ?, ?)
"""

_SELECT_METERS = """
SELECT name, kind, tags, value FROM meters ORDER BY id ASC
"""

_COUNT_METERS = """
SELECT COUNT(*) FROM meters
"""

_CLEAR_METERS = """
DELETE FROM meters
"""


def _safe_json_loads(data: str) -> dict[str, str]:
    """Parse a JSON tag object, returning an empty dict on decode error."""
    try:
        result = json.loads(data)
    except json.JSONDecodeError:
        return {}
    return result if isinstance(result, dict) else {}


@dataclass(frozen=True)
class StoredMeter:
    """A meter read back from a snapshot.

    Attributes:
        id: The meter's identity.
        value: Count for counters, total seconds for timers, last value
            for gauges.
    """

    id: MeterId
    value: float

    def get_tag(self, key: str) -> str | None:
        return self.id.get_tag(key)


def _to_row(meter: Any) -> tuple[str, str, str, float]:
    return (
        meter.id.name,
        meter.id.kind.value,
        json.dumps(meter.id.tags, sort_keys=True),
        float(meter.value),
    )


def _from_row(row: sqlite3.Row | aiosqlite.Row) -> StoredMeter:
    name, kind, tags, value = row[0], row[1], row[2], row[3]
    return StoredMeter(
        id=MeterId(name=name, tags=_safe_json_loads(tags), kind=MeterKind(kind)),
        value=value,
    )


class SQLiteMeterStorage:
    """SQLite-backed meter snapshots.

    Uses aiosqlite for non-blocking async operations and the standard sqlite3
    module for the sync variants (``save_sync``, ``read_sync``,
    ``clear_sync``). Both share the same file; WAL mode allows a writer
    process and a reader process to work concurrently.

    ``:memory:`` is not supported since a snapshot must outlive the
    connection that wrote it.
    """

    def __init__(self, db_path: str) -> None:
        if db_path == ":memory:":
            raise ValueError("SQLiteMeterStorage requires a file path, not :memory:")
        self._db_path = db_path
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._sync_initialized = False
        self._sync_lock = threading.Lock()

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA journal_mode=WAL")
                await db.executescript(_METERS_SCHEMA)
            self._initialized = True

    def _ensure_initialized_sync(self) -> None:
        """Initialize database schema synchronously."""
        if self._sync_initialized:
            return
        with self._sync_lock:
            if self._sync_initialized:
                return
            with sqlite3.connect(self._db_path) as db:
                db.execute("PRAGMA journal_mode=WAL")
                db.executescript(_METERS_SCHEMA)
            self._sync_initialized = True

    @asynccontextmanager
    async def async_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Context manager for async database connections."""
        await self._ensure_initialized()
        async with aiosqlite.connect(self._db_path) as db:
            yield db

    @contextmanager
    def sync_connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for sync database connections."""
        self._ensure_initialized_sync()
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
        finally:
            conn.close()

    async def save(self, source: TaggedInstrumentSource) -> int:
        """Replace the stored snapshot with the meters of ``source``.

        Returns:
            Number of meters written.
        """
        rows = [_to_row(meter) for meter in source.instruments()]
        async with self.async_connection() as db:
            await db.execute(_CLEAR_METERS)
            await db.executemany(_INSERT_METER, rows)
            await db.commit()
        return len(rows)

    async def read(self) -> list[StoredMeter]:
        """Read the stored snapshot in the order it was saved."""
        async with self.async_connection() as db:
            async with db.execute(_SELECT_METERS) as cursor:
                return [_from_row(row) async for row in cursor]

    async def count(self) -> int:
        """Return the number of stored meters."""
        async with self.async_connection() as db:
            async with db.execute(_COUNT_METERS) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def clear(self) -> None:
        """Remove the stored snapshot."""
        async with self.async_connection() as db:
            await db.execute(_CLEAR_METERS)
            await db.commit()

    # --- Sync methods ---

    def save_sync(self, source: TaggedInstrumentSource) -> int:
        """Synchronous save for non-async contexts."""
        rows = [_to_row(meter) for meter in source.instruments()]
        with self.sync_connection() as conn:
            conn.execute(_CLEAR_METERS)
            conn.executemany(_INSERT_METER, rows)
            conn.commit()
        return len(rows)

    def read_sync(self) -> list[StoredMeter]:
        """Synchronous read for non-async contexts."""
        with self.sync_connection() as conn:
            return [_from_row(row) for row in conn.execute(_SELECT_METERS)]

    def clear_sync(self) -> None:
        """Synchronous clear for non-async contexts."""
        with self.sync_connection() as conn:
            conn.execute(_CLEAR_METERS)
            conn.commit()

    def instruments(self) -> list[StoredMeter]:
        """TaggedInstrumentSource view of the stored snapshot."""
        return self.read_sync()
