"""SQLite database handle, schema bootstrap and error translation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Hashable, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from rkconfig.store.errors import ConstraintViolationError, StorageUnavailableError

logger = logging.getLogger(__name__)

JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")

# aiosqlite raises ValueError with one of these once its connection is closed
CLOSED_CONNECTION_MESSAGES = ("no active connection", "Connection closed")


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS keyboard_configs (
  keyboard_vid INTEGER NOT NULL,
  keyboard_pid INTEGER NOT NULL,
  config_json TEXT NOT NULL,
  selected_profile_id TEXT,
  updated_at INTEGER NOT NULL,
  PRIMARY KEY (keyboard_vid, keyboard_pid)
);

CREATE TABLE IF NOT EXISTS profiles (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  keyboard_vid INTEGER NOT NULL,
  keyboard_pid INTEGER NOT NULL,
  config_json TEXT NOT NULL,
  created_at INTEGER NOT NULL,
  updated_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_profiles_keyboard_updated
  ON profiles(keyboard_vid, keyboard_pid, updated_at DESC);
"""


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLite failures as store errors."""
    try:
        yield
    except aiosqlite.IntegrityError as exc:
        logger.error("%s violated a constraint: %s", operation, exc)
        raise ConstraintViolationError(f"{operation}: {exc}") from exc
    except aiosqlite.DatabaseError as exc:
        logger.error("%s failed: %s", operation, exc)
        raise StorageUnavailableError(f"{operation}: {exc}") from exc
    except ValueError as exc:
        if not any(message in str(exc) for message in CLOSED_CONNECTION_MESSAGES):
            raise
        logger.error("%s ran on a closed connection", operation)
        raise StorageUnavailableError(f"{operation}: database handle is closed") from exc


@dataclass
class _KeyLock:
    lock: asyncio.Lock
    users: int = 0


class Database:
    """Process-wide storage handle shared by the store components.

    The connection is opened lazily on first use and kept until ``close``.
    It runs in autocommit mode, so each statement is its own transaction;
    multi-statement read-then-write sequences are serialized per key through
    ``key_lock``.
    """

    def __init__(
        self,
        db_path: str | Path,
        timeout_seconds: float = 5.0,
        journal_mode: str = "WAL",
    ) -> None:
        journal_mode = journal_mode.upper()
        if journal_mode not in JOURNAL_MODES:
            raise ValueError(f"Unsupported journal_mode {journal_mode!r}; expected one of {JOURNAL_MODES}")

        self.db_path = str(db_path)
        self.timeout_seconds = timeout_seconds
        self.journal_mode = journal_mode
        self._conn: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()
        self._key_locks: dict[Hashable, _KeyLock] = {}

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _is_memory(self) -> bool:
        return self.db_path == ":memory:" or self.db_path.startswith("file::memory:")

    async def connection(self) -> aiosqlite.Connection:
        """Return the shared connection, opening it on first use."""
        if self._conn is not None:
            return self._conn

        async with self._open_lock:
            if self._conn is None:
                self._conn = await self._open()
        return self._conn

    async def _open(self) -> aiosqlite.Connection:
        if not self._is_memory():
            try:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageUnavailableError(f"Cannot create database directory for {self.db_path}: {exc}") from exc

        try:
            conn = await aiosqlite.connect(self.db_path, timeout=self.timeout_seconds, isolation_level=None)
        except aiosqlite.Error as exc:
            logger.error("Cannot open database %s: %s", self.db_path, exc)
            raise StorageUnavailableError(f"Cannot open database {self.db_path}: {exc}") from exc

        conn.row_factory = aiosqlite.Row
        try:
            with translate_errors("init_db"):
                if not self._is_memory():
                    await conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
                await conn.executescript(SCHEMA_SQL)
        except BaseException:
            await conn.close()
            raise

        logger.info("Database ready: %s", self.db_path)
        return conn

    @property
    def locked_key_count(self) -> int:
        """Keys that currently hold or wait on a key lock."""
        return len(self._key_locks)

    @asynccontextmanager
    async def key_lock(self, key: Hashable) -> AsyncIterator[None]:
        """Serialize read-then-write sequences for one row key.

        The lock entry is dropped once no task holds or waits on it.
        """
        entry = self._key_locks.get(key)
        if entry is None:
            entry = _KeyLock(lock=asyncio.Lock())
            self._key_locks[key] = entry
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._key_locks[key]

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        async with self._open_lock:
            conn, self._conn = self._conn, None
            if conn is None:
                return
            await conn.close()
        logger.info("Database closed: %s", self.db_path)

    async def __aenter__(self) -> Database:
        await self.connection()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
