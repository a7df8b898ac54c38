"""SQLite implementation of the locator store.

Blocking sqlite3 calls run in worker threads. Writes are serialized by an
``asyncio.Lock`` and run inside ``BEGIN IMMEDIATE`` transactions, which also
serializes writers across processes sharing the same file. A file database
opens one connection per operation so reads proceed concurrently (WAL
journal). An in-memory database lives on a single shared connection and every
operation on it holds the lock.
"""

import asyncio
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Callable

from ..exceptions import LocatorConflictError, StorageTimeoutError, StorageUnavailableError
from ..locator import LocatorGenerator
from .base import LocatorStoreBase
from .models import Resolution, ResolveStatus, UrlRecord

MEMORY = ":memory:"


class LocatorStoreSQLite(LocatorStoreBase):
    """SQLite implementation of locator store operations."""

    database_name = "sqlite"

    SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS urls (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT NOT NULL,
        url TEXT NOT NULL UNIQUE,
        locator TEXT NOT NULL UNIQUE
    );
    """

    RECORD_COLUMNS = "id, created_at, url, locator"

    def __init__(
        self,
        db_config: Optional[str] = None,
        generator: Optional[LocatorGenerator] = None,
        timeout_seconds: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_config: Database file path, or None / ``:memory:`` for an in-memory database
            generator: Candidate locator generator
            timeout_seconds: Busy timeout and lock wait bound in seconds
            logger: Optional logger instance
        """
        super().__init__(db_config or MEMORY, generator, timeout_seconds, logger)

        self.in_memory = self.db_config == MEMORY
        self._lock = asyncio.Lock()
        self._shared_conn: Optional[sqlite3.Connection] = None
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                self.db_config,
                timeout=self.timeout_seconds,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            self.logger.error(f"Cannot open SQLite database {self.db_config}: {e}")
            raise StorageUnavailableError(f"Cannot open SQLite database {self.db_config}: {e}") from e

        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _get_conn(self):
        """Get a connection: the shared one in memory, a fresh one for files."""
        if self.in_memory:
            if self._shared_conn is None:
                self._shared_conn = self._connect()
            yield self._shared_conn
            return

        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    def _call(self, func: Callable, *args):
        """Run ``func(conn, *args)`` translating driver errors. Runs in a worker thread."""
        with self._get_conn() as conn:
            try:
                return func(conn, *args)
            except sqlite3.OperationalError as e:
                self.logger.error(f"SQLite error on {self.db_config}: {e}")
                if "locked" in str(e) or "busy" in str(e):
                    raise StorageTimeoutError(f"SQLite operation timed out after {self.timeout_seconds}s: {e}") from e
                raise StorageUnavailableError(f"SQLite operation failed: {e}") from e
            except sqlite3.DatabaseError as e:
                self.logger.error(f"SQLite error on {self.db_config}: {e}")
                raise StorageUnavailableError(f"SQLite operation failed: {e}") from e

    async def _run(self, func: Callable, *args, write: bool = False):
        await self.initialize()

        if not (write or self.in_memory):
            return await asyncio.to_thread(self._call, func, *args)

        async with self._locked():
            return await self._call_in_thread(func, *args)

    async def _call_in_thread(self, func: Callable, *args):
        """Run ``func`` in a worker thread; the caller must hold ``_lock``.

        A worker thread cannot be interrupted, so a cancelled caller keeps
        the lock until the thread finishes before re-raising the cancellation.
        """
        future = asyncio.ensure_future(asyncio.to_thread(self._call, func, *args))
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            self.logger.debug("Caller cancelled, waiting for the running SQLite operation")
            while not future.done():
                try:
                    await asyncio.wait({future})
                except asyncio.CancelledError:
                    continue
            if future.exception() is not None:
                self.logger.warning(f"SQLite operation of a cancelled caller failed: {future.exception()}")
            raise

    def _locked(self):
        return _BoundedLock(self._lock, self.timeout_seconds)

    async def initialize(self) -> None:
        """Create the ``urls`` table if it does not exist."""
        if self._initialized:
            return

        async with self._locked():
            if self._initialized:
                return
            self.logger.debug(f"Initializing SQLite schema at {self.db_config}")
            await self._call_in_thread(self._create_schema)
            self._initialized = True

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        if not self.in_memory:
            conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(self.SCHEMA_SQL)

    async def resolve_or_create(self, long_url: str) -> Resolution:
        existing = await self.find_by_url(long_url)
        if existing:
            return Resolution(existing.locator, ResolveStatus.EXISTING, existing)

        return await self._run(self._resolve_or_create_tx, long_url, write=True)

    def _resolve_or_create_tx(self, conn: sqlite3.Connection, long_url: str) -> Resolution:
        conn.execute("BEGIN IMMEDIATE")
        try:
            row = conn.execute(
                f"SELECT {self.RECORD_COLUMNS} FROM urls WHERE url = ?", (long_url,)
            ).fetchone()
            if row:
                conn.commit()
                record = UrlRecord.from_row(row)
                return Resolution(record.locator, ResolveStatus.EXISTING, record)

            created_at = datetime.now(timezone.utc)
            owner = None
            for candidate in self.generator.candidates(long_url):
                owner = conn.execute("SELECT url FROM urls WHERE locator = ?", (candidate,)).fetchone()
                if owner is not None:
                    self.logger.warning(
                        f"Locator collision: {candidate} already maps to {owner['url']}, "
                        f"requested for {long_url}"
                    )
                    continue

                cursor = conn.execute(
                    "INSERT INTO urls (created_at, url, locator) VALUES (?, ?, ?)",
                    (created_at.isoformat(), long_url, candidate),
                )
                conn.commit()

                self.logger.info(f"Created locator: {candidate} -> {long_url}")
                record = UrlRecord(cursor.lastrowid, created_at, long_url, candidate)
                return Resolution(candidate, ResolveStatus.CREATED, record)

            raise LocatorConflictError(candidate, long_url, owner["url"])
        except BaseException:
            conn.rollback()
            raise

    async def lookup(self, locator: str) -> Optional[str]:
        row = await self._run(self._fetchone, "SELECT url FROM urls WHERE locator = ?", (locator,))
        return row["url"] if row else None

    async def get_record(self, locator: str) -> Optional[UrlRecord]:
        row = await self._run(
            self._fetchone, f"SELECT {self.RECORD_COLUMNS} FROM urls WHERE locator = ?", (locator,)
        )
        return UrlRecord.from_row(row) if row else None

    async def find_by_url(self, long_url: str) -> Optional[UrlRecord]:
        row = await self._run(
            self._fetchone, f"SELECT {self.RECORD_COLUMNS} FROM urls WHERE url = ?", (long_url,)
        )
        return UrlRecord.from_row(row) if row else None

    async def list_recent(self, limit: int = 100) -> List[UrlRecord]:
        rows = await self._run(
            self._fetchall, f"SELECT {self.RECORD_COLUMNS} FROM urls ORDER BY id DESC LIMIT ?", (limit,)
        )
        return [UrlRecord.from_row(row) for row in rows]

    async def get_statistics(self) -> Dict[str, Any]:
        row = await self._run(self._fetchone, "SELECT COUNT(*) AS total FROM urls", ())
        return {
            "total_urls": row["total"],
            "database": self.database_name,
        }

    async def health_check(self) -> bool:
        try:
            await self._run(self._fetchone, "SELECT 1", ())
            return True
        except StorageUnavailableError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the shared in-memory connection, discarding its data."""
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None
            self._initialized = False
            self.logger.debug("Closed in-memory SQLite database")

    @staticmethod
    def _fetchone(conn: sqlite3.Connection, sql: str, params: tuple):
        return conn.execute(sql, params).fetchone()

    @staticmethod
    def _fetchall(conn: sqlite3.Connection, sql: str, params: tuple):
        return conn.execute(sql, params).fetchall()


class _BoundedLock:
    """Async context manager acquiring a lock within a timeout.

    The acquire runs as its own task so that a timeout or cancellation racing
    with a successful acquire never leaves the lock held by nobody.
    """

    def __init__(self, lock: asyncio.Lock, timeout_seconds: float):
        self.lock = lock
        self.timeout_seconds = timeout_seconds

    async def __aenter__(self):
        acquire = asyncio.ensure_future(self.lock.acquire())
        try:
            await asyncio.wait_for(asyncio.shield(acquire), self.timeout_seconds)
        except (asyncio.TimeoutError, asyncio.CancelledError) as e:
            acquire.add_done_callback(self._release_if_acquired)
            acquire.cancel()
            if isinstance(e, asyncio.CancelledError):
                raise
            raise StorageTimeoutError(f"Timed out after {self.timeout_seconds}s waiting for the store lock") from None

    async def __aexit__(self, exc_type, exc, tb):
        self.lock.release()

    def _release_if_acquired(self, acquire: asyncio.Future) -> None:
        if not acquire.cancelled() and acquire.exception() is None:
            self.lock.release()
