"""
aiosqlite access to the ledger database.

Reads share a small set of reader connections. Writes all go through one
writer connection: an asyncio lock queues writers inside this process, and
BEGIN IMMEDIATE takes SQLite's write lock up front so another process cannot
interleave with a read-modify-write.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from storeledger.config import get_logger, get_settings

logger = get_logger(__name__)

PRAGMAS = ("journal_mode=WAL", "synchronous=NORMAL", "foreign_keys=ON")


async def open_connection(db_path: Path, busy_timeout: int) -> aiosqlite.Connection:
    """Connection with WAL, the busy timeout and Row results."""
    conn = await aiosqlite.connect(db_path)
    for pragma in PRAGMAS:
        await conn.execute(f"PRAGMA {pragma}")
    await conn.execute(f"PRAGMA busy_timeout={busy_timeout}")
    conn.row_factory = aiosqlite.Row
    return conn


class LedgerDatabase:
    """Reader connections plus a single writer for one database file."""

    def __init__(self, db_path: Path, readers: int = 4, busy_timeout: int = 30000):
        self.db_path = db_path
        self.readers = readers
        self.busy_timeout = busy_timeout

        self._writer: aiosqlite.Connection | None = None
        self._readers: list[aiosqlite.Connection] = []
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._write_lock = asyncio.Lock()
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    async def open(self) -> None:
        async with self._open_lock:
            if self.is_open:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._writer = await open_connection(self.db_path, self.busy_timeout)
            for _ in range(self.readers):
                conn = await open_connection(self.db_path, self.busy_timeout)
                self._readers.append(conn)
                self._idle.put_nowait(conn)

            logger.info("ledger_db_opened", db_path=str(self.db_path), readers=self.readers)

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a reader connection."""
        if not self.is_open:
            await self.open()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def write(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        The writer connection inside an IMMEDIATE transaction.

        Commits when the block exits normally and rolls back otherwise.
        """
        if not self.is_open:
            await self.open()

        async with self._write_lock:
            conn = self._writer
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._open_lock:
            if not self.is_open:
                return

            await self._writer.close()
            for conn in self._readers:
                await conn.close()
            self._writer = None
            self._readers.clear()
            self._idle = asyncio.Queue()
            logger.info("ledger_db_closed", db_path=str(self.db_path))


# Process-wide database handle
_database: LedgerDatabase | None = None


async def get_database() -> LedgerDatabase:
    """Open the configured ledger database on first use."""
    global _database
    if _database is None:
        storage = get_settings().storage
        _database = LedgerDatabase(
            db_path=storage.db_path,
            readers=storage.readers,
            busy_timeout=storage.busy_timeout,
        )
        await _database.open()
    return _database


async def close_database() -> None:
    global _database
    if _database is not None:
        await _database.close()
        _database = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read access to the ledger database."""
    database = await get_database()
    async with database.read() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write access to the ledger database."""
    database = await get_database()
    async with database.write() as conn:
        yield conn
