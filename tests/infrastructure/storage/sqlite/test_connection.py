"""Unit tests for the ledger database connections."""

import asyncio
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from storeledger.infrastructure.storage.sqlite import connection as conn_module
from storeledger.infrastructure.storage.sqlite.connection import (
    LedgerDatabase,
    close_database,
    get_connection,
    get_database,
    get_transaction,
)


@pytest.fixture
async def database(temp_db_path: Path):
    db = LedgerDatabase(temp_db_path, readers=2, busy_timeout=1234)
    async with db.write() as conn:
        await conn.execute("CREATE TABLE t (v INTEGER)")
    yield db
    await db.close()


async def count_rows(db: LedgerDatabase) -> int:
    async with db.read() as conn:
        cursor = await conn.execute("SELECT COUNT(*) FROM t")
        return (await cursor.fetchone())[0]


class TestOpen:
    async def test_opens_lazily_and_creates_directory(self, tmp_path: Path):
        db = LedgerDatabase(tmp_path / "nested" / "ledger.db", readers=1)
        assert not db.is_open

        async with db.read():
            pass

        assert db.is_open
        assert (tmp_path / "nested").is_dir()
        await db.close()

    async def test_open_twice_keeps_reader_count(self, temp_db_path: Path):
        db = LedgerDatabase(temp_db_path, readers=3)

        await asyncio.gather(db.open(), db.open())

        assert db._idle.qsize() == 3
        await db.close()

    async def test_pragmas(self, database: LedgerDatabase):
        async with database.read() as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234


class TestReaders:
    async def test_reader_returned_after_use(self, database: LedgerDatabase):
        async with database.read():
            assert database._idle.qsize() == 1
        assert database._idle.qsize() == 2


class TestWriter:
    async def test_commit(self, database: LedgerDatabase):
        async with database.write() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")

        assert await count_rows(database) == 1

    async def test_rollback_on_error(self, database: LedgerDatabase):
        with pytest.raises(RuntimeError):
            async with database.write() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        assert await count_rows(database) == 0

    async def test_writers_take_turns(self, database: LedgerDatabase):
        events = []

        async def write(name: str):
            async with database.write() as conn:
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                await conn.execute("INSERT INTO t VALUES (1)")
                events.append(f"{name}-end")

        await asyncio.gather(write("a"), write("b"))

        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )
        assert await count_rows(database) == 2


class TestClose:
    async def test_close_then_reopen(self, database: LedgerDatabase):
        await database.close()
        assert not database.is_open

        assert await count_rows(database) == 0
        assert database.is_open


class TestProcessDatabase:
    """Tests for the module-level database helpers."""

    @pytest.fixture(autouse=True)
    def settings(self, temp_db_path: Path):
        conn_module._database = None
        mock_settings = MagicMock()
        mock_settings.storage.db_path = temp_db_path
        mock_settings.storage.readers = 1
        mock_settings.storage.busy_timeout = 5000
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            yield mock_settings

    async def test_single_instance(self):
        database = await get_database()
        assert await get_database() is database
        await close_database()
        assert conn_module._database is None

    async def test_connection_and_transaction(self):
        async with get_transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.execute("INSERT INTO t VALUES (7)")

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT v FROM t")
            assert (await cursor.fetchone())[0] == 7

        await close_database()

    async def test_close_without_database(self):
        await close_database()
        assert conn_module._database is None
