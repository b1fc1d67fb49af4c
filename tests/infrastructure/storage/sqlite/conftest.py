"""Fixtures for SQLite storage tests."""

from pathlib import Path

import pytest

from storeledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Path to a not-yet-created database file."""
    return tmp_path / "test.db"


@pytest.fixture
def ledger_store(ledger_db: Path) -> SQLiteLedgerStore:
    """Ledger store backed by a migrated temporary database."""
    return SQLiteLedgerStore()
