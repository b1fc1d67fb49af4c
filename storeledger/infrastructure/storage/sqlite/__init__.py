"""SQLite storage implementations."""

from storeledger.infrastructure.storage.sqlite.connection import (
    LedgerDatabase,
    close_database,
    get_connection,
    get_database,
    get_transaction,
)
from storeledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore

# Singleton instance
_ledger_store: SQLiteLedgerStore | None = None


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


__all__ = [
    # Connection
    "LedgerDatabase",
    "get_database",
    "close_database",
    "get_connection",
    "get_transaction",
    # Store
    "SQLiteLedgerStore",
    "get_ledger_store",
]
