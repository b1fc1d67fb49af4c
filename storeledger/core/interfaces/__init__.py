"""Core interfaces (ports) for dependency injection."""

from storeledger.core.interfaces.ledger_store import ILedgerStore

__all__ = [
    "ILedgerStore",
]
