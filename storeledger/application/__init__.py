"""
Application layer - Use cases, DTOs and per-date locking.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Serializing read-modify-write cycles per ledger date

Use cases are the only entry point for API handlers.
"""

from storeledger.application.locks import DateLockRegistry, get_lock_registry
from storeledger.application.use_cases import (
    FinalizeLedgerUseCase,
    GetLedgerUseCase,
    GetOrCreateLedgerUseCase,
    LedgerReportsUseCase,
    ManagePurchasesUseCase,
    ManageTransfersUseCase,
    RecalculateLedgerUseCase,
    SaveReconciliationUseCase,
    UnfinalizeLedgerUseCase,
    UpsertLedgerUseCase,
)

__all__ = [
    "DateLockRegistry",
    "get_lock_registry",
    "GetOrCreateLedgerUseCase",
    "GetLedgerUseCase",
    "UpsertLedgerUseCase",
    "ManagePurchasesUseCase",
    "ManageTransfersUseCase",
    "SaveReconciliationUseCase",
    "FinalizeLedgerUseCase",
    "UnfinalizeLedgerUseCase",
    "RecalculateLedgerUseCase",
    "LedgerReportsUseCase",
]
