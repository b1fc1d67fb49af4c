"""Application use cases."""

from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.application.use_cases.finalize_ledger import (
    FinalizeLedgerUseCase,
    FinalizeResult,
    UnfinalizeLedgerUseCase,
)
from storeledger.application.use_cases.get_or_create_ledger import (
    GetLedgerUseCase,
    GetOrCreateLedgerUseCase,
)
from storeledger.application.use_cases.ledger_reports import NOT_STARTED, LedgerReportsUseCase
from storeledger.application.use_cases.manage_purchases import ManagePurchasesUseCase
from storeledger.application.use_cases.manage_transfers import ManageTransfersUseCase
from storeledger.application.use_cases.recalculate_ledger import RecalculateLedgerUseCase
from storeledger.application.use_cases.reconcile_ledger import SaveReconciliationUseCase
from storeledger.application.use_cases.upsert_ledger import UpsertLedgerUseCase

__all__ = [
    "LedgerUseCase",
    "GetOrCreateLedgerUseCase",
    "GetLedgerUseCase",
    "UpsertLedgerUseCase",
    "ManagePurchasesUseCase",
    "ManageTransfersUseCase",
    "SaveReconciliationUseCase",
    "FinalizeLedgerUseCase",
    "FinalizeResult",
    "UnfinalizeLedgerUseCase",
    "RecalculateLedgerUseCase",
    "LedgerReportsUseCase",
    "NOT_STARTED",
]
