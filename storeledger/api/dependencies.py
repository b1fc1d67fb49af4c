"""
Dependency injection container for FastAPI.

Provides use case instances and the calling actor to route handlers.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storeledger.api.security import actor_from_token
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
from storeledger.config import Settings, get_settings
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.catalog import Catalog, catalog_from_settings

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_catalog() -> Catalog:
    """Get the configured product/shop catalog."""
    return catalog_from_settings()


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Actor:
    """Resolve the caller from the Authorization header."""
    return actor_from_token(credentials.credentials if credentials else None)


# Use case dependencies
def get_get_or_create_ledger_use_case() -> GetOrCreateLedgerUseCase:
    """Get fetch-or-create ledger use case."""
    return GetOrCreateLedgerUseCase()


def get_get_ledger_use_case() -> GetLedgerUseCase:
    """Get fetch-by-id ledger use case."""
    return GetLedgerUseCase()


def get_upsert_ledger_use_case() -> UpsertLedgerUseCase:
    """Get upsert ledger use case."""
    return UpsertLedgerUseCase()


def get_manage_purchases_use_case() -> ManagePurchasesUseCase:
    """Get purchases use case."""
    return ManagePurchasesUseCase()


def get_manage_transfers_use_case() -> ManageTransfersUseCase:
    """Get transfers use case."""
    return ManageTransfersUseCase()


def get_save_reconciliation_use_case() -> SaveReconciliationUseCase:
    """Get reconciliation use case."""
    return SaveReconciliationUseCase()


def get_finalize_ledger_use_case() -> FinalizeLedgerUseCase:
    """Get finalize use case."""
    return FinalizeLedgerUseCase()


def get_unfinalize_ledger_use_case() -> UnfinalizeLedgerUseCase:
    """Get unfinalize use case."""
    return UnfinalizeLedgerUseCase()


def get_recalculate_ledger_use_case() -> RecalculateLedgerUseCase:
    """Get recalculate use case."""
    return RecalculateLedgerUseCase()


def get_ledger_reports_use_case() -> LedgerReportsUseCase:
    """Get reports use case."""
    return LedgerReportsUseCase()


# Typed dependencies
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
CatalogDep = Annotated[Catalog, Depends(get_catalog)]
ActorDep = Annotated[Actor, Depends(get_current_actor)]
