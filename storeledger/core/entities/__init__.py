"""Core domain entities."""

from storeledger.core.entities.actor import SYSTEM_ACTOR, Actor, Role
from storeledger.core.entities.catalog import DEFAULT_CATALOG, Catalog, catalog_from_settings
from storeledger.core.entities.ledger import (
    DailyLedger,
    LedgerStatus,
    ProductLine,
    Purchase,
    ReconciliationLine,
    Transfer,
)

__all__ = [
    # Ledger entities
    "DailyLedger",
    "LedgerStatus",
    "ProductLine",
    "Purchase",
    "Transfer",
    "ReconciliationLine",
    # Catalog
    "Catalog",
    "DEFAULT_CATALOG",
    "catalog_from_settings",
    # Identity
    "Actor",
    "Role",
    "SYSTEM_ACTOR",
]
