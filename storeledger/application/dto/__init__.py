"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from storeledger.application.dto.requests import (
    CreatePurchaseRequest,
    CreateTransferRequest,
    ProductLineRequest,
    ReconciliationLineRequest,
    SaveReconciliationRequest,
    UpdatePurchaseRequest,
    UpdateTransferRequest,
    UpsertLedgerRequest,
)
from storeledger.application.dto.responses import (
    CatalogEntryResponse,
    ErrorResponse,
    FinalizeLedgerResponse,
    HealthResponse,
    LedgerResponse,
    LedgerSummaryResponse,
    ProductLineResponse,
    ProviderHealthResponse,
    PurchaseResponse,
    ReconciliationLineResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "ProductLineRequest",
    "CreatePurchaseRequest",
    "UpdatePurchaseRequest",
    "CreateTransferRequest",
    "UpdateTransferRequest",
    "ReconciliationLineRequest",
    "SaveReconciliationRequest",
    "UpsertLedgerRequest",
    # Responses
    "ProductLineResponse",
    "PurchaseResponse",
    "TransferResponse",
    "ReconciliationLineResponse",
    "LedgerResponse",
    "FinalizeLedgerResponse",
    "CatalogEntryResponse",
    "LedgerSummaryResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
