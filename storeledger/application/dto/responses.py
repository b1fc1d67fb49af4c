"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from storeledger.core.entities.ledger import LedgerStatus


class ProductLineResponse(BaseModel):
    """Product line in a stock list, purchase or transfer."""

    model_config = ConfigDict(from_attributes=True)

    product_type: str
    category: str | None = None
    pieces: int
    weight: float = Field(..., description="Weight in kg")
    price_per_unit: float = 0.0
    subtotal: float = 0.0
    vat_percentage: float = 0.0
    vat_amount: float = 0.0
    total_cost: float = 0.0


class PurchaseResponse(BaseModel):
    """Recorded supplier purchase."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    supplier: str
    products: list[ProductLineResponse]
    purchase_time: datetime
    subtotal: float
    total_vat_amount: float
    total_cost: float
    notes: str | None = None


class TransferResponse(BaseModel):
    """Recorded transfer to a shop."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    shop: str
    products: list[ProductLineResponse]
    transfer_time: datetime
    notes: str | None = None


class ReconciliationLineResponse(BaseModel):
    """Calculated vs counted stock of one product."""

    model_config = ConfigDict(from_attributes=True)

    product_type: str
    calculated_pieces: int
    calculated_weight: float
    actual_pieces: int | None = None
    actual_weight: float | None = None
    difference_pieces: int
    difference_weight: float
    notes: str | None = None


class LedgerResponse(BaseModel):
    """Full daily ledger document."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    ledger_date: date
    status: LedgerStatus
    opening_stock: list[ProductLineResponse]
    purchases: list[PurchaseResponse]
    available_stock: list[ProductLineResponse]
    transfers: list[TransferResponse]
    remaining_stock: list[ProductLineResponse]
    reconciliation: list[ReconciliationLineResponse]
    final_stock: list[ProductLineResponse]
    notes: str | None = None
    shop_stock_description: str = ""
    created_by: str | None = None
    last_modified_by: str | None = None
    created_at: datetime
    updated_at: datetime


class FinalizeLedgerResponse(BaseModel):
    """Finalized ledger plus the next day it was carried into."""

    ledger: LedgerResponse
    next_day: LedgerResponse = Field(
        ..., description="Next day's ledger with the carried-forward opening stock"
    )


class CatalogEntryResponse(BaseModel):
    """Product type or shop code with its display name."""

    value: str
    label: str


class LedgerSummaryResponse(BaseModel):
    """Status and activity counts of one day."""

    ledger_date: date
    today_status: str = Field(..., description="Ledger status or NOT_STARTED")
    total_purchases: int = 0
    total_transfers: int = 0
    is_reconciled: bool = False
    purchase_total_cost: float = 0.0
    transferred_weight: float = Field(default=0.0, description="Total kg sent to shops")


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. LEDGER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
