"""Daily ledger domain entities."""

from datetime import UTC, date, datetime, timedelta
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

# kg are kept to the gram
WEIGHT_PRECISION = 3


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_entry_id() -> str:
    return uuid4().hex


class LedgerStatus(str, Enum):
    """Lifecycle states of a daily ledger."""

    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    RECONCILED = "RECONCILED"
    FINALIZED = "FINALIZED"


class ProductLine(BaseModel):
    """Quantity and cost of one product within a stock list, purchase or transfer."""

    model_config = ConfigDict(allow_inf_nan=False)

    product_type: str
    category: str | None = None  # parts categories skip piece decrements on transfer
    pieces: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)  # kg
    price_per_unit: float = Field(default=0.0, ge=0)  # per kg
    subtotal: float = 0.0
    vat_percentage: float = Field(default=0.0, ge=0, le=100)
    vat_amount: float = 0.0
    total_cost: float = 0.0

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("weight")
    @classmethod
    def round_weight(cls, v: float) -> float:
        return round(v, WEIGHT_PRECISION)

    @property
    def is_empty(self) -> bool:
        return self.pieces <= 0 and self.weight <= 0

    @classmethod
    def quantity(cls, product_type: str, pieces: int, weight: float) -> "ProductLine":
        """A line carrying quantities only, with every cost field zeroed."""
        return cls(product_type=product_type, pieces=pieces, weight=weight)


class Purchase(BaseModel):
    """A supplier delivery recorded against a ledger."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(default_factory=new_entry_id)
    supplier: str
    products: list[ProductLine] = Field(default_factory=list)
    purchase_time: datetime = Field(default_factory=utcnow)
    subtotal: float = 0.0
    total_vat_amount: float = 0.0
    total_cost: float = 0.0
    notes: str | None = None


class Transfer(BaseModel):
    """Stock sent from the store to one shop."""

    id: str = Field(default_factory=new_entry_id)
    shop: str
    products: list[ProductLine] = Field(default_factory=list)
    transfer_time: datetime = Field(default_factory=utcnow)
    notes: str | None = None


class ReconciliationLine(BaseModel):
    """Calculated vs physically counted stock for one product."""

    model_config = ConfigDict(allow_inf_nan=False)

    product_type: str
    calculated_pieces: int = 0
    calculated_weight: float = 0.0
    actual_pieces: int | None = Field(default=None, ge=0)
    actual_weight: float | None = Field(default=None, ge=0)
    difference_pieces: int = 0
    difference_weight: float = 0.0
    notes: str | None = None

    @field_validator("actual_weight")
    @classmethod
    def round_actual_weight(cls, v: float | None) -> float | None:
        return None if v is None else round(v, WEIGHT_PRECISION)


class DailyLedger(BaseModel):
    """Store inventory for one calendar day (aggregate root)."""

    id: int | None = None
    ledger_date: date
    opening_stock: list[ProductLine] = Field(default_factory=list)
    purchases: list[Purchase] = Field(default_factory=list)
    available_stock: list[ProductLine] = Field(default_factory=list)
    transfers: list[Transfer] = Field(default_factory=list)
    remaining_stock: list[ProductLine] = Field(default_factory=list)
    reconciliation: list[ReconciliationLine] = Field(default_factory=list)
    final_stock: list[ProductLine] = Field(default_factory=list)
    status: LedgerStatus = LedgerStatus.DRAFT
    notes: str | None = None
    shop_stock_description: str = ""
    created_by: str | None = None
    last_modified_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_finalized(self) -> bool:
        return self.status == LedgerStatus.FINALIZED

    @property
    def next_date(self) -> date:
        return self.ledger_date + timedelta(days=1)

    @property
    def previous_date(self) -> date:
        return self.ledger_date - timedelta(days=1)

    def find_purchase(self, purchase_id: str) -> Purchase | None:
        return next((p for p in self.purchases if p.id == purchase_id), None)

    def find_transfer(self, transfer_id: str) -> Transfer | None:
        return next((t for t in self.transfers if t.id == transfer_id), None)

    def touch(self, actor_id: str | None) -> None:
        """Record who changed the ledger last."""
        self.last_modified_by = actor_id or "system"
        self.updated_at = utcnow()
