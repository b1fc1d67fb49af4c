"""Request DTOs for API endpoints.

Pydantic v2 models for request validation.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from storeledger.core.entities.ledger import ProductLine


class ProductLineRequest(BaseModel):
    """One product line of a purchase, transfer or opening stock."""

    model_config = ConfigDict(allow_inf_nan=False)

    product_type: str = Field(..., description="Catalog product code")
    category: str | None = Field(
        default=None,
        description="Parts category (e.g. 'BEEF PARTS'); empty means whole pieces",
    )
    pieces: int = Field(default=0, ge=0, description="Number of pieces")
    weight: float = Field(default=0.0, ge=0, description="Weight in kg")
    price_per_unit: float = Field(default=0.0, ge=0, description="Price per kg")
    vat_percentage: float = Field(default=0.0, ge=0, le=100, description="VAT %")

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_entity(self) -> ProductLine:
        return ProductLine(
            product_type=self.product_type,
            category=self.category,
            pieces=self.pieces,
            weight=self.weight,
            price_per_unit=self.price_per_unit,
            vat_percentage=self.vat_percentage,
        )


class CreatePurchaseRequest(BaseModel):
    """Request to record a supplier purchase."""

    supplier: str = Field(..., min_length=1, description="Supplier name")
    products: list[ProductLineRequest] = Field(
        ..., min_length=1, description="Purchased product lines"
    )
    purchase_time: datetime | None = Field(
        default=None, description="Time of purchase (default: now)"
    )
    notes: str | None = Field(default=None, description="Free-text notes")

    @field_validator("supplier")
    @classmethod
    def supplier_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("supplier must not be blank")
        return v


class UpdatePurchaseRequest(CreatePurchaseRequest):
    """Full replacement of an existing purchase."""

    pass


class CreateTransferRequest(BaseModel):
    """Request to record a transfer to a shop."""

    shop: str = Field(..., description="Catalog shop code")
    products: list[ProductLineRequest] = Field(
        ..., min_length=1, description="Transferred product lines"
    )
    transfer_time: datetime | None = Field(
        default=None, description="Time of transfer (default: now)"
    )
    notes: str | None = Field(default=None, description="Free-text notes")


class UpdateTransferRequest(CreateTransferRequest):
    """Full replacement of an existing transfer."""

    pass


class ReconciliationLineRequest(BaseModel):
    """Physical count for one product."""

    model_config = ConfigDict(allow_inf_nan=False)

    product_type: str = Field(..., description="Catalog product code")
    actual_pieces: int | None = Field(
        default=None, ge=0, description="Counted pieces (default: calculated)"
    )
    actual_weight: float | None = Field(
        default=None, ge=0, description="Counted weight in kg (default: calculated)"
    )
    notes: str | None = Field(default=None, description="Notes on the count")


class SaveReconciliationRequest(BaseModel):
    """End-of-day physical count."""

    reconciliation: list[ReconciliationLineRequest] = Field(
        ..., description="One line per counted product"
    )


class UpsertLedgerRequest(BaseModel):
    """Create or update the ledger of a date.

    Omitted fields are left unchanged.
    """

    ledger_date: date = Field(
        ...,
        validation_alias=AliasChoices("date", "ledger_date"),
        description="Calendar date of the ledger",
    )
    opening_stock: list[ProductLineRequest] | None = Field(
        default=None, description="Replacement opening stock"
    )
    notes: str | None = Field(default=None, description="Ledger notes")
    shop_stock_description: str | None = Field(
        default=None, description="Description of stock held in the shops"
    )
