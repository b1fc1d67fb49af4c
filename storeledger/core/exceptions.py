"""
Domain exceptions for the store ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all store ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Base exception for missing resources."""

    pass


class LedgerNotFoundError(NotFoundError):
    """Daily ledger not found."""

    def __init__(self, ledger_id: int):
        super().__init__(
            f"Ledger not found: {ledger_id}",
            code="LEDGER_NOT_FOUND",
            details={"ledger_id": ledger_id},
        )


class PurchaseNotFoundError(NotFoundError):
    """Purchase not found on a ledger."""

    def __init__(self, ledger_id: int, purchase_id: str):
        super().__init__(
            f"Purchase not found: {purchase_id}",
            code="PURCHASE_NOT_FOUND",
            details={"ledger_id": ledger_id, "purchase_id": purchase_id},
        )


class TransferNotFoundError(NotFoundError):
    """Transfer not found on a ledger."""

    def __init__(self, ledger_id: int, transfer_id: str):
        super().__init__(
            f"Transfer not found: {transfer_id}",
            code="TRANSFER_NOT_FOUND",
            details={"ledger_id": ledger_id, "transfer_id": transfer_id},
        )


# Lifecycle Exceptions
class PreconditionError(LedgerError):
    """Operation is not allowed in the ledger's current state."""

    pass


class InvalidStatusTransitionError(PreconditionError):
    """Requested status transition is not permitted."""

    def __init__(self, ledger_id: int | None, current: str, action: str, reason: str):
        super().__init__(
            reason,
            code="INVALID_STATUS_TRANSITION",
            details={"ledger_id": ledger_id, "current_status": current, "action": action},
        )


class LedgerFinalizedError(PreconditionError):
    """Ledger is finalized and cannot be changed."""

    def __init__(self, ledger_id: int | None, operation: str):
        super().__init__(
            f"Ledger {ledger_id} is finalized; cannot {operation}",
            code="LEDGER_FINALIZED",
            details={"ledger_id": ledger_id, "operation": operation},
        )


# Stock Exceptions
class InsufficientStockError(LedgerError):
    """Transfer asks for more stock than is available."""

    def __init__(
        self,
        product_type: str,
        available_pieces: int,
        available_weight: float,
        requested_pieces: int,
        requested_weight: float,
        reason: str,
    ):
        super().__init__(
            reason,
            code="INSUFFICIENT_STOCK",
            details={
                "product_type": product_type,
                "available_pieces": available_pieces,
                "available_weight": available_weight,
                "requested_pieces": requested_pieces,
                "requested_weight": requested_weight,
            },
        )


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class UnknownCatalogEntryError(ValidationError):
    """Product type, shop or category is not in the catalog."""

    def __init__(self, field: str, value: str, allowed: list[str]):
        super().__init__(
            field=field,
            message=f"Unknown value '{value}'. Allowed: {', '.join(allowed)}",
            value=value,
        )
        self.code = "UNKNOWN_CATALOG_ENTRY"
        self.details["allowed"] = allowed


# Authorization Exceptions
class AuthenticationError(LedgerError):
    """Caller could not be identified from the bearer token."""

    def __init__(self, reason: str):
        super().__init__(
            f"Not authenticated: {reason}",
            code="NOT_AUTHENTICATED",
            details={"reason": reason},
        )


class PermissionDeniedError(LedgerError):
    """Caller is identified but may not perform the action."""

    def __init__(self, action: str, role: str | None = None, reason: str | None = None):
        super().__init__(
            reason or f"Role '{role}' may not {action}",
            code="PERMISSION_DENIED",
            details={"action": action, "role": role},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DuplicateLedgerError(StorageError):
    """A ledger already exists for the date."""

    def __init__(self, ledger_date: str):
        super().__init__(
            f"Ledger already exists for {ledger_date}",
            code="DUPLICATE_LEDGER",
            details={"ledger_date": ledger_date},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )
