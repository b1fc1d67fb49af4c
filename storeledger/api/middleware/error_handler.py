"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from storeledger.application.dto.responses import ErrorResponse
from storeledger.config import get_logger
from storeledger.core.exceptions import (
    AuthenticationError,
    DuplicateLedgerError,
    InsufficientStockError,
    LedgerError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes (first match wins)
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PreconditionError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    DuplicateLedgerError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "LEDGER_NOT_FOUND": "Check the ledger ID or fetch the day with GET /api/ledgers/date/{date}.",
    "PURCHASE_NOT_FOUND": "Check the purchase ID on the ledger document.",
    "TRANSFER_NOT_FOUND": "Check the transfer ID on the ledger document.",
    "LEDGER_FINALIZED": "An admin must unfinalize the ledger before it can be changed.",
    "INVALID_STATUS_TRANSITION": "Save the reconciliation before finalizing.",
    "INSUFFICIENT_STOCK": "Reduce the transfer or record the missing purchase first.",
    "UNKNOWN_CATALOG_ENTRY": "See GET /api/ledgers/product-types and /api/ledgers/shop-types.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "NOT_AUTHENTICATED": "Send a valid token as 'Authorization: Bearer <token>'.",
    "PERMISSION_DENIED": "Ask an admin to perform this action or to verify the account.",
    "DUPLICATE_LEDGER": "A ledger already exists for this date; fetch it instead.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "You are not allowed to perform this action.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The resource already exists.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(request: Request, exc: Exception, status_code: int) -> JSONResponse:
    error_code = exc.code if isinstance(exc, LedgerError) else exc.__class__.__name__
    message = exc.message if isinstance(exc, LedgerError) else str(exc)
    detail = None
    if isinstance(exc, LedgerError) and exc.details:
        detail = "; ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail or None,
            path=request.url.path,
        ).model_dump(mode="json"),
        headers=headers,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = _status_for(exc)

        logger.error(
            "unhandled_exception",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        return _error_response(request, exc, status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(
        request: Request,
        exc: LedgerError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        status_code = _status_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "request_rejected",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            error_code=exc.code,
            status=status_code,
        )
        return _error_response(request, exc, status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    return {
        400: "BAD_REQUEST",
        401: "NOT_AUTHENTICATED",
        403: "PERMISSION_DENIED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
