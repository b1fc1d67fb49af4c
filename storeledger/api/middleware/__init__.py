"""API middleware."""

from storeledger.api.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from storeledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
