"""API route modules."""

from storeledger.api.routes.catalog import router as catalog_router
from storeledger.api.routes.health import router as health_router
from storeledger.api.routes.ledgers import router as ledgers_router
from storeledger.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "catalog_router",
    "reports_router",
    "ledgers_router",
]
