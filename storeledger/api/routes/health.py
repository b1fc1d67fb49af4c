"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from storeledger.application.dto.responses import HealthResponse, ProviderHealthResponse
from storeledger.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and that the ledger table is readable.
    """
    from storeledger.infrastructure.storage.sqlite import get_connection

    try:
        start = time.time()
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM daily_ledgers")
            row = await cursor.fetchone()
        latency = (time.time() - start) * 1000

        db_status = ProviderHealthResponse(
            name=f"sqlite ({row[0]} ledgers)",
            available=True,
            latency_ms=latency,
        )

    except Exception as e:
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=False,
            error=str(e),
        )

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
