"""Ledger history and summary endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from storeledger.api.dependencies import ActorDep, get_ledger_reports_use_case
from storeledger.application.dto.responses import LedgerResponse, LedgerSummaryResponse
from storeledger.application.use_cases import LedgerReportsUseCase

router = APIRouter(prefix="/api/ledgers", tags=["reports"])


@router.get("/history", response_model=list[LedgerResponse])
async def get_history(
    actor: ActorDep,
    days: int | None = Query(default=None, ge=1, le=366, description="Days to look back"),
    use_case: LedgerReportsUseCase = Depends(get_ledger_reports_use_case),
) -> list[LedgerResponse]:
    """Ledgers of the recent past, newest first."""
    ledgers = await use_case.history(days)
    return [use_case.to_response(ledger) for ledger in ledgers]


@router.get("/stats/summary", response_model=LedgerSummaryResponse)
async def get_summary(
    actor: ActorDep,
    ledger_date: date | None = Query(default=None, alias="date", description="Day (default: today)"),
    use_case: LedgerReportsUseCase = Depends(get_ledger_reports_use_case),
) -> LedgerSummaryResponse:
    """Status and activity counts of one day."""
    return await use_case.summary(ledger_date)
