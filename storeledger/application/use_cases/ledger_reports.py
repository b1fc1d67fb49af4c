"""Ledger Reports Use Case: recent history and daily summary."""

from datetime import date, timedelta

from storeledger.application.dto.responses import LedgerSummaryResponse
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger, get_settings
from storeledger.core.entities.ledger import DailyLedger, LedgerStatus

logger = get_logger(__name__)

NOT_STARTED = "NOT_STARTED"


class LedgerReportsUseCase(LedgerUseCase):
    """Read-only views over stored ledgers. Nothing is created here."""

    async def history(self, days: int | None = None, today: date | None = None) -> list[DailyLedger]:
        """Ledgers of the last `days` days, newest first."""
        days = days or get_settings().ledger.history_days
        end = today or date.today()
        start = end - timedelta(days=days)

        store = await self._get_store()
        ledgers = await store.list_between(start, end, limit=days + 1)

        logger.debug("ledger_history_loaded", days=days, count=len(ledgers))
        return ledgers

    async def summary(self, ledger_date: date | None = None) -> LedgerSummaryResponse:
        """Status and activity of one day (today by default)."""
        ledger_date = ledger_date or date.today()

        store = await self._get_store()
        ledger = await store.get_by_date(ledger_date)

        if ledger is None:
            return LedgerSummaryResponse(ledger_date=ledger_date, today_status=NOT_STARTED)

        return LedgerSummaryResponse(
            ledger_date=ledger_date,
            today_status=ledger.status.value,
            total_purchases=len(ledger.purchases),
            total_transfers=len(ledger.transfers),
            is_reconciled=ledger.status in (LedgerStatus.RECONCILED, LedgerStatus.FINALIZED),
            purchase_total_cost=round(sum(p.total_cost for p in ledger.purchases), 2),
            transferred_weight=round(
                sum(line.weight for t in ledger.transfers for line in t.products), 3
            ),
        )
