"""
Day-chaining service.

Carries a finalized day's final stock into the next day's opening stock,
which is how inventory stays continuous from one ledger to the next.
"""

from datetime import date

from storeledger.config import get_logger
from storeledger.core.entities.ledger import DailyLedger, LedgerStatus, ProductLine
from storeledger.core.interfaces.ledger_store import ILedgerStore
from storeledger.core.services.stock_flow import StockFlowCalculator

logger = get_logger(__name__)


def opening_from_previous(previous: DailyLedger | None) -> list[ProductLine]:
    """Final stock of the previous day as quantity-only opening lines."""
    if previous is None:
        return []
    return [
        ProductLine.quantity(line.product_type, line.pieces, line.weight)
        for line in previous.final_stock
    ]


class DayChainingService:
    """Builds day N+1 from finalized day N. Persistence is left to the caller."""

    def __init__(self, store: ILedgerStore, calculator: StockFlowCalculator) -> None:
        self._store = store
        self._calculator = calculator

    def new_ledger(
        self,
        ledger_date: date,
        previous: DailyLedger | None,
        actor_id: str | None = None,
    ) -> DailyLedger:
        """A fresh DRAFT ledger seeded from the previous day's final stock."""
        ledger = DailyLedger(
            ledger_date=ledger_date,
            opening_stock=opening_from_previous(previous),
            status=LedgerStatus.DRAFT,
            created_by=actor_id or "system",
        )
        return self._calculator.refresh_stock(ledger)

    async def chain(self, ledger: DailyLedger, actor_id: str | None = None) -> DailyLedger:
        """
        Return day N+1 with its opening stock set to this ledger's final stock.

        An existing next day keeps its purchases, transfers, counts and status,
        whatever that status is. Its opening stock is replaced and everything
        derived from it is recomputed.
        """
        next_day = await self._store.get_by_date(ledger.next_date)

        if next_day is None:
            next_day = self.new_ledger(ledger.next_date, ledger, actor_id)
            logger.info(
                "next_day_ledger_seeded",
                from_date=ledger.ledger_date.isoformat(),
                to_date=next_day.ledger_date.isoformat(),
                products=len(next_day.opening_stock),
            )
            return next_day

        next_day.opening_stock = opening_from_previous(ledger)
        self._calculator.recalculate(next_day)
        next_day.touch(actor_id)
        logger.info(
            "next_day_opening_updated",
            from_date=ledger.ledger_date.isoformat(),
            to_date=next_day.ledger_date.isoformat(),
            next_ledger_id=next_day.id,
            next_status=next_day.status.value,
        )
        return next_day
