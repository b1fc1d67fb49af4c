"""Upsert Ledger Use Case: create or edit the ledger of a date."""

from datetime import timedelta

from storeledger.application.dto.requests import UpsertLedgerRequest
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger

logger = get_logger(__name__)


class UpsertLedgerUseCase(LedgerUseCase):
    """
    Create or update the ledger of `request.ledger_date`.

    Only opening stock, notes and shop stock description can be set here;
    fields left out of the request keep their current value. A new ledger
    without explicit opening stock inherits the previous day's final stock.
    """

    async def execute(self, request: UpsertLedgerRequest, actor: Actor) -> DailyLedger:
        logger.info(
            "upsert_ledger_started",
            ledger_date=request.ledger_date.isoformat(),
            actor=actor.user_id,
        )

        opening = None
        if request.opening_stock is not None:
            opening = [
                self._calculator.price_line(line.to_entity()) for line in request.opening_stock
            ]
            self._check_lines(opening)

        store = await self._get_store()

        async with self._locks.hold(request.ledger_date):
            ledger = await store.get_by_date(request.ledger_date)
            created = ledger is None

            if ledger is None:
                chaining = await self._chaining()
                previous = await store.get_by_date(request.ledger_date - timedelta(days=1))
                ledger = chaining.new_ledger(request.ledger_date, previous, actor.user_id)
            else:
                self._gate.ensure_mutable(ledger, "update ledger")

            if opening is not None:
                ledger.opening_stock = opening
            if request.notes is not None:
                ledger.notes = request.notes
            if request.shop_stock_description is not None:
                ledger.shop_stock_description = request.shop_stock_description

            self._calculator.recalculate(ledger)
            ledger.touch(actor.user_id)

            if created:
                ledger = await store.create(ledger)
            else:
                ledger = await store.save(ledger)

        logger.info(
            "upsert_ledger_complete",
            ledger_id=ledger.id,
            created=created,
            status=ledger.status.value,
        )
        return ledger
