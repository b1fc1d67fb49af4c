"""Finalize/Unfinalize Ledger Use Cases: close a day and carry its stock forward."""

from dataclasses import dataclass

from storeledger.application.dto.responses import FinalizeLedgerResponse
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger

logger = get_logger(__name__)


@dataclass
class FinalizeResult:
    """Result of finalizing a ledger."""

    ledger: DailyLedger
    next_day: DailyLedger


class FinalizeLedgerUseCase(LedgerUseCase):
    """
    Finalize a reconciled ledger.

    The next day's opening stock is set to this day's final stock (creating
    the next day if needed, overwriting it otherwise) and both ledgers are
    written in one transaction.
    """

    async def execute(self, ledger_id: int, actor: Actor) -> FinalizeResult:
        logger.info("finalize_ledger_started", ledger_id=ledger_id, actor=actor.user_id)

        store = await self._get_store()
        chaining = await self._chaining()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.finalize(ledger)
            ledger.touch(actor.user_id)

            async with self._locks.hold(ledger.next_date):
                next_day = await chaining.chain(ledger, actor.user_id)
                ledger, next_day = await store.save_many([ledger, next_day])

        logger.info(
            "ledger_finalized",
            ledger_id=ledger.id,
            ledger_date=ledger.ledger_date.isoformat(),
            final_products=len(ledger.final_stock),
            next_ledger_id=next_day.id,
        )
        return FinalizeResult(ledger=ledger, next_day=next_day)

    def to_finalize_response(self, result: FinalizeResult) -> FinalizeLedgerResponse:
        return FinalizeLedgerResponse(
            ledger=self.to_response(result.ledger),
            next_day=self.to_response(result.next_day),
        )


class UnfinalizeLedgerUseCase(LedgerUseCase):
    """Admin-only return of a finalized ledger to DRAFT.

    Recorded data and stock already carried into the next day stay as they are.
    """

    async def execute(self, ledger_id: int, actor: Actor) -> DailyLedger:
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.unfinalize(ledger, actor)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.warning(
            "ledger_unfinalized",
            ledger_id=ledger.id,
            ledger_date=ledger.ledger_date.isoformat(),
            actor=actor.user_id,
        )
        return ledger
