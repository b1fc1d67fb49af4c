"""Recalculate Ledger Use Case: re-derive stock from recorded inputs."""

from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger

logger = get_logger(__name__)


class RecalculateLedgerUseCase(LedgerUseCase):
    """Recompute available, remaining, reconciliation and final stock."""

    async def execute(self, ledger_id: int, actor: Actor) -> DailyLedger:
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "recalculate")

            before = (ledger.available_stock, ledger.remaining_stock, ledger.final_stock)
            self._calculator.recalculate(ledger)
            changed = before != (
                ledger.available_stock,
                ledger.remaining_stock,
                ledger.final_stock,
            )

            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info("ledger_recalculated", ledger_id=ledger_id, changed=changed)
        return ledger
