"""Reconcile Ledger Use Case: record the end-of-day physical count."""

from storeledger.application.dto.requests import SaveReconciliationRequest
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger, ReconciliationLine
from storeledger.core.exceptions import ValidationError

logger = get_logger(__name__)


class SaveReconciliationUseCase(LedgerUseCase):
    """
    Save actual counts, compute differences and derive final stock.

    Calculated values are always taken from freshly derived remaining stock;
    whatever the caller sends for them is ignored. Saving moves the ledger to
    RECONCILED and may be repeated until it is finalized.
    """

    def _build_lines(self, request: SaveReconciliationRequest) -> list[ReconciliationLine]:
        seen: set[str] = set()
        lines = []
        for item in request.reconciliation:
            self._catalog.require_product(item.product_type)
            if item.product_type in seen:
                raise ValidationError(
                    "reconciliation",
                    f"Product type listed more than once: {item.product_type}",
                    item.product_type,
                )
            seen.add(item.product_type)
            lines.append(
                ReconciliationLine(
                    product_type=item.product_type,
                    actual_pieces=item.actual_pieces,
                    actual_weight=item.actual_weight,
                    notes=item.notes,
                )
            )
        return lines

    async def execute(
        self, ledger_id: int, request: SaveReconciliationRequest, actor: Actor
    ) -> DailyLedger:
        lines = self._build_lines(request)
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "save reconciliation")

            self._calculator.refresh_stock(ledger)
            ledger.reconciliation = lines
            self._calculator.apply_reconciliation(ledger)
            self._gate.reconcile(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        discrepancies = [
            line.product_type
            for line in ledger.reconciliation
            if line.difference_pieces or line.difference_weight
        ]
        logger.info(
            "ledger_reconciled",
            ledger_id=ledger_id,
            lines=len(ledger.reconciliation),
            discrepancies=discrepancies,
        )
        return ledger
