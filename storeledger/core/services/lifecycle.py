"""
Ledger lifecycle gate.

    DRAFT -> IN_PROGRESS -> RECONCILED -> FINALIZED
      ^                                       |
      +------------- unfinalize (admin) ------+

Reconciliation may be (re)saved from any status except FINALIZED. Finalize
requires RECONCILED. Unfinalize only changes the status; data recorded on the
ledger and stock already carried into the next day are left as they are.
"""

from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger, LedgerStatus
from storeledger.core.exceptions import (
    InvalidStatusTransitionError,
    LedgerFinalizedError,
    PermissionDeniedError,
)
from storeledger.core.services.stock_flow import StockFlowCalculator

logger = get_logger(__name__)

MUTABLE_STATUSES = frozenset(
    {LedgerStatus.DRAFT, LedgerStatus.IN_PROGRESS, LedgerStatus.RECONCILED}
)


class LifecycleGate:
    """Enforces status transitions and which mutations each status allows."""

    def __init__(self, calculator: StockFlowCalculator) -> None:
        self._calculator = calculator

    @staticmethod
    def ensure_mutable(ledger: DailyLedger, operation: str) -> None:
        if ledger.status not in MUTABLE_STATUSES:
            logger.warning(
                "ledger_mutation_rejected",
                ledger_id=ledger.id,
                status=ledger.status.value,
                operation=operation,
            )
            raise LedgerFinalizedError(ledger.id, operation)

    @staticmethod
    def mark_in_progress(ledger: DailyLedger) -> None:
        """First recorded purchase or transfer moves a DRAFT ledger along."""
        if ledger.status == LedgerStatus.DRAFT:
            ledger.status = LedgerStatus.IN_PROGRESS

    def reconcile(self, ledger: DailyLedger) -> None:
        """
        Mark the count as saved.

        Counts can be re-saved at any point before finalizing, including while
        RECONCILED. A FINALIZED ledger only takes a new count after unfinalize.
        """
        self.ensure_mutable(ledger, "save reconciliation")
        ledger.status = LedgerStatus.RECONCILED

    def finalize(self, ledger: DailyLedger) -> None:
        if ledger.status != LedgerStatus.RECONCILED:
            raise InvalidStatusTransitionError(
                ledger.id,
                ledger.status.value,
                "finalize",
                "Inventory must be reconciled before finalizing",
            )

        if not ledger.final_stock:
            ledger.final_stock = self._calculator.derive_final_stock(ledger.reconciliation)

        ledger.status = LedgerStatus.FINALIZED

    @staticmethod
    def unfinalize(ledger: DailyLedger, actor: Actor) -> None:
        if not actor.is_admin:
            raise PermissionDeniedError("unfinalize a ledger", role=actor.role.value)

        if ledger.status != LedgerStatus.FINALIZED:
            raise InvalidStatusTransitionError(
                ledger.id,
                ledger.status.value,
                "unfinalize",
                "Only a finalized inventory can be unfinalized",
            )

        ledger.status = LedgerStatus.DRAFT
