"""Manage Purchases Use Case: add, replace and remove supplier purchases."""

from storeledger.application.dto.requests import CreatePurchaseRequest, UpdatePurchaseRequest
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger, Purchase, utcnow
from storeledger.core.exceptions import PurchaseNotFoundError

logger = get_logger(__name__)


class ManagePurchasesUseCase(LedgerUseCase):
    """Record purchases against a ledger and keep its derived stock current."""

    def _build_purchase(
        self, request: CreatePurchaseRequest, purchase_id: str | None = None
    ) -> Purchase:
        products = [line.to_entity() for line in request.products]
        self._check_lines(products)

        purchase = Purchase(
            supplier=request.supplier,
            products=products,
            purchase_time=request.purchase_time or utcnow(),
            notes=request.notes,
        )
        if purchase_id is not None:
            purchase.id = purchase_id
        return self._calculator.price_purchase(purchase)

    async def add(
        self, ledger_id: int, request: CreatePurchaseRequest, actor: Actor
    ) -> DailyLedger:
        """Append a purchase and recompute available and remaining stock."""
        purchase = self._build_purchase(request)
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "add purchase")

            ledger.purchases.append(purchase)
            self._calculator.recalculate(ledger)
            self._gate.mark_in_progress(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info(
            "purchase_added",
            ledger_id=ledger_id,
            purchase_id=purchase.id,
            supplier=purchase.supplier,
            lines=len(purchase.products),
            total_cost=purchase.total_cost,
        )
        return ledger

    async def update(
        self,
        ledger_id: int,
        purchase_id: str,
        request: UpdatePurchaseRequest,
        actor: Actor,
    ) -> DailyLedger:
        """Replace a purchase in full, keeping its id."""
        purchase = self._build_purchase(request, purchase_id)
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "update purchase")

            existing = ledger.find_purchase(purchase_id)
            if existing is None:
                raise PurchaseNotFoundError(ledger_id, purchase_id)

            index = ledger.purchases.index(existing)
            ledger.purchases[index] = purchase
            self._calculator.recalculate(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info(
            "purchase_updated",
            ledger_id=ledger_id,
            purchase_id=purchase_id,
            total_cost=purchase.total_cost,
        )
        return ledger

    async def delete(self, ledger_id: int, purchase_id: str, actor: Actor) -> DailyLedger:
        """Remove a purchase by id."""
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "delete purchase")

            existing = ledger.find_purchase(purchase_id)
            if existing is None:
                raise PurchaseNotFoundError(ledger_id, purchase_id)

            ledger.purchases.remove(existing)
            self._calculator.recalculate(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info("purchase_deleted", ledger_id=ledger_id, purchase_id=purchase_id)
        return ledger
