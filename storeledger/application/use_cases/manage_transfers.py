"""Manage Transfers Use Case: shop transfers with an available-stock check."""

from storeledger.application.dto.requests import CreateTransferRequest, UpdateTransferRequest
from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger, Transfer, utcnow
from storeledger.core.exceptions import InsufficientStockError, TransferNotFoundError

logger = get_logger(__name__)


class ManageTransfersUseCase(LedgerUseCase):
    """
    Record transfers to shops.

    A transfer is accepted only if every line fits within the available stock
    (opening plus purchases). A rejected transfer leaves the ledger untouched.
    """

    def _build_transfer(
        self, request: CreateTransferRequest, transfer_id: str | None = None
    ) -> Transfer:
        self._catalog.require_shop(request.shop)
        products = [self._calculator.price_line(line.to_entity()) for line in request.products]
        self._check_lines(products)

        transfer = Transfer(
            shop=request.shop,
            products=products,
            transfer_time=request.transfer_time or utcnow(),
            notes=request.notes,
        )
        if transfer_id is not None:
            transfer.id = transfer_id
        return transfer

    def _check_stock(self, ledger: DailyLedger, transfer: Transfer) -> None:
        # check against freshly derived stock, not the stored list
        self._calculator.refresh_stock(ledger)
        try:
            self._calculator.check_transfer(ledger.available_stock, transfer)
        except InsufficientStockError as e:
            logger.warning(
                "transfer_rejected",
                ledger_id=ledger.id,
                shop=transfer.shop,
                reason=e.message,
            )
            raise

    async def add(
        self, ledger_id: int, request: CreateTransferRequest, actor: Actor
    ) -> DailyLedger:
        """Validate and append a transfer, then recompute remaining stock."""
        transfer = self._build_transfer(request)
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "add transfer")
            self._check_stock(ledger, transfer)

            ledger.transfers.append(transfer)
            self._calculator.recalculate(ledger)
            self._gate.mark_in_progress(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info(
            "transfer_added",
            ledger_id=ledger_id,
            transfer_id=transfer.id,
            shop=transfer.shop,
            lines=len(transfer.products),
        )
        return ledger

    async def update(
        self,
        ledger_id: int,
        transfer_id: str,
        request: UpdateTransferRequest,
        actor: Actor,
    ) -> DailyLedger:
        """Replace a transfer in full, validated the same way as a new one."""
        transfer = self._build_transfer(request, transfer_id)
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "update transfer")

            existing = ledger.find_transfer(transfer_id)
            if existing is None:
                raise TransferNotFoundError(ledger_id, transfer_id)

            self._check_stock(ledger, transfer)

            index = ledger.transfers.index(existing)
            ledger.transfers[index] = transfer
            self._calculator.recalculate(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info(
            "transfer_updated",
            ledger_id=ledger_id,
            transfer_id=transfer_id,
            shop=transfer.shop,
        )
        return ledger

    async def delete(self, ledger_id: int, transfer_id: str, actor: Actor) -> DailyLedger:
        """Remove a transfer by id."""
        store = await self._get_store()

        async with self._locked_ledger(ledger_id) as ledger:
            self._gate.ensure_mutable(ledger, "delete transfer")

            existing = ledger.find_transfer(transfer_id)
            if existing is None:
                raise TransferNotFoundError(ledger_id, transfer_id)

            ledger.transfers.remove(existing)
            self._calculator.recalculate(ledger)
            ledger.touch(actor.user_id)
            ledger = await store.save(ledger)

        logger.info("transfer_deleted", ledger_id=ledger_id, transfer_id=transfer_id)
        return ledger
