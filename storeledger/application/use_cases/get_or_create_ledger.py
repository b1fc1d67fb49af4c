"""Get Or Create Ledger Use Case: fetch a day, creating it on first access."""

from datetime import date, timedelta

from storeledger.application.use_cases.base import LedgerUseCase
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.ledger import DailyLedger
from storeledger.core.exceptions import DuplicateLedgerError, LedgerNotFoundError

logger = get_logger(__name__)


class GetOrCreateLedgerUseCase(LedgerUseCase):
    """
    Return the ledger of a date, creating it lazily.

    A new ledger starts in DRAFT with the previous day's final stock as its
    opening stock (empty when there is no previous day).
    """

    async def execute(self, ledger_date: date, actor: Actor | None = None) -> DailyLedger:
        store = await self._get_store()

        ledger = await store.get_by_date(ledger_date)
        if ledger is not None:
            return ledger

        async with self._locks.hold(ledger_date):
            return await self.load_or_create(ledger_date, actor)

    async def load_or_create(self, ledger_date: date, actor: Actor | None = None) -> DailyLedger:
        """Fetch or create without taking the date lock; callers must hold it."""
        store = await self._get_store()

        ledger = await store.get_by_date(ledger_date)
        if ledger is not None:
            return ledger

        chaining = await self._chaining()
        previous = await store.get_by_date(ledger_date - timedelta(days=1))
        ledger = chaining.new_ledger(ledger_date, previous, actor.user_id if actor else None)

        try:
            ledger = await store.create(ledger)
        except DuplicateLedgerError:
            # Created concurrently by another process sharing the database
            existing = await store.get_by_date(ledger_date)
            if existing is None:
                raise
            return existing

        logger.info(
            "ledger_lazily_created",
            ledger_id=ledger.id,
            ledger_date=ledger_date.isoformat(),
            seeded_from_previous=previous is not None,
            opening_products=len(ledger.opening_stock),
        )
        return ledger


class GetLedgerUseCase(LedgerUseCase):
    """Fetch a ledger by id."""

    async def execute(self, ledger_id: int) -> DailyLedger:
        store = await self._get_store()
        ledger = await store.get(ledger_id)
        if ledger is None:
            raise LedgerNotFoundError(ledger_id)
        return ledger
