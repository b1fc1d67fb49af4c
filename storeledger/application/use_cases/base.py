"""Shared plumbing for ledger use cases."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from storeledger.application.dto.responses import LedgerResponse
from storeledger.application.locks import DateLockRegistry, get_lock_registry
from storeledger.core.entities.catalog import Catalog, catalog_from_settings
from storeledger.core.entities.ledger import DailyLedger, ProductLine
from storeledger.core.exceptions import LedgerNotFoundError
from storeledger.core.interfaces.ledger_store import ILedgerStore
from storeledger.core.services import DayChainingService, LifecycleGate, StockFlowCalculator


class LedgerUseCase:
    """Base for use cases operating on daily ledgers.

    Store, catalog and lock registry are injectable; when omitted the
    SQLite store, the configured catalog and the process-wide registry are used.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        catalog: Catalog | None = None,
        locks: DateLockRegistry | None = None,
    ):
        self._ledger_store = ledger_store
        self._catalog = catalog or catalog_from_settings()
        self._locks = locks or get_lock_registry()
        self._calculator = StockFlowCalculator(self._catalog)
        self._gate = LifecycleGate(self._calculator)

    async def _get_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from storeledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _chaining(self) -> DayChainingService:
        return DayChainingService(await self._get_store(), self._calculator)

    @asynccontextmanager
    async def _locked_ledger(self, ledger_id: int) -> AsyncIterator[DailyLedger]:
        """Yield the ledger re-read under its date lock."""
        store = await self._get_store()
        ledger = await store.get(ledger_id)
        if ledger is None:
            raise LedgerNotFoundError(ledger_id)

        async with self._locks.hold(ledger.ledger_date):
            current = await store.get(ledger_id)
            if current is None:
                raise LedgerNotFoundError(ledger_id)
            yield current

    def _check_lines(self, lines: list[ProductLine]) -> None:
        for line in lines:
            self._catalog.require_product(line.product_type)
            self._catalog.require_category(line.category)

    def to_response(self, ledger: DailyLedger) -> LedgerResponse:
        """Convert ledger entity to API response."""
        return LedgerResponse.model_validate(ledger)
