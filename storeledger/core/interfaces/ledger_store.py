"""Abstract interface for daily ledger storage."""

from abc import ABC, abstractmethod
from datetime import date

from storeledger.core.entities.ledger import DailyLedger


class ILedgerStore(ABC):
    """Interface for daily ledger persistence (one document per calendar date)."""

    @abstractmethod
    async def get(self, ledger_id: int) -> DailyLedger | None:
        """Get ledger by ID."""
        pass

    @abstractmethod
    async def get_by_date(self, ledger_date: date) -> DailyLedger | None:
        """Get the ledger of a calendar date."""
        pass

    @abstractmethod
    async def create(self, ledger: DailyLedger) -> DailyLedger:
        """Insert a new ledger. Raises DuplicateLedgerError if the date is taken."""
        pass

    @abstractmethod
    async def save(self, ledger: DailyLedger) -> DailyLedger:
        """Insert or fully replace a ledger document."""
        pass

    @abstractmethod
    async def save_many(self, ledgers: list[DailyLedger]) -> list[DailyLedger]:
        """Insert or replace several ledgers in a single transaction."""
        pass

    @abstractmethod
    async def list_between(
        self, start: date, end: date, limit: int = 100
    ) -> list[DailyLedger]:
        """List ledgers with start <= date <= end, newest first."""
        pass
