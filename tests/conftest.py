"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from storeledger.application.locks import DateLockRegistry
from storeledger.core.entities import (
    DEFAULT_CATALOG,
    Actor,
    Catalog,
    DailyLedger,
    LedgerStatus,
    ProductLine,
    Purchase,
    Role,
)
from storeledger.core.services import StockFlowCalculator

LAMB = "KK_KENYA_LAMB"
GOAT = "KENYA_BAKRA_GOAT"
BEEF = "BEEF_DASTI_SHOULDER"


def line(product_type: str, pieces: int, weight: float, **kwargs) -> ProductLine:
    return ProductLine(product_type=product_type, pieces=pieces, weight=weight, **kwargs)


@pytest.fixture
def catalog() -> Catalog:
    return DEFAULT_CATALOG


@pytest.fixture
def calculator(catalog: Catalog) -> StockFlowCalculator:
    return StockFlowCalculator(catalog)


@pytest.fixture
def locks() -> DateLockRegistry:
    return DateLockRegistry()


@pytest.fixture
def storekeeper() -> Actor:
    return Actor(user_id="keeper-1", role=Role.STOREKEEPER)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def ledger_day() -> date:
    return date(2024, 3, 10)


@pytest.fixture
def stocked_ledger(calculator: StockFlowCalculator, ledger_day: date) -> DailyLedger:
    """IN_PROGRESS ledger with 15 pieces / 30 kg of lamb available."""
    ledger = DailyLedger(
        id=1,
        ledger_date=ledger_day,
        status=LedgerStatus.IN_PROGRESS,
        purchases=[
            Purchase(supplier="Al Noor", products=[line(LAMB, 10, 20.0)]),
            Purchase(supplier="Al Noor", products=[line(LAMB, 5, 10.0)]),
        ],
    )
    return calculator.recalculate(ledger)


@pytest.fixture
def mock_ledger_store() -> AsyncMock:
    """Store mock whose writes return what they are given."""
    store = AsyncMock()
    store.save.side_effect = lambda ledger: ledger
    store.save_many.side_effect = lambda ledgers: ledgers

    def _create(ledger: DailyLedger) -> DailyLedger:
        ledger.id = ledger.id or 99
        return ledger

    store.create.side_effect = _create
    return store


@pytest.fixture
async def ledger_db(tmp_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated temporary database wired in as the process-wide ledger database."""
    import storeledger.infrastructure.storage.sqlite.connection as conn_module
    from storeledger.infrastructure.storage.sqlite.migrations import migrate

    db_path = tmp_path / "ledger.db"
    await migrate(db_path)

    conn_module._database = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = db_path
    mock_settings.storage.readers = 2
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield db_path
        finally:
            await conn_module.close_database()
