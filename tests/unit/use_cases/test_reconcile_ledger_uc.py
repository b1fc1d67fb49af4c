"""Tests for SaveReconciliationUseCase and RecalculateLedgerUseCase."""

import pytest

from storeledger.application.dto.requests import SaveReconciliationRequest
from storeledger.application.use_cases.recalculate_ledger import RecalculateLedgerUseCase
from storeledger.application.use_cases.reconcile_ledger import SaveReconciliationUseCase
from storeledger.core.entities.ledger import (
    LedgerStatus,
    ProductLine,
    Purchase,
    ReconciliationLine,
    Transfer,
)
from storeledger.core.exceptions import (
    LedgerFinalizedError,
    UnknownCatalogEntryError,
    ValidationError,
)

LAMB = "KK_KENYA_LAMB"
GOAT = "KENYA_BAKRA_GOAT"


@pytest.fixture
def use_case(mock_ledger_store, catalog, locks):
    return SaveReconciliationUseCase(
        ledger_store=mock_ledger_store, catalog=catalog, locks=locks
    )


@pytest.fixture
def transferred_ledger(stocked_ledger, calculator):
    """15/30 available, 5/10 transferred, 10/20 remaining."""
    stocked_ledger.transfers.append(
        Transfer(shop="SHOP_47", products=[ProductLine.quantity(LAMB, 5, 10.0)])
    )
    return calculator.recalculate(stocked_ledger)


class TestSaveReconciliation:
    async def test_differences_and_final_stock(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        mock_ledger_store.get.return_value = transferred_ledger

        request = SaveReconciliationRequest(
            reconciliation=[{"product_type": LAMB, "actual_pieces": 8, "actual_weight": 19.0}]
        )
        ledger = await use_case.execute(1, request, storekeeper)

        assert ledger.status == LedgerStatus.RECONCILED
        [line] = ledger.reconciliation
        assert (line.calculated_pieces, line.calculated_weight) == (10, 20.0)
        assert (line.difference_pieces, line.difference_weight) == (-2, -1.0)
        assert [(l.product_type, l.pieces, l.weight) for l in ledger.final_stock] == [
            (LAMB, 8, 19.0)
        ]
        mock_ledger_store.save.assert_awaited_once()

    async def test_missing_counts_take_calculated(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        mock_ledger_store.get.return_value = transferred_ledger

        request = SaveReconciliationRequest(reconciliation=[{"product_type": LAMB}])
        ledger = await use_case.execute(1, request, storekeeper)

        assert ledger.reconciliation[0].difference_pieces == 0
        assert [(l.pieces, l.weight) for l in ledger.final_stock] == [(10, 20.0)]

    async def test_can_be_saved_again(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        mock_ledger_store.get.return_value = transferred_ledger

        await use_case.execute(
            1,
            SaveReconciliationRequest(
                reconciliation=[{"product_type": LAMB, "actual_pieces": 8, "actual_weight": 19.0}]
            ),
            storekeeper,
        )
        ledger = await use_case.execute(
            1,
            SaveReconciliationRequest(
                reconciliation=[{"product_type": LAMB, "actual_pieces": 9, "actual_weight": 19.5}]
            ),
            storekeeper,
        )

        assert ledger.status == LedgerStatus.RECONCILED
        assert ledger.final_stock[0].pieces == 9

    async def test_duplicate_product_rejected(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        mock_ledger_store.get.return_value = transferred_ledger

        request = SaveReconciliationRequest(
            reconciliation=[{"product_type": LAMB}, {"product_type": LAMB}]
        )
        with pytest.raises(ValidationError):
            await use_case.execute(1, request, storekeeper)

    async def test_unknown_product(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        mock_ledger_store.get.return_value = transferred_ledger

        request = SaveReconciliationRequest(reconciliation=[{"product_type": "CHICKEN"}])
        with pytest.raises(UnknownCatalogEntryError):
            await use_case.execute(1, request, storekeeper)

    async def test_finalized_rejected(
        self, use_case, mock_ledger_store, transferred_ledger, storekeeper
    ):
        transferred_ledger.status = LedgerStatus.FINALIZED
        mock_ledger_store.get.return_value = transferred_ledger

        request = SaveReconciliationRequest(reconciliation=[{"product_type": LAMB}])
        with pytest.raises(LedgerFinalizedError):
            await use_case.execute(1, request, storekeeper)
        mock_ledger_store.save.assert_not_called()


class TestRecalculateLedger:
    @pytest.fixture
    def recalc(self, mock_ledger_store, catalog, locks):
        return RecalculateLedgerUseCase(
            ledger_store=mock_ledger_store, catalog=catalog, locks=locks
        )

    async def test_repairs_stale_derived_stock(
        self, recalc, mock_ledger_store, stocked_ledger, storekeeper
    ):
        stocked_ledger.available_stock = [ProductLine.quantity(LAMB, 99, 99.0)]
        stocked_ledger.remaining_stock = []
        mock_ledger_store.get.return_value = stocked_ledger

        ledger = await recalc.execute(1, storekeeper)

        assert [(l.pieces, l.weight) for l in ledger.available_stock] == [(15, 30.0)]
        assert [(l.pieces, l.weight) for l in ledger.remaining_stock] == [(15, 30.0)]
        mock_ledger_store.save.assert_awaited_once()

    async def test_reapplies_reconciliation(
        self, recalc, mock_ledger_store, stocked_ledger, storekeeper
    ):
        stocked_ledger.purchases.append(
            Purchase(supplier="B", products=[ProductLine.quantity(GOAT, 2, 5.0)])
        )
        stocked_ledger.reconciliation = [
            ReconciliationLine(product_type=LAMB, actual_pieces=14, actual_weight=30.0)
        ]
        mock_ledger_store.get.return_value = stocked_ledger

        ledger = await recalc.execute(1, storekeeper)

        assert ledger.reconciliation[0].calculated_pieces == 15
        assert ledger.reconciliation[0].difference_pieces == -1
        assert [(l.pieces, l.weight) for l in ledger.final_stock] == [(14, 30.0)]

    async def test_finalized_rejected(
        self, recalc, mock_ledger_store, stocked_ledger, storekeeper
    ):
        stocked_ledger.status = LedgerStatus.FINALIZED
        mock_ledger_store.get.return_value = stocked_ledger

        with pytest.raises(LedgerFinalizedError):
            await recalc.execute(1, storekeeper)
