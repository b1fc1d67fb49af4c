"""API tests for ledger endpoints."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from storeledger.api.dependencies import (
    get_finalize_ledger_use_case,
    get_get_ledger_use_case,
    get_get_or_create_ledger_use_case,
    get_ledger_reports_use_case,
    get_manage_purchases_use_case,
    get_manage_transfers_use_case,
    get_recalculate_ledger_use_case,
    get_save_reconciliation_use_case,
    get_unfinalize_ledger_use_case,
    get_upsert_ledger_use_case,
)
from storeledger.api.main import app
from storeledger.api.security import create_access_token
from storeledger.application.use_cases import (
    FinalizeLedgerUseCase,
    GetLedgerUseCase,
    GetOrCreateLedgerUseCase,
    LedgerReportsUseCase,
    ManagePurchasesUseCase,
    ManageTransfersUseCase,
    RecalculateLedgerUseCase,
    SaveReconciliationUseCase,
    UnfinalizeLedgerUseCase,
    UpsertLedgerUseCase,
)
from storeledger.core.entities.ledger import LedgerStatus

LAMB = "KK_KENYA_LAMB"

USE_CASES = {
    get_get_or_create_ledger_use_case: GetOrCreateLedgerUseCase,
    get_get_ledger_use_case: GetLedgerUseCase,
    get_upsert_ledger_use_case: UpsertLedgerUseCase,
    get_manage_purchases_use_case: ManagePurchasesUseCase,
    get_manage_transfers_use_case: ManageTransfersUseCase,
    get_save_reconciliation_use_case: SaveReconciliationUseCase,
    get_finalize_ledger_use_case: FinalizeLedgerUseCase,
    get_unfinalize_ledger_use_case: UnfinalizeLedgerUseCase,
    get_recalculate_ledger_use_case: RecalculateLedgerUseCase,
    get_ledger_reports_use_case: LedgerReportsUseCase,
}


def auth(user_id="keeper-1", role="storekeeper", **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, role, **kwargs)}"}


def provide(use_case_cls, store, catalog, locks):
    def provider():
        return use_case_cls(ledger_store=store, catalog=catalog, locks=locks)

    return provider


@pytest.fixture
async def client(mock_ledger_store: AsyncMock, catalog, locks):
    for provider, use_case_cls in USE_CASES.items():
        app.dependency_overrides[provider] = provide(
            use_case_cls, mock_ledger_store, catalog, locks
        )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for provider in USE_CASES:
        app.dependency_overrides.pop(provider, None)


class TestAuthentication:
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/ledgers/today")
        assert response.status_code == 401
        assert response.json()["error_code"] == "NOT_AUTHENTICATED"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/ledgers/today", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    async def test_unverified_storekeeper(self, client: AsyncClient):
        response = await client.get("/api/ledgers/today", headers=auth(verified=False))
        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"

    async def test_disabled_account(self, client: AsyncClient):
        response = await client.get("/api/ledgers/today", headers=auth(disabled=True))
        assert response.status_code == 403


class TestLookup:
    async def test_today_created_on_first_access(
        self, client: AsyncClient, mock_ledger_store
    ):
        mock_ledger_store.get_by_date.return_value = None

        response = await client.get("/api/ledgers/today", headers=auth())

        assert response.status_code == 200
        body = response.json()
        assert body["ledger_date"] == date.today().isoformat()
        assert body["status"] == "DRAFT"
        assert body["id"] == 99

    async def test_by_date(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.get_by_date.return_value = stocked_ledger

        response = await client.get("/api/ledgers/date/2024-03-10", headers=auth())

        assert response.status_code == 200
        assert response.json()["available_stock"] == [
            {
                "product_type": LAMB,
                "category": None,
                "pieces": 15,
                "weight": 30.0,
                "price_per_unit": 0.0,
                "subtotal": 0.0,
                "vat_percentage": 0.0,
                "vat_amount": 0.0,
                "total_cost": 0.0,
            }
        ]

    async def test_by_date_invalid(self, client: AsyncClient):
        response = await client.get("/api/ledgers/date/10-03-2024", headers=auth())
        assert response.status_code == 422

    async def test_by_id_not_found(self, client: AsyncClient, mock_ledger_store):
        mock_ledger_store.get.return_value = None

        response = await client.get("/api/ledgers/404", headers=auth())

        assert response.status_code == 404
        assert response.json()["error_code"] == "LEDGER_NOT_FOUND"

    async def test_static_paths_not_taken_as_ids(self, client: AsyncClient, mock_ledger_store):
        mock_ledger_store.list_between.return_value = []
        mock_ledger_store.get_by_date.return_value = None

        for path in (
            "/api/ledgers/history",
            "/api/ledgers/stats/summary",
            "/api/ledgers/product-types",
            "/api/ledgers/shop-types",
        ):
            response = await client.get(path, headers=auth())
            assert response.status_code == 200, path

        mock_ledger_store.get.assert_not_called()


class TestUpsert:
    async def test_create(self, client: AsyncClient, mock_ledger_store):
        mock_ledger_store.get_by_date.return_value = None

        response = await client.post(
            "/api/ledgers/",
            headers=auth(),
            json={
                "date": "2024-03-10",
                "opening_stock": [{"product_type": LAMB, "pieces": 3, "weight": 6.0}],
                "notes": "opening count",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["notes"] == "opening count"
        assert body["created_by"] == "keeper-1"

    async def test_missing_date(self, client: AsyncClient):
        response = await client.post("/api/ledgers/", headers=auth(), json={"notes": "x"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestPurchases:
    async def test_add(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/purchases",
            headers=auth(),
            json={
                "supplier": "Al Noor",
                "products": [
                    {
                        "product_type": LAMB,
                        "pieces": 1,
                        "weight": 2.0,
                        "price_per_unit": 20,
                        "vat_percentage": 5,
                    }
                ],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["purchases"][-1]["total_cost"] == 42.0
        assert body["available_stock"][0]["pieces"] == 16

    async def test_unknown_product(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/purchases",
            headers=auth(),
            json={"supplier": "Al Noor", "products": [{"product_type": "CHICKEN", "pieces": 1}]},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_CATALOG_ENTRY"

    async def test_empty_products(self, client: AsyncClient):
        response = await client.post(
            "/api/ledgers/1/purchases",
            headers=auth(),
            json={"supplier": "Al Noor", "products": []},
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["weight", "price_per_unit"])
    async def test_non_finite_number_rejected(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger, field
    ):
        mock_ledger_store.get.return_value = stocked_ledger
        body = (
            '{"supplier": "Al Noor", "products": '
            f'[{{"product_type": "{LAMB}", "pieces": 1, "{field}": 1e309}}]}}'
        )

        response = await client.post(
            "/api/ledgers/1/purchases",
            headers={**auth(), "Content-Type": "application/json"},
            content=body,
        )

        assert response.status_code == 422
        mock_ledger_store.save.assert_not_called()

    async def test_weight_kept_to_the_gram(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger
    ):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/purchases",
            headers=auth(),
            json={
                "supplier": "Al Noor",
                "products": [{"product_type": LAMB, "pieces": 1, "weight": 2.0004}],
            },
        )

        assert response.status_code == 201
        assert response.json()["purchases"][-1]["products"][0]["weight"] == 2.0

    async def test_delete_unknown(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.delete("/api/ledgers/1/purchases/missing", headers=auth())

        assert response.status_code == 404
        assert response.json()["error_code"] == "PURCHASE_NOT_FOUND"


class TestTransfers:
    async def test_add(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/transfers",
            headers=auth(),
            json={
                "shop": "SHOP_47",
                "products": [{"product_type": LAMB, "pieces": 5, "weight": 10.0}],
            },
        )

        assert response.status_code == 201
        assert response.json()["remaining_stock"][0]["pieces"] == 10

    async def test_insufficient_stock(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger
    ):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/transfers",
            headers=auth(),
            json={
                "shop": "SHOP_47",
                "products": [{"product_type": LAMB, "pieces": 20, "weight": 10.0}],
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INSUFFICIENT_STOCK"
        assert body["message"] == (
            "Cannot transfer 20 pieces of KK_KENYA_LAMB: Only 15 pieces available."
        )
        mock_ledger_store.save.assert_not_called()

    async def test_finalized(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        stocked_ledger.status = LedgerStatus.FINALIZED
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.post(
            "/api/ledgers/1/transfers",
            headers=auth(),
            json={"shop": "SHOP_47", "products": [{"product_type": LAMB, "pieces": 1}]},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "LEDGER_FINALIZED"


class TestLifecycle:
    async def test_reconcile_then_finalize(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger
    ):
        mock_ledger_store.get.return_value = stocked_ledger
        mock_ledger_store.get_by_date.return_value = None

        response = await client.put(
            "/api/ledgers/1/reconciliation",
            headers=auth(),
            json={
                "reconciliation": [
                    {"product_type": LAMB, "actual_pieces": 14, "actual_weight": 29.5}
                ]
            },
        )
        assert response.status_code == 200
        assert response.json()["status"] == "RECONCILED"
        assert response.json()["reconciliation"][0]["difference_weight"] == -0.5

        def save_many(ledgers):
            for ledger in ledgers:
                ledger.id = ledger.id or 2
            return ledgers

        mock_ledger_store.save_many.side_effect = save_many
        response = await client.put("/api/ledgers/1/finalize", headers=auth())

        assert response.status_code == 200
        body = response.json()
        assert body["ledger"]["status"] == "FINALIZED"
        assert body["next_day"]["ledger_date"] == "2024-03-11"
        assert body["next_day"]["opening_stock"][0]["pieces"] == 14

    async def test_finalize_requires_reconciliation(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger
    ):
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.put("/api/ledgers/1/finalize", headers=auth())

        assert response.status_code == 400
        assert response.json()["message"] == "Inventory must be reconciled before finalizing"

    async def test_unfinalize_admin_only(
        self, client: AsyncClient, mock_ledger_store, stocked_ledger
    ):
        stocked_ledger.status = LedgerStatus.FINALIZED
        mock_ledger_store.get.return_value = stocked_ledger

        denied = await client.post("/api/ledgers/1/unfinalize", headers=auth())
        assert denied.status_code == 403

        allowed = await client.post(
            "/api/ledgers/1/unfinalize", headers=auth("admin-1", "admin")
        )
        assert allowed.status_code == 200
        assert allowed.json()["status"] == "DRAFT"

    async def test_recalculate(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        stocked_ledger.available_stock = []
        mock_ledger_store.get.return_value = stocked_ledger

        response = await client.put("/api/ledgers/1/recalculate", headers=auth())

        assert response.status_code == 200
        assert response.json()["available_stock"][0]["weight"] == 30.0


class TestReports:
    async def test_history(self, client: AsyncClient, mock_ledger_store, stocked_ledger):
        mock_ledger_store.list_between.return_value = [stocked_ledger]

        response = await client.get("/api/ledgers/history?days=7", headers=auth())

        assert response.status_code == 200
        assert [l["ledger_date"] for l in response.json()] == ["2024-03-10"]
        assert mock_ledger_store.list_between.await_args.kwargs["limit"] == 8

    async def test_history_days_bounds(self, client: AsyncClient):
        response = await client.get("/api/ledgers/history?days=0", headers=auth())
        assert response.status_code == 422

    async def test_summary_not_started(self, client: AsyncClient, mock_ledger_store):
        mock_ledger_store.get_by_date.return_value = None

        response = await client.get(
            "/api/ledgers/stats/summary?date=2024-03-10", headers=auth()
        )

        assert response.status_code == 200
        assert response.json()["today_status"] == "NOT_STARTED"


class TestCatalog:
    async def test_product_types_in_order(self, client: AsyncClient):
        response = await client.get("/api/ledgers/product-types", headers=auth())

        assert response.status_code == 200
        body = response.json()
        assert body[0] == {"value": LAMB, "label": "KK (Kenya Lamb)"}
        assert len(body) == 8

    async def test_shop_types(self, client: AsyncClient):
        response = await client.get("/api/ledgers/shop-types", headers=auth())

        assert [s["value"] for s in response.json()] == ["SHOP_47", "SHOP_43", "SHOP_59"]

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/ledgers/shop-types")
        assert response.status_code == 401
