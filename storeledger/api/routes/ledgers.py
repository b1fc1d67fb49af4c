"""Daily ledger endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status

from storeledger.api.dependencies import (
    ActorDep,
    get_finalize_ledger_use_case,
    get_get_ledger_use_case,
    get_get_or_create_ledger_use_case,
    get_manage_purchases_use_case,
    get_manage_transfers_use_case,
    get_recalculate_ledger_use_case,
    get_save_reconciliation_use_case,
    get_unfinalize_ledger_use_case,
    get_upsert_ledger_use_case,
)
from storeledger.application.dto.requests import (
    CreatePurchaseRequest,
    CreateTransferRequest,
    SaveReconciliationRequest,
    UpdatePurchaseRequest,
    UpdateTransferRequest,
    UpsertLedgerRequest,
)
from storeledger.application.dto.responses import (
    ErrorResponse,
    FinalizeLedgerResponse,
    LedgerResponse,
)
from storeledger.application.use_cases import (
    FinalizeLedgerUseCase,
    GetLedgerUseCase,
    GetOrCreateLedgerUseCase,
    ManagePurchasesUseCase,
    ManageTransfersUseCase,
    RecalculateLedgerUseCase,
    SaveReconciliationUseCase,
    UnfinalizeLedgerUseCase,
    UpsertLedgerUseCase,
)

router = APIRouter(
    prefix="/api/ledgers",
    tags=["ledgers"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)

_NOT_FOUND = {404: {"model": ErrorResponse}}
_REJECTED = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


# Lookup


@router.get("/today", response_model=LedgerResponse)
async def get_today(
    actor: ActorDep,
    use_case: GetOrCreateLedgerUseCase = Depends(get_get_or_create_ledger_use_case),
) -> LedgerResponse:
    """Today's ledger, created on first access."""
    ledger = await use_case.execute(date.today(), actor)
    return use_case.to_response(ledger)


@router.get("/date/{ledger_date}", response_model=LedgerResponse)
async def get_by_date(
    ledger_date: date,
    actor: ActorDep,
    use_case: GetOrCreateLedgerUseCase = Depends(get_get_or_create_ledger_use_case),
) -> LedgerResponse:
    """Ledger of a date (YYYY-MM-DD), created on first access."""
    ledger = await use_case.execute(ledger_date, actor)
    return use_case.to_response(ledger)


@router.get("/{ledger_id}", response_model=LedgerResponse, responses=_NOT_FOUND)
async def get_ledger(
    ledger_id: int,
    actor: ActorDep,
    use_case: GetLedgerUseCase = Depends(get_get_ledger_use_case),
) -> LedgerResponse:
    """Ledger by id."""
    ledger = await use_case.execute(ledger_id)
    return use_case.to_response(ledger)


@router.post("/", response_model=LedgerResponse, responses={400: {"model": ErrorResponse}})
async def upsert_ledger(
    request: UpsertLedgerRequest,
    actor: ActorDep,
    use_case: UpsertLedgerUseCase = Depends(get_upsert_ledger_use_case),
) -> LedgerResponse:
    """Create or update the ledger of `date` (opening stock, notes, shop stock)."""
    ledger = await use_case.execute(request, actor)
    return use_case.to_response(ledger)


# Purchases


@router.post(
    "/{ledger_id}/purchases",
    response_model=LedgerResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTED,
)
async def add_purchase(
    ledger_id: int,
    request: CreatePurchaseRequest,
    actor: ActorDep,
    use_case: ManagePurchasesUseCase = Depends(get_manage_purchases_use_case),
) -> LedgerResponse:
    """Record a supplier purchase."""
    ledger = await use_case.add(ledger_id, request, actor)
    return use_case.to_response(ledger)


@router.put(
    "/{ledger_id}/purchases/{purchase_id}",
    response_model=LedgerResponse,
    responses=_REJECTED,
)
async def update_purchase(
    ledger_id: int,
    purchase_id: str,
    request: UpdatePurchaseRequest,
    actor: ActorDep,
    use_case: ManagePurchasesUseCase = Depends(get_manage_purchases_use_case),
) -> LedgerResponse:
    """Replace a purchase."""
    ledger = await use_case.update(ledger_id, purchase_id, request, actor)
    return use_case.to_response(ledger)


@router.delete(
    "/{ledger_id}/purchases/{purchase_id}",
    response_model=LedgerResponse,
    responses=_REJECTED,
)
async def delete_purchase(
    ledger_id: int,
    purchase_id: str,
    actor: ActorDep,
    use_case: ManagePurchasesUseCase = Depends(get_manage_purchases_use_case),
) -> LedgerResponse:
    """Remove a purchase."""
    ledger = await use_case.delete(ledger_id, purchase_id, actor)
    return use_case.to_response(ledger)


# Transfers


@router.post(
    "/{ledger_id}/transfers",
    response_model=LedgerResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTED,
)
async def add_transfer(
    ledger_id: int,
    request: CreateTransferRequest,
    actor: ActorDep,
    use_case: ManageTransfersUseCase = Depends(get_manage_transfers_use_case),
) -> LedgerResponse:
    """Record a transfer to a shop; rejected if it exceeds available stock."""
    ledger = await use_case.add(ledger_id, request, actor)
    return use_case.to_response(ledger)


@router.put(
    "/{ledger_id}/transfers/{transfer_id}",
    response_model=LedgerResponse,
    responses=_REJECTED,
)
async def update_transfer(
    ledger_id: int,
    transfer_id: str,
    request: UpdateTransferRequest,
    actor: ActorDep,
    use_case: ManageTransfersUseCase = Depends(get_manage_transfers_use_case),
) -> LedgerResponse:
    """Replace a transfer."""
    ledger = await use_case.update(ledger_id, transfer_id, request, actor)
    return use_case.to_response(ledger)


@router.delete(
    "/{ledger_id}/transfers/{transfer_id}",
    response_model=LedgerResponse,
    responses=_REJECTED,
)
async def delete_transfer(
    ledger_id: int,
    transfer_id: str,
    actor: ActorDep,
    use_case: ManageTransfersUseCase = Depends(get_manage_transfers_use_case),
) -> LedgerResponse:
    """Remove a transfer."""
    ledger = await use_case.delete(ledger_id, transfer_id, actor)
    return use_case.to_response(ledger)


# Lifecycle


@router.put("/{ledger_id}/reconciliation", response_model=LedgerResponse, responses=_REJECTED)
async def save_reconciliation(
    ledger_id: int,
    request: SaveReconciliationRequest,
    actor: ActorDep,
    use_case: SaveReconciliationUseCase = Depends(get_save_reconciliation_use_case),
) -> LedgerResponse:
    """Save the physical count; the ledger becomes RECONCILED."""
    ledger = await use_case.execute(ledger_id, request, actor)
    return use_case.to_response(ledger)


@router.put("/{ledger_id}/finalize", response_model=FinalizeLedgerResponse, responses=_REJECTED)
async def finalize_ledger(
    ledger_id: int,
    actor: ActorDep,
    use_case: FinalizeLedgerUseCase = Depends(get_finalize_ledger_use_case),
) -> FinalizeLedgerResponse:
    """Finalize a reconciled ledger and carry its final stock into the next day."""
    result = await use_case.execute(ledger_id, actor)
    return use_case.to_finalize_response(result)


@router.post("/{ledger_id}/unfinalize", response_model=LedgerResponse, responses=_REJECTED)
async def unfinalize_ledger(
    ledger_id: int,
    actor: ActorDep,
    use_case: UnfinalizeLedgerUseCase = Depends(get_unfinalize_ledger_use_case),
) -> LedgerResponse:
    """Return a finalized ledger to DRAFT (admin only)."""
    ledger = await use_case.execute(ledger_id, actor)
    return use_case.to_response(ledger)


@router.put("/{ledger_id}/recalculate", response_model=LedgerResponse, responses=_REJECTED)
async def recalculate_ledger(
    ledger_id: int,
    actor: ActorDep,
    use_case: RecalculateLedgerUseCase = Depends(get_recalculate_ledger_use_case),
) -> LedgerResponse:
    """Re-derive all stock lists from the recorded inputs."""
    ledger = await use_case.execute(ledger_id, actor)
    return use_case.to_response(ledger)
