"""Product type and shop lookup endpoints."""

from fastapi import APIRouter, Depends

from storeledger.api.dependencies import ActorDep, get_catalog
from storeledger.application.dto.responses import CatalogEntryResponse
from storeledger.core.entities.catalog import Catalog

router = APIRouter(prefix="/api/ledgers", tags=["catalog"])


@router.get("/product-types", response_model=list[CatalogEntryResponse])
async def list_product_types(
    actor: ActorDep,
    catalog: Catalog = Depends(get_catalog),
) -> list[CatalogEntryResponse]:
    """Product type codes with display names, in stock-list order."""
    return [
        CatalogEntryResponse(value=code, label=name) for code, name in catalog.products.items()
    ]


@router.get("/shop-types", response_model=list[CatalogEntryResponse])
async def list_shop_types(
    actor: ActorDep,
    catalog: Catalog = Depends(get_catalog),
) -> list[CatalogEntryResponse]:
    """Shop codes with display names."""
    return [CatalogEntryResponse(value=code, label=name) for code, name in catalog.shops.items()]
