"""Product and shop catalog."""

from pydantic import BaseModel, ConfigDict, Field

from storeledger.config.settings import CatalogSettings
from storeledger.core.exceptions import UnknownCatalogEntryError


class Catalog(BaseModel):
    """Fixed product/shop enumerations, injected wherever stock is derived or validated.

    Dict order is significant: derived stock lists follow the product order.
    """

    model_config = ConfigDict(frozen=True)

    products: dict[str, str] = Field(default_factory=dict)
    shops: dict[str, str] = Field(default_factory=dict)
    parts_categories: frozenset[str] = frozenset()

    @property
    def product_types(self) -> list[str]:
        return list(self.products)

    @property
    def shop_codes(self) -> list[str]:
        return list(self.shops)

    def is_parts_category(self, category: str | None) -> bool:
        """Parts are tracked by weight only; their pieces are never decremented."""
        return category is not None and category in self.parts_categories

    def require_product(self, product_type: str) -> None:
        if product_type not in self.products:
            raise UnknownCatalogEntryError("product_type", product_type, self.product_types)

    def require_shop(self, shop: str) -> None:
        if shop not in self.shops:
            raise UnknownCatalogEntryError("shop", shop, self.shop_codes)

    def require_category(self, category: str | None) -> None:
        if category is not None and category not in self.parts_categories:
            raise UnknownCatalogEntryError(
                "category", category, sorted(self.parts_categories)
            )


def _from_catalog_settings(settings: CatalogSettings) -> Catalog:
    return Catalog(
        products=settings.products,
        shops=settings.shops,
        parts_categories=frozenset(settings.parts_categories),
    )


# Built-in catalog, ignoring any environment overrides
DEFAULT_CATALOG = _from_catalog_settings(CatalogSettings.model_construct())


def catalog_from_settings() -> Catalog:
    """Build the catalog from application settings."""
    from storeledger.config import get_settings

    return _from_catalog_settings(get_settings().catalog)
