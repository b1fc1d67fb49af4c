"""
Stock-flow calculator.

Derives the dependent stock lists of a daily ledger from its authoritative
inputs:

    opening + purchases            -> available
    available - transfers          -> remaining (clamped at zero)
    actual count vs remaining      -> reconciliation differences
    reconciliation actual counts   -> final stock

Pure service: no I/O, deterministic, and safe to re-run on unchanged inputs.
"""

from dataclasses import dataclass

from storeledger.core.entities.catalog import Catalog
from storeledger.core.entities.ledger import (
    WEIGHT_PRECISION,
    DailyLedger,
    ProductLine,
    Purchase,
    ReconciliationLine,
    Transfer,
)
from storeledger.core.exceptions import InsufficientStockError

MONEY_PRECISION = 2


@dataclass
class _Bucket:
    pieces: int = 0
    weight: float = 0.0

    @property
    def has_stock(self) -> bool:
        return self.pieces > 0 or self.weight > 0


def _kg(value: float) -> float:
    return round(value, WEIGHT_PRECISION)


def _money(value: float) -> float:
    return round(value, MONEY_PRECISION)


class StockFlowCalculator:
    """
    Computes available, remaining, reconciled and final stock.

    Every derived list is emitted in catalog order and carries no cost
    basis (price, subtotal and VAT fields are zero).
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def _empty_buckets(self) -> dict[str, _Bucket]:
        return {product_type: _Bucket() for product_type in self._catalog.products}

    @staticmethod
    def _emit(buckets: dict[str, _Bucket]) -> list[ProductLine]:
        lines = []
        for product_type, b in buckets.items():
            pieces, weight = max(0, b.pieces), _kg(max(0.0, b.weight))
            if pieces > 0 or weight > 0:
                lines.append(ProductLine.quantity(product_type, pieces, weight))
        return lines

    # Derivations

    def compute_available(
        self,
        opening_stock: list[ProductLine],
        purchases: list[Purchase],
    ) -> list[ProductLine]:
        """Opening stock plus every purchase line, summed per product type."""
        totals = self._empty_buckets()

        lines = list(opening_stock)
        for purchase in purchases:
            lines.extend(purchase.products)

        for line in lines:
            bucket = totals.get(line.product_type)
            if bucket is None:
                continue
            bucket.pieces += line.pieces
            bucket.weight += line.weight

        return self._emit(totals)

    def compute_remaining(
        self,
        available: list[ProductLine],
        transfers: list[Transfer],
    ) -> list[ProductLine]:
        """
        Available stock minus transfers, clamped at zero.

        Weight is always decremented. Pieces are decremented only for lines
        outside the parts categories. A line whose bucket is already empty is
        skipped; such transfers are rejected before they get here.
        """
        remaining = self._empty_buckets()
        for line in available:
            bucket = remaining.get(line.product_type)
            if bucket is not None:
                bucket.pieces = line.pieces
                bucket.weight = line.weight

        for transfer in transfers:
            for line in transfer.products:
                bucket = remaining.get(line.product_type)
                if bucket is None or not bucket.has_stock:
                    continue
                if not self._catalog.is_parts_category(line.category):
                    bucket.pieces -= line.pieces
                bucket.weight -= line.weight

        return self._emit(remaining)

    def compute_reconciliation(
        self,
        remaining: list[ProductLine],
        lines: list[ReconciliationLine],
    ) -> list[ReconciliationLine]:
        """
        Refresh calculated counts from remaining stock and compute differences.

        A line without an actual count takes the calculated value, giving a
        zero difference.
        """
        calculated = {line.product_type: line for line in remaining}
        result = []

        for line in lines:
            current = calculated.get(line.product_type)
            calc_pieces = current.pieces if current else 0
            calc_weight = current.weight if current else 0.0

            actual_pieces = calc_pieces if line.actual_pieces is None else line.actual_pieces
            actual_weight = calc_weight if line.actual_weight is None else line.actual_weight

            result.append(
                line.model_copy(
                    update={
                        "calculated_pieces": calc_pieces,
                        "calculated_weight": calc_weight,
                        "actual_pieces": actual_pieces,
                        "actual_weight": actual_weight,
                        "difference_pieces": actual_pieces - calc_pieces,
                        "difference_weight": _kg(actual_weight - calc_weight),
                    }
                )
            )

        return result

    @staticmethod
    def derive_final_stock(lines: list[ReconciliationLine]) -> list[ProductLine]:
        """One quantity-only line per reconciliation line, zero rows included."""
        return [
            ProductLine.quantity(
                line.product_type,
                line.actual_pieces or 0,
                line.actual_weight or 0.0,
            )
            for line in lines
        ]

    # Pricing

    @staticmethod
    def price_line(line: ProductLine) -> ProductLine:
        """Recompute subtotal, VAT and total from price, weight and VAT %."""
        subtotal = _money(line.price_per_unit * line.weight)
        vat_amount = _money(subtotal * line.vat_percentage / 100)
        return line.model_copy(
            update={
                "subtotal": subtotal,
                "vat_amount": vat_amount,
                "total_cost": _money(subtotal + vat_amount),
            }
        )

    def price_purchase(self, purchase: Purchase) -> Purchase:
        """Price every line and roll the totals up to the purchase."""
        products = [self.price_line(line) for line in purchase.products]
        subtotal = _money(sum(p.subtotal for p in products))
        vat = _money(sum(p.vat_amount for p in products))
        return purchase.model_copy(
            update={
                "products": products,
                "subtotal": subtotal,
                "total_vat_amount": vat,
                "total_cost": _money(subtotal + vat),
            }
        )

    # Validation

    @staticmethod
    def check_transfer(available: list[ProductLine], transfer: Transfer) -> None:
        """
        Reject a transfer that would overdraw available stock.

        Raises InsufficientStockError on the first offending line; nothing
        is applied in that case.
        """
        stock = {line.product_type: line for line in available}

        for line in transfer.products:
            current = stock.get(line.product_type)
            pieces = current.pieces if current else 0
            weight = current.weight if current else 0.0

            reason = None
            if pieces == 0:
                reason = (
                    f"Cannot transfer {line.product_type}: No available stock. "
                    f"Available: {pieces} pieces."
                )
            elif line.pieces > pieces:
                reason = (
                    f"Cannot transfer {line.pieces} pieces of {line.product_type}: "
                    f"Only {pieces} pieces available."
                )
            elif line.weight > weight:
                reason = (
                    f"Cannot transfer {line.weight} kg of {line.product_type}: "
                    f"Only {weight} kg available."
                )

            if reason:
                raise InsufficientStockError(
                    product_type=line.product_type,
                    available_pieces=pieces,
                    available_weight=weight,
                    requested_pieces=line.pieces,
                    requested_weight=line.weight,
                    reason=reason,
                )

    # Whole-ledger helpers

    def refresh_stock(self, ledger: DailyLedger) -> DailyLedger:
        """Recompute available and remaining stock in place."""
        ledger.available_stock = self.compute_available(ledger.opening_stock, ledger.purchases)
        ledger.remaining_stock = self.compute_remaining(ledger.available_stock, ledger.transfers)
        return ledger

    def apply_reconciliation(self, ledger: DailyLedger) -> DailyLedger:
        """Recompute reconciliation lines and the final stock derived from them."""
        ledger.reconciliation = self.compute_reconciliation(
            ledger.remaining_stock, ledger.reconciliation
        )
        ledger.final_stock = self.derive_final_stock(ledger.reconciliation)
        return ledger

    def recalculate(self, ledger: DailyLedger) -> DailyLedger:
        """Full re-derivation from authoritative inputs."""
        self.refresh_stock(ledger)
        if ledger.reconciliation:
            self.apply_reconciliation(ledger)
        return ledger
