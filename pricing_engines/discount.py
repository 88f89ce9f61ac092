"""
Discount Applier - Apply a tier's percentage discount to its unit price.

    net = base * (100 - pct) / 100     when a discount is present
    net = base                         otherwise

No range checks (catalog validation happens upstream, see
pricing_engines.validation) and no rounding.
"""

from __future__ import annotations

from decimal import Decimal

from pricing_kernel.domain.catalog import PriceBookEntry

_HUNDRED = Decimal("100")


def apply_discount(base: Decimal, discount_pct: Decimal | None) -> Decimal:
    """Return base reduced by discount_pct percent, unrounded."""
    if discount_pct is None:
        return base
    return base * (_HUNDRED - discount_pct) / _HUNDRED


class DiscountApplier:
    """Net unit price of a tier."""

    def apply(self, entry: PriceBookEntry) -> Decimal:
        return apply_discount(entry.unit_price, entry.discount_pct)
