"""
Quote -- Request and result types for pricing a single line.

Responsibility:
    ``PriceQuoteRequest`` is what the caller asks for; ``PriceQuoteResult`` is
    the tagged union the engine answers with: a ``PricedLine`` on success or a
    ``PriceQuoteFailure`` carrying the first hard error.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Quantities are Decimals; floats are rejected at construction.
    - Results are frozen. Money fields on a PricedLine are already rounded
      to the currency's minor units; ``to_dict()`` emits fixed-precision
      decimal strings and never binary floats.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Union

from pricing_kernel.domain.catalog import PriceBasis, ShipTo
from pricing_kernel.domain.values import Money, to_decimal


@dataclass(frozen=True)
class PriceQuoteRequest:
    """A request to price one line."""

    organization_id: str
    product_id: str
    quantity: Decimal
    variant_id: str | None = None
    price_book_id: str | None = None
    unit_id: str | None = None
    as_of: datetime | None = None
    ship_to: ShipTo | None = None
    correlation_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_decimal(self.quantity, "quantity"))


@dataclass(frozen=True)
class AppliedTaxRule:
    """A tax rule as it was applied to a line, in application order."""

    rule_id: str
    name: str
    rate_pct: Decimal
    is_compound: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "name": self.name,
            "rate_pct": format(self.rate_pct, "f"),
            "compound": self.is_compound,
        }


@dataclass(frozen=True)
class PricedLine:
    """Fully resolved line. Successful variant of PriceQuoteResult."""

    product_id: str
    variant_id: str | None
    price_book_id: str
    entry_id: str
    unit_id: str | None
    quantity: Decimal
    basis: PriceBasis
    currency: str
    unit_price: Money
    discount_pct: Decimal | None
    tax_class_id: str | None
    tax_rules: tuple[AppliedTaxRule, ...]
    tax_amount: Money
    effective_rate_pct: Decimal
    line_subtotal: Money
    line_total: Money
    as_of: datetime

    ok: Literal[True] = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize with all money and rate fields as decimal strings."""
        return {
            "ok": True,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "price_book_id": self.price_book_id,
            "entry_id": self.entry_id,
            "unit_id": self.unit_id,
            "quantity": format(self.quantity, "f"),
            "basis": self.basis.value,
            "currency": self.currency,
            "unit_price": self.unit_price.format(),
            "discount_pct": (
                format(self.discount_pct, "f") if self.discount_pct is not None else None
            ),
            "tax": {
                "class_id": self.tax_class_id,
                "rules": [rule.to_dict() for rule in self.tax_rules],
                "tax_amount": self.tax_amount.format(),
                "effective_rate_pct": format(self.effective_rate_pct, "f"),
            },
            "line_subtotal": self.line_subtotal.format(),
            "line_total": self.line_total.format(),
            "as_of": self.as_of.isoformat(),
        }


@dataclass(frozen=True)
class PriceQuoteFailure:
    """Failed variant of PriceQuoteResult. Carries the first hard error."""

    code: str
    kind: str
    message: str

    ok: Literal[False] = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": {"code": self.code, "kind": self.kind, "message": self.message},
        }


PriceQuoteResult = Union[PricedLine, PriceQuoteFailure]
