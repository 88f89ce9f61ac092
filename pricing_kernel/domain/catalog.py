"""
Catalog -- Immutable snapshots of the records the pricing pipeline reads.

Responsibility:
    Frozen DTOs for products, variants, price books, price book entries
    (tiers), tax classes, tax rules, rate cards and ship-to locations, plus
    the half-open validity-window check shared by tiers, tax rules and rate
    card items.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O. Repository adapters
    (in-memory, SQLAlchemy selectors) produce these; engines consume them.

Invariants enforced:
    - Every number is a Decimal; floats are rejected at construction.
    - A price book entry references a product XOR a variant (checked by
      pricing_engines.validation, not here, so invalid rows can still be
      loaded and reported).
    - Validity windows are [valid_from, valid_to): from inclusive, to
      exclusive, each optional.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pricing_kernel.domain.clock import as_utc
from pricing_kernel.domain.values import to_decimal


class PriceBasis(str, Enum):
    """Whether stored prices exclude or include tax."""

    EXCLUSIVE = "EXCLUSIVE"  # Tax added on top of the stored price
    INCLUSIVE = "INCLUSIVE"  # Stored price already contains tax

    @classmethod
    def parse(cls, value: PriceBasis | str | None) -> PriceBasis:
        """Resolve a stored basis value; missing or unknown means EXCLUSIVE."""
        if isinstance(value, PriceBasis):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return cls.EXCLUSIVE
        return cls.EXCLUSIVE


def in_window(
    as_of: datetime,
    valid_from: datetime | None,
    valid_to: datetime | None,
) -> bool:
    """True if as_of lies in [valid_from, valid_to). Open ends are unbounded."""
    t = as_utc(as_of)
    if valid_from is not None and t < as_utc(valid_from):
        return False
    if valid_to is not None and t >= as_utc(valid_to):
        return False
    return True


def _optional_decimal(value: Decimal | int | str | None, field_name: str) -> Decimal | None:
    return None if value is None else to_decimal(value, field_name)


@dataclass(frozen=True)
class Variant:
    """A sellable variant of a product."""

    id: str
    product_id: str
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class Product:
    """
    Product as fetched for a single pricing call.

    ``variants`` is None when the adapter did not load them; an empty tuple
    means the product has no variants.
    """

    id: str
    organization_id: str
    default_unit_id: str | None = None
    tax_class_id: str | None = None
    variants: tuple[Variant, ...] | None = None

    def has_variant(self, variant_id: str) -> bool:
        if self.variants is None:
            return True
        return any(v.id == variant_id for v in self.variants)


@dataclass(frozen=True)
class PriceBook:
    """Currency-scoped collection of price tiers."""

    id: str
    organization_id: str
    currency: str
    price_basis: PriceBasis | str | None = PriceBasis.EXCLUSIVE
    is_active: bool = True
    is_default: bool = False
    created_at: datetime | None = None
    name: str = ""

    @property
    def basis(self) -> PriceBasis:
        return PriceBasis.parse(self.price_basis)


@dataclass(frozen=True)
class PriceBookEntry:
    """
    A single price tier.

    References a product or a variant, optionally bounded by quantity
    (inclusive on both ends) and by a validity window.
    """

    id: str
    price_book_id: str
    unit_price: Decimal
    product_id: str | None = None
    variant_id: str | None = None
    discount_pct: Decimal | None = None
    min_qty: Decimal | None = None
    max_qty: Decimal | None = None
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    unit_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))
        object.__setattr__(self, "discount_pct", _optional_decimal(self.discount_pct, "discount_pct"))
        object.__setattr__(self, "min_qty", _optional_decimal(self.min_qty, "min_qty"))
        object.__setattr__(self, "max_qty", _optional_decimal(self.max_qty, "max_qty"))

    @property
    def tier_floor(self) -> Decimal:
        """min_qty with an unbounded minimum counted as zero."""
        return self.min_qty if self.min_qty is not None else Decimal("0")

    def covers_quantity(self, quantity: Decimal) -> bool:
        if self.min_qty is not None and quantity < self.min_qty:
            return False
        if self.max_qty is not None and quantity > self.max_qty:
            return False
        return True

    def is_valid_at(self, as_of: datetime) -> bool:
        return in_window(as_of, self.valid_from, self.valid_to)


@dataclass(frozen=True)
class TaxRule:
    """One jurisdiction-scoped tax rate inside a tax class."""

    id: str
    tax_class_id: str
    name: str
    rate_pct: Decimal
    country: str | None = None
    region: str | None = None
    postal_pattern: str | None = None
    is_compound: bool = False
    priority: int = 0
    is_active: bool = True
    valid_from: datetime | None = None
    valid_to: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate_pct", to_decimal(self.rate_pct, "rate_pct"))

    def is_effective(self, as_of: datetime) -> bool:
        return self.is_active and in_window(as_of, self.valid_from, self.valid_to)


@dataclass(frozen=True)
class TaxClass:
    """Named bucket of tax rules attached to products."""

    id: str
    organization_id: str
    name: str = ""
    rules: tuple[TaxRule, ...] = ()


@dataclass(frozen=True)
class ShipTo:
    """Destination supplied per request; never persisted."""

    country: str | None = None
    region: str | None = None
    postal: str | None = None


@dataclass(frozen=True)
class RateCard:
    """Currency-scoped list of service rates keyed by user or role."""

    id: str
    organization_id: str
    currency: str
    is_active: bool = True
    is_default: bool = False
    updated_at: datetime | None = None
    name: str = ""


@dataclass(frozen=True)
class RateCardItem:
    """One rate on a rate card. No user and no role means a generic rate."""

    id: str
    rate_card_id: str
    unit_id: str
    unit_price: Decimal
    user_id: str | None = None
    role: str | None = None
    product_id: str | None = None
    valid_from: datetime | None = None
    valid_to: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))

    @property
    def specificity(self) -> int:
        if self.user_id:
            return 2
        if self.role:
            return 1
        return 0
