"""Ports -- Read-only catalog access the pricing pipeline depends on.

Any storage that satisfies these protocols can back the engine: the
in-memory catalog (``pricing_kernel.selectors.in_memory``) and the
SQLAlchemy selector (``pricing_kernel.selectors.catalog_selector``) both do.
Implementations return frozen DTOs and never mutate what they read.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from pricing_kernel.domain.catalog import (
    PriceBook,
    PriceBookEntry,
    Product,
    RateCard,
    RateCardItem,
    TaxRule,
)


@runtime_checkable
class ProductReader(Protocol):
    """Fetch a product (with its variants, where known) by id."""

    def get_product(self, product_id: str) -> Product | None:
        ...


@runtime_checkable
class PriceBookReader(Protocol):
    """Fetch price books by id or all books owned by an organization."""

    def get_price_book(self, price_book_id: str) -> PriceBook | None:
        ...

    def find_price_books(self, organization_id: str) -> Sequence[PriceBook]:
        ...


@runtime_checkable
class PriceBookEntryReader(Protocol):
    """Fetch the tiers of a price book for a product, and optionally a variant.

    Returns entries where (product_id matches AND variant_id is null) OR
    (variant_id equals the requested variant).
    """

    def get_price_book_entries(
        self,
        price_book_id: str,
        product_id: str,
        variant_id: str | None = None,
    ) -> Sequence[PriceBookEntry]:
        ...


@runtime_checkable
class TaxRuleReader(Protocol):
    """Fetch all rules of a tax class, active or not."""

    def get_tax_rules(self, tax_class_id: str) -> Sequence[TaxRule]:
        ...


@runtime_checkable
class CatalogReader(
    ProductReader, PriceBookReader, PriceBookEntryReader, TaxRuleReader, Protocol
):
    """Everything PriceQuoteService needs."""


@runtime_checkable
class RateCardReader(Protocol):
    """Fetch rate cards and their items."""

    def get_rate_card(self, rate_card_id: str) -> RateCard | None:
        ...

    def find_rate_cards(self, organization_id: str) -> Sequence[RateCard]:
        ...

    def get_rate_card_items(self, rate_card_id: str) -> Sequence[RateCardItem]:
        ...
