"""
Pricing kernel domain layer -- pure value objects, DTOs and ports.

No I/O, no ORM imports. Everything here is importable by engines,
services and adapters alike.
"""

from pricing_kernel.domain.catalog import (
    PriceBasis,
    PriceBook,
    PriceBookEntry,
    Product,
    RateCard,
    RateCardItem,
    ShipTo,
    TaxClass,
    TaxRule,
    Variant,
    in_window,
)
from pricing_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from pricing_kernel.domain.ports import (
    CatalogReader,
    PriceBookEntryReader,
    PriceBookReader,
    ProductReader,
    RateCardReader,
    TaxRuleReader,
)
from pricing_kernel.domain.quote import (
    AppliedTaxRule,
    PricedLine,
    PriceQuoteFailure,
    PriceQuoteRequest,
    PriceQuoteResult,
)
from pricing_kernel.domain.values import Currency, Money

__all__ = [
    "AppliedTaxRule",
    "CatalogReader",
    "Clock",
    "Currency",
    "DeterministicClock",
    "Money",
    "PriceBasis",
    "PriceBook",
    "PriceBookEntry",
    "PriceBookEntryReader",
    "PriceBookReader",
    "PricedLine",
    "PriceQuoteFailure",
    "PriceQuoteRequest",
    "PriceQuoteResult",
    "Product",
    "ProductReader",
    "RateCard",
    "RateCardItem",
    "RateCardReader",
    "ShipTo",
    "SystemClock",
    "TaxClass",
    "TaxRule",
    "TaxRuleReader",
    "Variant",
    "in_window",
]
