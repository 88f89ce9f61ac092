"""
Pytest fixtures for the pricing engine test suite.

Provides:
- Structured logging setup and a ``captured_logs`` fixture
- A deterministic clock
- Catalog builders (in-memory) for the common pricing scenarios
- An in-memory SQLite session for selector tests
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from pricing_config import PricingConfig
from pricing_kernel.domain.catalog import (
    PriceBasis,
    PriceBook,
    PriceBookEntry,
    Product,
    ShipTo,
    TaxRule,
    Variant,
)
from pricing_kernel.domain.clock import DeterministicClock
from pricing_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from pricing_kernel.selectors.in_memory import InMemoryCatalog
from pricing_services.quote_service import PriceQuoteService

ORG_ID = "org-acme"
OTHER_ORG_ID = "org-globex"
AS_OF = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture pricing_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, quote_service):
            quote_service.quote(request)
            logs = captured_logs()
            assert any(r["message"] == "price_quote_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("pricing_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time and config
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(AS_OF)


@pytest.fixture
def pricing_config() -> PricingConfig:
    return PricingConfig()


# =============================================================================
# Catalog builders
# =============================================================================


def make_book(
    book_id: str = "pb-usd",
    *,
    currency: str = "USD",
    basis: PriceBasis | str | None = PriceBasis.EXCLUSIVE,
    organization_id: str = ORG_ID,
    is_active: bool = True,
    is_default: bool = True,
    created_at: datetime | None = None,
) -> PriceBook:
    return PriceBook(
        id=book_id,
        organization_id=organization_id,
        currency=currency,
        price_basis=basis,
        is_active=is_active,
        is_default=is_default,
        created_at=created_at or datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def make_entry(
    entry_id: str,
    unit_price: str,
    *,
    price_book_id: str = "pb-usd",
    product_id: str | None = "prod-widget",
    variant_id: str | None = None,
    min_qty: str | None = None,
    max_qty: str | None = None,
    discount_pct: str | None = None,
    valid_from: datetime | None = None,
    valid_to: datetime | None = None,
    unit_id: str | None = None,
) -> PriceBookEntry:
    return PriceBookEntry(
        id=entry_id,
        price_book_id=price_book_id,
        unit_price=Decimal(unit_price),
        product_id=product_id,
        variant_id=variant_id,
        discount_pct=Decimal(discount_pct) if discount_pct is not None else None,
        min_qty=Decimal(min_qty) if min_qty is not None else None,
        max_qty=Decimal(max_qty) if max_qty is not None else None,
        valid_from=valid_from,
        valid_to=valid_to,
        unit_id=unit_id,
    )


def make_rule(
    rule_id: str,
    rate_pct: str,
    *,
    tax_class_id: str = "tc-standard",
    name: str | None = None,
    country: str | None = None,
    region: str | None = None,
    postal_pattern: str | None = None,
    is_compound: bool = False,
    priority: int = 0,
    is_active: bool = True,
    valid_from: datetime | None = None,
    valid_to: datetime | None = None,
) -> TaxRule:
    return TaxRule(
        id=rule_id,
        tax_class_id=tax_class_id,
        name=name or rule_id,
        rate_pct=Decimal(rate_pct),
        country=country,
        region=region,
        postal_pattern=postal_pattern,
        is_compound=is_compound,
        priority=priority,
        is_active=is_active,
        valid_from=valid_from,
        valid_to=valid_to,
    )


def make_product(
    product_id: str = "prod-widget",
    *,
    organization_id: str = ORG_ID,
    tax_class_id: str | None = "tc-standard",
    default_unit_id: str | None = "unit-each",
    variant_ids: tuple[str, ...] | None = ("var-red",),
) -> Product:
    variants = None
    if variant_ids is not None:
        variants = tuple(Variant(id=v, product_id=product_id) for v in variant_ids)
    return Product(
        id=product_id,
        organization_id=organization_id,
        default_unit_id=default_unit_id,
        tax_class_id=tax_class_id,
        variants=variants,
    )


@pytest.fixture
def tiered_catalog() -> InMemoryCatalog:
    """
    Widget priced in one USD book with three tiers (1 / 10 / 50) and a
    single 10% sales tax rule for the US.
    """
    return InMemoryCatalog(
        products=[make_product()],
        price_books=[make_book()],
        entries=[
            make_entry("e-001", "12.00", min_qty="1", max_qty="9"),
            make_entry("e-010", "11.00", min_qty="10", max_qty="49"),
            make_entry("e-050", "9.00", min_qty="50"),
        ],
        tax_rules=[make_rule("r-us", "10", country="US")],
    )


@pytest.fixture
def quote_service(tiered_catalog, deterministic_clock, pricing_config) -> PriceQuoteService:
    return PriceQuoteService(tiered_catalog, clock=deterministic_clock, config=pricing_config)


@pytest.fixture
def us_ship_to() -> ShipTo:
    return ShipTo(country="US", region="NY", postal="10001")
