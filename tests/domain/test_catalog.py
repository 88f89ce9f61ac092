"""
Tests for catalog DTOs and quote result types.

Covers:
- Half-open validity windows
- Price basis parsing (missing / unknown => EXCLUSIVE)
- Decimal coercion on entries and rules
- Result serialization as decimal strings
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pricing_kernel.domain.catalog import (
    PriceBasis,
    PriceBook,
    PriceBookEntry,
    Product,
    RateCardItem,
    Variant,
    in_window,
)
from pricing_kernel.domain.quote import (
    AppliedTaxRule,
    PricedLine,
    PriceQuoteFailure,
    PriceQuoteRequest,
)
from pricing_kernel.domain.values import Money

JAN = datetime(2025, 1, 1, tzinfo=timezone.utc)
FEB = datetime(2025, 2, 1, tzinfo=timezone.utc)


class TestInWindow:

    def test_open_window(self):
        assert in_window(JAN, None, None)

    def test_from_is_inclusive(self):
        assert in_window(JAN, JAN, FEB)

    def test_to_is_exclusive(self):
        assert not in_window(FEB, JAN, FEB)

    def test_before_from(self):
        assert not in_window(datetime(2024, 12, 31, tzinfo=timezone.utc), JAN, None)

    def test_naive_bounds_are_utc(self):
        assert in_window(JAN, datetime(2025, 1, 1), datetime(2025, 1, 2))


class TestPriceBasis:

    @pytest.mark.parametrize("raw,expected", [
        ("EXCLUSIVE", PriceBasis.EXCLUSIVE),
        ("INCLUSIVE", PriceBasis.INCLUSIVE),
        ("inclusive", PriceBasis.INCLUSIVE),
        (None, PriceBasis.EXCLUSIVE),
        ("GROSS", PriceBasis.EXCLUSIVE),
        (PriceBasis.INCLUSIVE, PriceBasis.INCLUSIVE),
    ])
    def test_parse(self, raw, expected):
        assert PriceBasis.parse(raw) is expected

    def test_book_basis_property(self):
        book = PriceBook(id="pb", organization_id="o", currency="EUR", price_basis=None)
        assert book.basis is PriceBasis.EXCLUSIVE


class TestPriceBookEntry:

    def test_numbers_coerced_to_decimal(self):
        entry = PriceBookEntry(
            id="e", price_book_id="pb", unit_price="12.50", product_id="p",
            min_qty=10, discount_pct="5",
        )
        assert entry.unit_price == Decimal("12.50")
        assert entry.min_qty == Decimal("10")
        assert entry.discount_pct == Decimal("5")

    def test_float_price_rejected(self):
        with pytest.raises(TypeError):
            PriceBookEntry(id="e", price_book_id="pb", unit_price=12.5, product_id="p")

    def test_quantity_bounds_inclusive(self):
        entry = PriceBookEntry(
            id="e", price_book_id="pb", unit_price="1", product_id="p",
            min_qty="10", max_qty="49",
        )
        assert entry.covers_quantity(Decimal("10"))
        assert entry.covers_quantity(Decimal("49"))
        assert not entry.covers_quantity(Decimal("9"))
        assert not entry.covers_quantity(Decimal("50"))

    def test_tier_floor_defaults_to_zero(self):
        entry = PriceBookEntry(id="e", price_book_id="pb", unit_price="1", product_id="p")
        assert entry.tier_floor == Decimal("0")

    def test_frozen(self):
        entry = PriceBookEntry(id="e", price_book_id="pb", unit_price="1", product_id="p")
        with pytest.raises(FrozenInstanceError):
            entry.unit_price = Decimal("2")


class TestProductVariants:

    def test_unloaded_variants_accept_any(self):
        product = Product(id="p", organization_id="o", variants=None)
        assert product.has_variant("anything")

    def test_loaded_variants_checked(self):
        product = Product(id="p", organization_id="o", variants=(Variant(id="v1", product_id="p"),))
        assert product.has_variant("v1")
        assert not product.has_variant("v2")

    def test_variant_attributes_read_only(self):
        variant = Variant(id="v", product_id="p", attributes={"size": "L"})
        with pytest.raises(TypeError):
            variant.attributes["size"] = "XL"


class TestRateCardItem:

    @pytest.mark.parametrize("user_id,role,score", [
        ("u1", None, 2),
        ("u1", "ADMIN", 2),
        (None, "ADMIN", 1),
        (None, None, 0),
    ])
    def test_specificity(self, user_id, role, score):
        item = RateCardItem(
            id="i", rate_card_id="rc", unit_id="hr", unit_price="100",
            user_id=user_id, role=role,
        )
        assert item.specificity == score


class TestQuoteTypes:

    def test_request_rejects_float_quantity(self):
        with pytest.raises(TypeError):
            PriceQuoteRequest(organization_id="o", product_id="p", quantity=2.5)

    def test_request_coerces_quantity(self):
        req = PriceQuoteRequest(organization_id="o", product_id="p", quantity="25")
        assert req.quantity == Decimal("25")

    def test_priced_line_to_dict_uses_strings(self):
        line = PricedLine(
            product_id="p",
            variant_id=None,
            price_book_id="pb",
            entry_id="e",
            unit_id="each",
            quantity=Decimal("25"),
            basis=PriceBasis.EXCLUSIVE,
            currency="USD",
            unit_price=Money.of("11.00", "USD"),
            discount_pct=None,
            tax_class_id="tc",
            tax_rules=(AppliedTaxRule("r", "VAT", Decimal("21.00"), False),),
            tax_amount=Money.of("57.75", "USD"),
            effective_rate_pct=Decimal("21.0000"),
            line_subtotal=Money.of("275.00", "USD"),
            line_total=Money.of("332.75", "USD"),
            as_of=JAN,
        )
        data = line.to_dict()
        assert data["ok"] is True
        assert data["unit_price"] == "11.00"
        assert data["line_total"] == "332.75"
        assert data["tax"]["effective_rate_pct"] == "21.0000"
        assert data["tax"]["rules"] == [
            {"rule_id": "r", "name": "VAT", "rate_pct": "21.00", "compound": False}
        ]
        assert data["discount_pct"] is None
        assert data["as_of"] == "2025-01-01T00:00:00+00:00"

    def test_failure_to_dict(self):
        failure = PriceQuoteFailure(code="NO_PRICE_TIER", kind="NoPriceTierError", message="m")
        assert failure.ok is False
        assert failure.to_dict() == {
            "ok": False,
            "error": {"code": "NO_PRICE_TIER", "kind": "NoPriceTierError", "message": "m"},
        }
