"""
Tests for BasisNormalizer.

Covers:
- EXCLUSIVE: tax added on top
- INCLUSIVE: net back-computed from gross, total unchanged
- Missing / unknown basis treated as EXCLUSIVE
- No matching rules under both bases
"""

from decimal import Decimal

import pytest

from pricing_engines.basis import BasisNormalizer
from pricing_kernel.domain.catalog import PriceBasis
from pricing_kernel.domain.values import Money
from tests.conftest import make_rule


class TestExclusive:

    def setup_method(self):
        self.normalizer = BasisNormalizer()

    def test_tax_on_top(self):
        line = self.normalizer.normalize(
            Money.of("100", "EUR"), PriceBasis.EXCLUSIVE, [make_rule("vat", "21")]
        )
        assert line.subtotal == Money.of("100", "EUR")
        assert line.tax == Money.of("21", "EUR")
        assert line.total == Money.of("121", "EUR")

    @pytest.mark.parametrize("basis", [None, "", "NET", "exclusive"])
    def test_missing_or_unknown_basis_is_exclusive(self, basis):
        line = self.normalizer.normalize(Money.of("100", "EUR"), basis, [make_rule("vat", "21")])
        assert line.basis is PriceBasis.EXCLUSIVE
        assert line.total == Money.of("121", "EUR")


class TestInclusive:

    def setup_method(self):
        self.normalizer = BasisNormalizer()

    def test_simple_rate(self):
        line = self.normalizer.normalize(
            Money.of("121", "EUR"), PriceBasis.INCLUSIVE, [make_rule("vat", "21")]
        )
        assert line.total == Money.of("121", "EUR")
        assert line.subtotal == Money.of("100", "EUR")
        assert line.tax == Money.of("21", "EUR")
        assert line.effective_rate_pct == Decimal("21")

    def test_round_trip_identity(self):
        gross = Money.of("99.99", "EUR")
        line = self.normalizer.normalize(
            gross,
            PriceBasis.INCLUSIVE,
            [make_rule("vat", "21"), make_rule("extra", "5", is_compound=True)],
        )
        assert line.subtotal + line.tax == gross
        implied = line.tax.amount / line.subtotal.amount * 100
        assert abs(implied - Decimal("27.05")) < Decimal("0.0001")

    def test_effective_rate_derived_from_gross(self):
        line = self.normalizer.normalize(
            Money.of("127.05", "EUR"),
            PriceBasis.INCLUSIVE,
            [make_rule("vat", "21"), make_rule("extra", "5", is_compound=True)],
        )
        assert line.effective_rate_pct == Decimal("27.05")
        assert line.subtotal == Money.of("100", "EUR")


class TestNoRules:

    @pytest.mark.parametrize("basis", [PriceBasis.EXCLUSIVE, PriceBasis.INCLUSIVE])
    def test_no_tax(self, basis):
        line = BasisNormalizer().normalize(Money.of("50", "USD"), basis, [])
        assert line.tax.is_zero
        assert line.effective_rate_pct == Decimal("0")
        assert line.total == line.subtotal == Money.of("50", "USD")
