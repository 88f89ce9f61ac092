"""
Tax Compounder - Compute the tax on an amount across an ordered set of rules.

Pure functions with no I/O; the matched rules are provided as parameters.

Ordering:
    Non-compound rules apply first, compound rules after.  Within each group
    rules are ordered by priority ascending, then id.

Arithmetic (unrounded, Decimal only):
    tax_total = 0
    for each rule:
        base = subtotal + tax_total   if the rule is compound
               subtotal               otherwise
        this = base * rate / 100
        tax_total += this

    A simple rule always taxes the original subtotal; a compound rule taxes
    the subtotal plus every tax applied before it.  With 21% simple and 5%
    compound on 100: 21 + 121 * 5% = 27.05.

    effective_rate_pct = tax_total * 100 / subtotal   (0 when subtotal is 0)

Usage:
    from pricing_engines.tax import TaxCompounder
    from pricing_kernel.domain.values import Money

    result = TaxCompounder().compound(
        subtotal=Money.of("100.00", "EUR"),
        rules=[vat_21, surcharge_5_compound],
    )
    print(result.tax_total)            # Money: 27.05 EUR
    print(result.effective_rate_pct)   # Decimal: 27.05
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from pricing_engines.tracer import traced_engine
from pricing_kernel.domain.catalog import TaxRule
from pricing_kernel.domain.values import Money
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.tax")

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TaxLine:
    """
    Tax computed for a single rule.

    Immutable value object representing one rule in a computation.
    """

    rule: TaxRule
    taxable_base: Money  # Base the rule was applied to
    tax_amount: Money

    @property
    def is_compound(self) -> bool:
        return self.rule.is_compound


@dataclass(frozen=True)
class TaxComputation:
    """Result of compounding a set of rules over a subtotal. Unrounded."""

    subtotal: Money
    lines: tuple[TaxLine, ...]
    tax_total: Money
    effective_rate_pct: Decimal

    @property
    def applied_rules(self) -> tuple[TaxRule, ...]:
        """Rules in application order."""
        return tuple(line.rule for line in self.lines)

    @property
    def rule_count(self) -> int:
        return len(self.lines)


def order_rules(rules: Iterable[TaxRule]) -> list[TaxRule]:
    """Non-compound first, then compound; each by priority then id."""
    return sorted(rules, key=lambda r: (r.is_compound, r.priority, r.id))


def effective_rate(tax_total: Decimal, subtotal: Decimal) -> Decimal:
    """tax_total as a percentage of subtotal; 0 for a zero subtotal."""
    if subtotal == 0:
        return Decimal("0")
    return tax_total * _HUNDRED / subtotal


class TaxCompounder:
    """
    Compute tax across ordered rules.

    Pure functions - no I/O, no database access.

    Handles:
        - Simple (non-compound) rules, each on the subtotal
        - Compound rules, each on the subtotal plus prior taxes
        - Zero subtotals and empty rule sets
    """

    @traced_engine(
        "tax", "1.0",
        fingerprint_fields=("subtotal", "rules"),
        summarize=lambda result: {
            "rule_count": result.rule_count,
            "tax_total": result.tax_total.amount,
        },
    )
    def compound(
        self,
        *,
        subtotal: Money,
        rules: Sequence[TaxRule],
    ) -> TaxComputation:
        """
        Compute tax on subtotal across rules.

        Args:
            subtotal: Amount the first rule is applied to.
            rules: Matched rules, in any order.

        Returns:
            TaxComputation with per-rule bases and amounts.
        """
        t0 = time.monotonic()
        ordered = order_rules(rules)
        currency = subtotal.currency

        if not ordered:
            logger.debug("tax_compounding_no_rules", extra={})
            return TaxComputation(
                subtotal=subtotal,
                lines=(),
                tax_total=Money.zero(currency),
                effective_rate_pct=Decimal("0"),
            )

        tax_total = Decimal("0")
        lines: list[TaxLine] = []

        for rule in ordered:
            base = subtotal.amount + tax_total if rule.is_compound else subtotal.amount
            this_tax = base * rule.rate_pct / _HUNDRED
            lines.append(
                TaxLine(
                    rule=rule,
                    taxable_base=Money.of(base, currency),
                    tax_amount=Money.of(this_tax, currency),
                )
            )
            tax_total += this_tax

        rate = effective_rate(tax_total, subtotal.amount)

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.debug("tax_compounding_completed", extra={
            "subtotal": str(subtotal.amount),
            "tax_total": str(tax_total),
            "effective_rate_pct": str(rate),
            "rule_count": len(lines),
            "compound_count": sum(1 for line in lines if line.is_compound),
            "duration_ms": duration_ms,
        })

        return TaxComputation(
            subtotal=subtotal,
            lines=tuple(lines),
            tax_total=Money.of(tax_total, currency),
            effective_rate_pct=rate,
        )
