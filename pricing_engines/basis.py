"""
Basis Normalizer - Reconcile a line amount against the price book's basis.

EXCLUSIVE (tax added on top):
    subtotal = line amount
    tax      = compounded over subtotal
    total    = subtotal + tax

INCLUSIVE (stored price already contains tax):
    gross    = line amount
    eff      = effective rate of the rules compounded over gross
    subtotal = gross / (1 + eff / 100)
    tax      = gross - subtotal
    total    = gross

A missing or unknown basis is treated as EXCLUSIVE.  With no matching rules
the tax and rate are zero and total equals subtotal under both bases.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from pricing_engines.tax import TaxCompounder, TaxComputation
from pricing_kernel.domain.catalog import PriceBasis, TaxRule
from pricing_kernel.domain.values import Money
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.basis")

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class NormalizedLine:
    """Line amounts in both views, unrounded."""

    basis: PriceBasis
    subtotal: Money  # Excluding tax
    tax: Money
    total: Money  # Including tax
    effective_rate_pct: Decimal
    computation: TaxComputation


class BasisNormalizer:
    """Split a line amount into subtotal, tax and total for its basis."""

    def __init__(self, compounder: TaxCompounder | None = None):
        self._compounder = compounder or TaxCompounder()

    def normalize(
        self,
        amount: Money,
        basis: PriceBasis | str | None,
        rules: Sequence[TaxRule],
    ) -> NormalizedLine:
        resolved = PriceBasis.parse(basis)
        computation = self._compounder.compound(subtotal=amount, rules=rules)

        if resolved is PriceBasis.INCLUSIVE:
            eff = computation.effective_rate_pct
            net = amount / (_ONE + eff / _HUNDRED)
            result = NormalizedLine(
                basis=resolved,
                subtotal=net,
                tax=amount - net,
                total=amount,
                effective_rate_pct=eff,
                computation=computation,
            )
        else:
            result = NormalizedLine(
                basis=resolved,
                subtotal=amount,
                tax=computation.tax_total,
                total=amount + computation.tax_total,
                effective_rate_pct=computation.effective_rate_pct,
                computation=computation,
            )

        logger.debug("basis_normalized", extra={
            "basis": resolved.value,
            "subtotal": str(result.subtotal.amount),
            "tax": str(result.tax.amount),
            "total": str(result.total.amount),
        })
        return result
