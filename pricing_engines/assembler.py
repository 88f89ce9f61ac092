"""
Result Assembler - Package a priced line, or a typed failure.

Rounding happens here and only here, once, half-up:
    - money to the currency's minor units (2 places for unknown codes);
    - tax rule rates, discount and effective rate to configured places.

Identities are kept exact after rounding:
    EXCLUSIVE:  total    = round(subtotal) + round(tax)
    INCLUSIVE:  subtotal = round(gross)    - round(tax)

Failures: the first PricingKernelError is carried through unchanged (code,
kind, message); any other exception becomes a PRICING_ERROR failure with the
original message.  No partial results.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pricing_engines.basis import NormalizedLine
from pricing_kernel.domain.catalog import PriceBasis, PriceBook, PriceBookEntry
from pricing_kernel.domain.quote import (
    AppliedTaxRule,
    PricedLine,
    PriceQuoteFailure,
)
from pricing_kernel.domain.values import Money, quantize_places
from pricing_kernel.exceptions import PricingError, PricingKernelError
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.assembler")


class ResultAssembler:
    """Round and package pipeline output."""

    def __init__(
        self,
        rate_places: int = 2,
        discount_places: int = 2,
        effective_rate_places: int = 4,
        quantity_places: int | None = None,
    ):
        self.rate_places = rate_places
        self.discount_places = discount_places
        self.effective_rate_places = effective_rate_places
        self.quantity_places = quantity_places

    def assemble(
        self,
        *,
        product_id: str,
        variant_id: str | None,
        book: PriceBook,
        entry: PriceBookEntry,
        unit_id: str | None,
        quantity: Decimal,
        unit_price: Money,
        tax_class_id: str | None,
        line: NormalizedLine,
        as_of: datetime,
    ) -> PricedLine:
        tax = line.tax.round()
        if line.basis is PriceBasis.INCLUSIVE:
            total = line.total.round()
            subtotal = total - tax
        else:
            subtotal = line.subtotal.round()
            total = subtotal + tax

        discount = entry.discount_pct
        discount_pct = (
            quantize_places(discount, self.discount_places)
            if discount is not None and discount > 0
            else None
        )

        applied = tuple(
            AppliedTaxRule(
                rule_id=rule.id,
                name=rule.name,
                rate_pct=quantize_places(rule.rate_pct, self.rate_places),
                is_compound=rule.is_compound,
            )
            for rule in line.computation.applied_rules
        )

        if self.quantity_places is not None:
            quantity = quantize_places(quantity, self.quantity_places)

        priced = PricedLine(
            product_id=product_id,
            variant_id=variant_id,
            price_book_id=book.id,
            entry_id=entry.id,
            unit_id=unit_id,
            quantity=quantity,
            basis=line.basis,
            currency=unit_price.currency.code,
            unit_price=unit_price.round(),
            discount_pct=discount_pct,
            tax_class_id=tax_class_id,
            tax_rules=applied,
            tax_amount=tax,
            effective_rate_pct=quantize_places(
                line.effective_rate_pct, self.effective_rate_places
            ),
            line_subtotal=subtotal,
            line_total=total,
            as_of=as_of,
        )

        logger.debug("line_assembled", extra={
            "entry_id": entry.id,
            "line_subtotal": str(subtotal.amount),
            "tax_amount": str(tax.amount),
            "line_total": str(total.amount),
        })
        return priced

    def failure(self, exc: BaseException) -> PriceQuoteFailure:
        """Convert an exception raised by any stage into a failure result."""
        if not isinstance(exc, PricingKernelError):
            exc = PricingError(str(exc))
        return PriceQuoteFailure(
            code=exc.code,
            kind=type(exc).__name__,
            message=str(exc),
        )
