"""
Tier Selector - Pick the best-matching price tier for a quantity and date.

Pure filter + sort + take-first over a price book's entries.

Selection rules:
    1. Scope to entries of the resolved price book that either target the
       product with no variant, or target the requested variant.
    2. Keep entries whose validity window contains as_of ([from, to)) and
       whose quantity range contains the quantity (both bounds inclusive,
       each optionally open).
    3. The highest min_qty wins (an open minimum counts as 0); ties go to
       the lexicographically smallest entry id.

Usage:
    from pricing_engines.tiers import TierSelector

    entry = TierSelector().select(
        entries=entries,
        price_book_id="pb-1",
        product_id="prod-1",
        quantity=Decimal("25"),
        as_of=as_of,
    )
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from pricing_engines.tracer import traced_engine
from pricing_kernel.domain.catalog import PriceBookEntry
from pricing_kernel.exceptions import NoPriceTierError
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.tiers")

NO_PRICE_IN_BOOK = "No price found in selected price book"
NO_VALID_TIER = "No valid tier for given quantity/date"


def entries_in_scope(
    entries: Iterable[PriceBookEntry],
    price_book_id: str,
    product_id: str,
    variant_id: str | None = None,
) -> list[PriceBookEntry]:
    """Entries of this book that price the product or the requested variant."""
    return [
        e for e in entries
        if e.price_book_id == price_book_id
        and (
            (e.product_id == product_id and e.variant_id is None)
            or (variant_id is not None and e.variant_id == variant_id)
        )
    ]


def rank_tiers(entries: Iterable[PriceBookEntry]) -> list[PriceBookEntry]:
    """Order tiers best first: highest floor, then smallest id."""
    return sorted(entries, key=lambda e: (-e.tier_floor, e.id))


class TierSelector:
    """Deterministic tier choice. Never mutates its inputs."""

    @traced_engine(
        "tiers", "1.0",
        fingerprint_fields=(
            "entries", "price_book_id", "product_id", "variant_id", "quantity", "as_of",
        ),
        summarize=lambda entry: {"entry_id": entry.id},
    )
    def select(
        self,
        *,
        entries: Sequence[PriceBookEntry],
        price_book_id: str,
        product_id: str,
        quantity: Decimal,
        as_of: datetime,
        variant_id: str | None = None,
    ) -> PriceBookEntry:
        """
        Select the tier pricing this line.

        Raises:
            NoPriceTierError: With reason NO_PRICE_IN_BOOK if nothing in the
                book prices the product/variant, or NO_VALID_TIER if nothing
                survives the quantity and date filters.
        """
        scoped = entries_in_scope(entries, price_book_id, product_id, variant_id)
        if not scoped:
            logger.info("no_price_in_book", extra={
                "price_book_id": price_book_id,
                "product_id": product_id,
                "variant_id": variant_id,
            })
            raise NoPriceTierError(
                price_book_id, product_id, quantity, variant_id, reason=NO_PRICE_IN_BOOK
            )

        eligible = [
            e for e in scoped
            if e.is_valid_at(as_of) and e.covers_quantity(quantity)
        ]
        if not eligible:
            logger.info("no_valid_tier", extra={
                "price_book_id": price_book_id,
                "product_id": product_id,
                "variant_id": variant_id,
                "quantity": str(quantity),
                "as_of": as_of.isoformat(),
                "scoped_count": len(scoped),
            })
            raise NoPriceTierError(
                price_book_id, product_id, quantity, variant_id, reason=NO_VALID_TIER
            )

        best = rank_tiers(eligible)[0]
        logger.debug("tier_selected", extra={
            "entry_id": best.id,
            "min_qty": str(best.min_qty) if best.min_qty is not None else None,
            "max_qty": str(best.max_qty) if best.max_qty is not None else None,
            "unit_price": str(best.unit_price),
            "eligible_count": len(eligible),
        })
        return best
