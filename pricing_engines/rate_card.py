"""
Rate Card Resolver - Resolve a service rate for a user or role.

Card selection mirrors price books: an explicit card wins when it is active
and owned by the organization, otherwise the organization's active default
card with the latest updated_at (ties by id).

Item selection:
    1. Keep items whose validity window contains as_of.
    2. Rank by specificity: user item (2) > role item (1) > generic item (0),
       ties by id.
    3. Take the first item that applies: its user equals the requested user,
       or its role equals the requested role, or it is generic.

Usage:
    from pricing_engines.rate_card import RateCardResolver

    rate = RateCardResolver(reader).resolve(
        organization_id="org-1",
        as_of=clock.now(),
        user_id="user-7",
        role="ADMIN",
    )
    print(rate.unit_price)  # Money: 150.00 USD
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from pricing_kernel.domain.catalog import RateCard, RateCardItem, in_window
from pricing_kernel.domain.clock import as_utc
from pricing_kernel.domain.ports import RateCardReader
from pricing_kernel.domain.values import Money
from pricing_kernel.exceptions import NoActiveRateCardError, NoMatchingRateError
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.rate_card")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class RateResolution:
    """The rate that applies, rounded to the card currency's minor units."""

    rate_card_id: str
    currency: str
    unit_id: str
    unit_price: Money
    product_id: str | None
    item_id: str

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "rate_card_id": self.rate_card_id,
            "currency": self.currency,
            "unit_id": self.unit_id,
            "unit_price": self.unit_price.format(),
            "product_id": self.product_id,
            "item_id": self.item_id,
        }


def pick_default_card(cards: Sequence[RateCard], organization_id: str) -> RateCard | None:
    """Active default card with the latest updated_at; ties by id."""
    candidates = [
        c for c in cards
        if c.organization_id == organization_id and c.is_active and c.is_default
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda c: c.id)
    candidates.sort(
        key=lambda c: as_utc(c.updated_at) if c.updated_at is not None else _OLDEST,
        reverse=True,
    )
    return candidates[0]


def pick_rate_item(
    items: Iterable[RateCardItem],
    as_of: datetime,
    user_id: str | None = None,
    role: str | None = None,
) -> RateCardItem | None:
    """Most specific in-window item that applies to the user or role."""
    in_force = [i for i in items if in_window(as_of, i.valid_from, i.valid_to)]
    ranked = sorted(in_force, key=lambda i: (-i.specificity, i.id))
    for item in ranked:
        if user_id and item.user_id == user_id:
            return item
        if role and item.role == role:
            return item
        if not item.user_id and not item.role:
            return item
    return None


class RateCardResolver:
    """Resolve service rates from a RateCardReader."""

    def __init__(self, reader: RateCardReader):
        self._reader = reader

    def resolve_card(
        self,
        organization_id: str,
        rate_card_id: str | None = None,
    ) -> RateCard:
        """
        Raises:
            NoActiveRateCardError: If neither the explicit nor a default card
                resolves.
        """
        if rate_card_id is not None:
            card = self._reader.get_rate_card(rate_card_id)
            if card is not None and card.is_active and card.organization_id == organization_id:
                return card

        card = pick_default_card(self._reader.find_rate_cards(organization_id), organization_id)
        if card is None:
            logger.warning("no_active_rate_card", extra={
                "organization_id": organization_id,
                "rate_card_id": rate_card_id,
            })
            raise NoActiveRateCardError(organization_id, rate_card_id)
        return card

    def resolve(
        self,
        organization_id: str,
        as_of: datetime,
        user_id: str | None = None,
        role: str | None = None,
        rate_card_id: str | None = None,
    ) -> RateResolution:
        """
        Resolve the rate for a user and/or role at as_of.

        Raises:
            NoActiveRateCardError: No card resolves.
            NoMatchingRateError: The card has no applicable item.
        """
        card = self.resolve_card(organization_id, rate_card_id)
        item = pick_rate_item(
            self._reader.get_rate_card_items(card.id), as_of, user_id, role
        )
        if item is None:
            logger.info("no_matching_rate", extra={
                "rate_card_id": card.id,
                "user_id": user_id,
                "role": role,
            })
            raise NoMatchingRateError(card.id, user_id, role)

        resolution = RateResolution(
            rate_card_id=card.id,
            currency=card.currency,
            unit_id=item.unit_id,
            unit_price=Money.of(item.unit_price, card.currency).round(),
            product_id=item.product_id,
            item_id=item.id,
        )
        logger.info("rate_resolved", extra={
            "rate_card_id": card.id,
            "item_id": item.id,
            "specificity": item.specificity,
            "unit_price": str(resolution.unit_price.amount),
        })
        return resolution
