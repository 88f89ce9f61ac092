"""
Tests for RateCardResolver.

Covers:
- Card selection (explicit, default, latest updated_at)
- Item specificity (user > role > generic)
- Validity windows
- Failures
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pricing_engines.rate_card import RateCardResolver, pick_default_card, pick_rate_item
from pricing_kernel.domain.catalog import RateCard, RateCardItem
from pricing_kernel.domain.values import Money
from pricing_kernel.exceptions import NoActiveRateCardError, NoMatchingRateError
from pricing_kernel.selectors.in_memory import InMemoryCatalog
from tests.conftest import AS_OF, ORG_ID, OTHER_ORG_ID


def _card(card_id, *, org=ORG_ID, active=True, default=True, updated=None, currency="USD"):
    return RateCard(
        id=card_id,
        organization_id=org,
        currency=currency,
        is_active=active,
        is_default=default,
        updated_at=updated,
    )


def _item(item_id, price, *, card="rc-std", user=None, role=None, **kwargs):
    return RateCardItem(
        id=item_id,
        rate_card_id=card,
        unit_id="unit-hour",
        unit_price=Decimal(price),
        user_id=user,
        role=role,
        **kwargs,
    )


class TestPickDefaultCard:

    def test_latest_updated_wins(self):
        cards = [
            _card("rc-a", updated=datetime(2025, 1, 1, tzinfo=timezone.utc)),
            _card("rc-b", updated=datetime(2025, 3, 1, tzinfo=timezone.utc)),
        ]
        assert pick_default_card(cards, ORG_ID).id == "rc-b"

    def test_ties_by_id(self):
        assert pick_default_card([_card("rc-z"), _card("rc-a")], ORG_ID).id == "rc-a"

    def test_ignores_inactive_and_non_default(self):
        cards = [_card("rc-a", active=False), _card("rc-b", default=False)]
        assert pick_default_card(cards, ORG_ID) is None


class TestPickRateItem:

    def setup_method(self):
        self.items = [
            _item("i-generic", "100"),
            _item("i-role", "120", role="ADMIN"),
            _item("i-user", "150", user="user-7"),
        ]

    def test_user_beats_role(self):
        assert pick_rate_item(self.items, AS_OF, "user-7", "ADMIN").id == "i-user"

    def test_role_beats_generic(self):
        assert pick_rate_item(self.items, AS_OF, "user-8", "ADMIN").id == "i-role"

    def test_generic_fallback(self):
        assert pick_rate_item(self.items, AS_OF, "user-8", "VIEWER").id == "i-generic"

    def test_other_users_item_never_applies(self):
        items = [_item("i-user", "150", user="user-7")]
        assert pick_rate_item(items, AS_OF, "user-8") is None

    def test_expired_item_skipped(self):
        items = [
            _item("i-user", "150", user="user-7", valid_to=AS_OF),
            _item("i-generic", "100"),
        ]
        assert pick_rate_item(items, AS_OF, "user-7").id == "i-generic"


class TestRateCardResolver:

    def setup_method(self):
        self.catalog = InMemoryCatalog(
            rate_cards=[
                _card("rc-std"),
                _card("rc-eur", default=False, currency="EUR"),
                _card("rc-foreign", org=OTHER_ORG_ID),
            ],
            rate_card_items=[
                _item("i-generic", "100.005"),
                _item("i-user", "150", user="user-7"),
                _item("i-eur", "90", card="rc-eur"),
            ],
        )
        self.resolver = RateCardResolver(self.catalog)

    def test_resolves_default_card(self):
        rate = self.resolver.resolve(ORG_ID, AS_OF, user_id="user-7")
        assert rate.rate_card_id == "rc-std"
        assert rate.item_id == "i-user"
        assert rate.unit_price == Money.of("150.00", "USD")
        assert rate.unit_id == "unit-hour"

    def test_rounds_to_minor_units(self):
        rate = self.resolver.resolve(ORG_ID, AS_OF)
        assert rate.to_dict()["unit_price"] == "100.01"

    def test_explicit_card(self):
        rate = self.resolver.resolve(ORG_ID, AS_OF, rate_card_id="rc-eur")
        assert rate.currency == "EUR"
        assert rate.item_id == "i-eur"

    def test_foreign_explicit_card_falls_back(self):
        card = self.resolver.resolve_card(ORG_ID, "rc-foreign")
        assert card.id == "rc-std"

    def test_no_card(self):
        with pytest.raises(NoActiveRateCardError) as exc_info:
            RateCardResolver(InMemoryCatalog()).resolve(ORG_ID, AS_OF)
        assert exc_info.value.code == "NO_ACTIVE_RATE_CARD"

    def test_no_item(self):
        catalog = InMemoryCatalog(
            rate_cards=[_card("rc-std")],
            rate_card_items=[_item("i-user", "150", user="user-7")],
        )
        with pytest.raises(NoMatchingRateError) as exc_info:
            RateCardResolver(catalog).resolve(ORG_ID, AS_OF, user_id="user-9")
        assert exc_info.value.code == "NO_MATCHING_RATE"
