"""
Module: pricing_kernel.selectors.catalog_selector
Responsibility: SQLAlchemy-backed implementation of the catalog read ports
    (CatalogReader and RateCardReader).  Maps ORM rows to frozen domain DTOs.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Entry lookup returns rows where (product_id matches AND variant_id is
      null) OR (variant_id equals the requested variant).  The engine does
      the tier choice; this layer only narrows by book and product/variant.
    - Tax rules are returned regardless of active flag or window; the tax
      matcher filters them.
"""

from collections.abc import Sequence

from sqlalchemy import and_, or_, select

from pricing_kernel.domain.catalog import (
    PriceBook,
    PriceBookEntry,
    Product,
    RateCard,
    RateCardItem,
    TaxRule,
    Variant,
)
from pricing_kernel.models.price_book import PriceBookEntryModel, PriceBookModel
from pricing_kernel.models.product import ProductModel
from pricing_kernel.models.rate_card import RateCardItemModel, RateCardModel
from pricing_kernel.models.tax import TaxRuleModel
from pricing_kernel.selectors.base import BaseSelector


class CatalogSelector(BaseSelector[ProductModel]):
    """Read-only catalog access over a caller-owned Session."""

    def get_product(self, product_id: str) -> Product | None:
        row = self.session.get(ProductModel, product_id)
        if row is None:
            return None
        return _product_to_dto(row)

    def get_price_book(self, price_book_id: str) -> PriceBook | None:
        row = self.session.get(PriceBookModel, price_book_id)
        if row is None:
            return None
        return _price_book_to_dto(row)

    def find_price_books(self, organization_id: str) -> Sequence[PriceBook]:
        stmt = (
            select(PriceBookModel)
            .where(PriceBookModel.organization_id == organization_id)
            .order_by(PriceBookModel.created_at.desc(), PriceBookModel.id)
        )
        return [_price_book_to_dto(row) for row in self.session.scalars(stmt)]

    def get_price_book_entries(
        self,
        price_book_id: str,
        product_id: str,
        variant_id: str | None = None,
    ) -> Sequence[PriceBookEntry]:
        scope = and_(
            PriceBookEntryModel.product_id == product_id,
            PriceBookEntryModel.variant_id.is_(None),
        )
        if variant_id is not None:
            scope = or_(scope, PriceBookEntryModel.variant_id == variant_id)

        stmt = (
            select(PriceBookEntryModel)
            .where(PriceBookEntryModel.price_book_id == price_book_id, scope)
            .order_by(PriceBookEntryModel.id)
        )
        return [_entry_to_dto(row) for row in self.session.scalars(stmt)]

    def get_tax_rules(self, tax_class_id: str) -> Sequence[TaxRule]:
        stmt = (
            select(TaxRuleModel)
            .where(TaxRuleModel.tax_class_id == tax_class_id)
            .order_by(TaxRuleModel.priority, TaxRuleModel.id)
        )
        return [_tax_rule_to_dto(row) for row in self.session.scalars(stmt)]

    def get_rate_card(self, rate_card_id: str) -> RateCard | None:
        row = self.session.get(RateCardModel, rate_card_id)
        if row is None:
            return None
        return _rate_card_to_dto(row)

    def find_rate_cards(self, organization_id: str) -> Sequence[RateCard]:
        stmt = (
            select(RateCardModel)
            .where(RateCardModel.organization_id == organization_id)
            .order_by(RateCardModel.updated_at.desc(), RateCardModel.id)
        )
        return [_rate_card_to_dto(row) for row in self.session.scalars(stmt)]

    def get_rate_card_items(self, rate_card_id: str) -> Sequence[RateCardItem]:
        stmt = (
            select(RateCardItemModel)
            .where(RateCardItemModel.rate_card_id == rate_card_id)
            .order_by(RateCardItemModel.id)
        )
        return [_rate_item_to_dto(row) for row in self.session.scalars(stmt)]


def _product_to_dto(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        organization_id=row.organization_id,
        default_unit_id=row.default_unit_id,
        tax_class_id=row.tax_class_id,
        variants=tuple(
            Variant(id=v.id, product_id=v.product_id, attributes=v.attributes or {})
            for v in row.variants
        ),
    )


def _price_book_to_dto(row: PriceBookModel) -> PriceBook:
    return PriceBook(
        id=row.id,
        organization_id=row.organization_id,
        currency=row.currency,
        price_basis=row.price_basis,
        is_active=row.is_active,
        is_default=row.is_default,
        created_at=row.created_at,
        name=row.name,
    )


def _entry_to_dto(row: PriceBookEntryModel) -> PriceBookEntry:
    return PriceBookEntry(
        id=row.id,
        price_book_id=row.price_book_id,
        unit_price=row.unit_price,
        product_id=row.product_id,
        variant_id=row.variant_id,
        discount_pct=row.discount_pct,
        min_qty=row.min_qty,
        max_qty=row.max_qty,
        valid_from=row.valid_from,
        valid_to=row.valid_to,
        unit_id=row.unit_id,
    )


def _tax_rule_to_dto(row: TaxRuleModel) -> TaxRule:
    return TaxRule(
        id=row.id,
        tax_class_id=row.tax_class_id,
        name=row.name,
        rate_pct=row.rate_pct,
        country=row.country,
        region=row.region,
        postal_pattern=row.postal_pattern,
        is_compound=row.is_compound,
        priority=row.priority,
        is_active=row.is_active,
        valid_from=row.valid_from,
        valid_to=row.valid_to,
    )


def _rate_card_to_dto(row: RateCardModel) -> RateCard:
    return RateCard(
        id=row.id,
        organization_id=row.organization_id,
        currency=row.currency,
        is_active=row.is_active,
        is_default=row.is_default,
        updated_at=row.updated_at,
        name=row.name,
    )


def _rate_item_to_dto(row: RateCardItemModel) -> RateCardItem:
    return RateCardItem(
        id=row.id,
        rate_card_id=row.rate_card_id,
        unit_id=row.unit_id,
        unit_price=row.unit_price,
        user_id=row.user_id,
        role=row.role,
        product_id=row.product_id,
        valid_from=row.valid_from,
        valid_to=row.valid_to,
    )
