"""
Module: pricing_kernel.models.rate_card
Responsibility: ORM persistence for service rate cards and their items.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - An item with neither user_id nor role is the card's generic rate.
    - Items carry their own half-open validity window.
"""

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricing_kernel.db.base import TrackedBase
from pricing_kernel.db.types import Amount, CurrencyCode, Name, RefId, ShortCode


class RateCardModel(TrackedBase):
    """Currency-scoped list of service rates."""

    __tablename__ = "rate_cards"

    __table_args__ = (Index("idx_rate_card_org", "organization_id"),)

    organization_id: Mapped[RefId] = mapped_column(nullable=False)

    name: Mapped[Name] = mapped_column(nullable=False, default="")

    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    items: Mapped[list["RateCardItemModel"]] = relationship(
        back_populates="rate_card",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<RateCard {self.id} {self.currency}>"


class RateCardItemModel(TrackedBase):
    """One rate keyed by user, role, or neither."""

    __tablename__ = "rate_card_items"

    __table_args__ = (Index("idx_rate_item_card", "rate_card_id"),)

    rate_card_id: Mapped[RefId] = mapped_column(
        String(64),
        ForeignKey("rate_cards.id", ondelete="CASCADE"),
        nullable=False,
    )

    unit_id: Mapped[RefId] = mapped_column(nullable=False)

    unit_price: Mapped[Amount] = mapped_column(nullable=False)

    user_id: Mapped[RefId | None] = mapped_column(nullable=True)

    role: Mapped[ShortCode | None] = mapped_column(nullable=True)

    product_id: Mapped[RefId | None] = mapped_column(nullable=True)

    valid_from: Mapped[datetime | None] = mapped_column(nullable=True)

    valid_to: Mapped[datetime | None] = mapped_column(nullable=True)

    rate_card: Mapped[RateCardModel] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<RateCardItem {self.id} user={self.user_id} role={self.role}>"
