"""
Module: pricing_kernel.models.tax
Responsibility: ORM persistence for tax classes and their jurisdiction rules.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - A rule belongs to exactly one tax class.
    - country/region/postal_pattern null means "any".  postal_pattern is a
      glob (``*``, ``?``, ``[...]``) matched against the ship-to postal code.
    - rate_pct is a percentage (8.875 means 8.875%).
"""

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricing_kernel.db.base import TrackedBase
from pricing_kernel.db.types import Name, Percent, RefId, ShortCode


class TaxClassModel(TrackedBase):
    """Named bucket of tax rules attached to products."""

    __tablename__ = "tax_classes"

    __table_args__ = (Index("idx_tax_class_org", "organization_id"),)

    organization_id: Mapped[RefId] = mapped_column(nullable=False)

    name: Mapped[Name] = mapped_column(nullable=False, default="")

    rules: Mapped[list["TaxRuleModel"]] = relationship(
        back_populates="tax_class",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<TaxClass {self.id} {self.name!r}>"


class TaxRuleModel(TrackedBase):
    """One jurisdiction-scoped rate inside a tax class."""

    __tablename__ = "tax_rules"

    __table_args__ = (Index("idx_tax_rule_class", "tax_class_id"),)

    tax_class_id: Mapped[RefId] = mapped_column(
        String(64),
        ForeignKey("tax_classes.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[Name] = mapped_column(nullable=False)

    rate_pct: Mapped[Percent] = mapped_column(nullable=False)

    country: Mapped[ShortCode | None] = mapped_column(nullable=True)

    region: Mapped[ShortCode | None] = mapped_column(nullable=True)

    postal_pattern: Mapped[str | None] = mapped_column(String(100), nullable=True)

    is_compound: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    valid_from: Mapped[datetime | None] = mapped_column(nullable=True)

    valid_to: Mapped[datetime | None] = mapped_column(nullable=True)

    tax_class: Mapped[TaxClassModel] = relationship(back_populates="rules")

    def __repr__(self) -> str:
        return f"<TaxRule {self.id} {self.name!r} {self.rate_pct}%>"
