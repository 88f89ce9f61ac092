"""
Module: pricing_kernel.models.price_book
Responsibility: ORM persistence for price books and their tiered entries.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - An entry references a product XOR a variant (CHECK constraint).
    - min_qty <= max_qty when both are set (CHECK constraint).
    - discount_pct, when set, lies in [0, 100] (CHECK constraint).
    - price_basis is stored as text; unknown values read back as EXCLUSIVE.

Failure modes:
    - IntegrityError on INSERT of an entry violating the checks above.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricing_kernel.db.base import TrackedBase
from pricing_kernel.db.types import Amount, CurrencyCode, Name, Percent, RefId, ShortCode


class PriceBookModel(TrackedBase):
    """Currency-scoped collection of price tiers owned by one organization."""

    __tablename__ = "price_books"

    __table_args__ = (
        Index("idx_price_book_org", "organization_id"),
        Index("idx_price_book_default", "organization_id", "is_default", "is_active"),
    )

    organization_id: Mapped[RefId] = mapped_column(nullable=False)

    name: Mapped[Name] = mapped_column(nullable=False, default="")

    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    price_basis: Mapped[ShortCode] = mapped_column(nullable=False, default="EXCLUSIVE")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    entries: Mapped[list["PriceBookEntryModel"]] = relationship(
        back_populates="price_book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<PriceBook {self.id} {self.currency} {self.price_basis}>"


class PriceBookEntryModel(TrackedBase):
    """One price tier: a unit price bounded by quantity and validity window."""

    __tablename__ = "price_book_entries"

    __table_args__ = (
        CheckConstraint(
            "(product_id IS NULL) <> (variant_id IS NULL)",
            name="chk_entry_product_xor_variant",
        ),
        CheckConstraint(
            "min_qty IS NULL OR max_qty IS NULL OR max_qty >= min_qty",
            name="chk_entry_qty_range",
        ),
        CheckConstraint(
            "discount_pct IS NULL OR (discount_pct >= 0 AND discount_pct <= 100)",
            name="chk_entry_discount_range",
        ),
        Index("idx_entry_book_product", "price_book_id", "product_id"),
        Index("idx_entry_book_variant", "price_book_id", "variant_id"),
    )

    price_book_id: Mapped[RefId] = mapped_column(
        String(64),
        ForeignKey("price_books.id", ondelete="CASCADE"),
        nullable=False,
    )

    product_id: Mapped[RefId | None] = mapped_column(
        String(64),
        ForeignKey("products.id"),
        nullable=True,
    )

    variant_id: Mapped[RefId | None] = mapped_column(
        String(64),
        ForeignKey("product_variants.id"),
        nullable=True,
    )

    unit_id: Mapped[RefId | None] = mapped_column(nullable=True)

    unit_price: Mapped[Amount] = mapped_column(nullable=False)

    discount_pct: Mapped[Percent | None] = mapped_column(nullable=True)

    min_qty: Mapped[Amount | None] = mapped_column(nullable=True)

    max_qty: Mapped[Amount | None] = mapped_column(nullable=True)

    valid_from: Mapped[datetime | None] = mapped_column(nullable=True)

    valid_to: Mapped[datetime | None] = mapped_column(nullable=True)

    price_book: Mapped[PriceBookModel] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return (
            f"<PriceBookEntry {self.id} book={self.price_book_id} "
            f"min={self.min_qty} price={self.unit_price}>"
        )

    @property
    def effective_price(self) -> Decimal:
        """Unit price after the tier discount, unrounded."""
        if not self.discount_pct:
            return self.unit_price
        return self.unit_price * (Decimal("1") - self.discount_pct / Decimal("100"))
