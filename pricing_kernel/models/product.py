"""
Module: pricing_kernel.models.product
Responsibility: ORM persistence for products and their sellable variants.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - A product belongs to exactly one organization; pricing refuses to
      quote it for any other.
    - A variant belongs to exactly one product (FK, cascade delete).
"""

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricing_kernel.db.base import TrackedBase
from pricing_kernel.db.types import Name, RefId


class ProductModel(TrackedBase):
    """Catalog product.  default_unit_id and tax_class_id are optional."""

    __tablename__ = "products"

    __table_args__ = (Index("idx_product_org", "organization_id"),)

    organization_id: Mapped[RefId] = mapped_column(nullable=False)

    name: Mapped[Name] = mapped_column(nullable=False, default="")

    default_unit_id: Mapped[RefId | None] = mapped_column(nullable=True)

    tax_class_id: Mapped[RefId | None] = mapped_column(
        String(64),
        ForeignKey("tax_classes.id"),
        nullable=True,
    )

    variants: Mapped[list["ProductVariantModel"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product {self.id} org={self.organization_id}>"


class ProductVariantModel(TrackedBase):
    """A sellable variant of a product, e.g. size or color."""

    __tablename__ = "product_variants"

    __table_args__ = (Index("idx_variant_product", "product_id"),)

    product_id: Mapped[RefId] = mapped_column(
        String(64),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)

    attributes: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    product: Mapped[ProductModel] = relationship(back_populates="variants")

    def __repr__(self) -> str:
        return f"<ProductVariant {self.id} product={self.product_id}>"
