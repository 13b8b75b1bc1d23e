"""Product model for the storefront catalog."""

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TSVECTOR, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from storefront.models.base import Base, SoftDeleteMixin

if TYPE_CHECKING:
    from storefront.models.brand import Brand
    from storefront.models.category import Category


class Product(SoftDeleteMixin, Base):
    """A sellable catalog item.

    ``in_stock`` mirrors ``stock_quantity > 0`` and is only ever written by
    the validator below. ``rating`` and ``review_count`` are maintained by
    the review service. ``search_vector`` is the precomputed full-text
    document over name, description and tags; it is written by the catalog
    repository and never loaded back.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    sku: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Pricing
    price: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    original_price: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Media
    image: Mapped[str] = mapped_column(String(500), nullable=False)
    images: Mapped[list[str]] = mapped_column(ARRAY(String), default=list, nullable=False)

    # Classification
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )
    brand_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("brands.id"),
        nullable=False,
        index=True,
    )
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), default=list, nullable=False)

    # Stock
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    in_stock: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)
    featured: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)

    # Quality signals
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, index=True)
    review_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Free-form attributes
    specifications: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict, nullable=False)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    dimensions: Mapped[dict[str, float] | None] = mapped_column(JSONB, nullable=True)

    search_vector: Mapped[Any] = mapped_column(TSVECTOR, nullable=True, deferred=True)

    # Relationships
    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    brand: Mapped["Brand"] = relationship("Brand", lazy="selectin")

    __table_args__ = (
        Index("ix_products_search_vector", "search_vector", postgresql_using="gin"),
        Index("ix_products_tags", "tags", postgresql_using="gin"),
    )

    @validates("stock_quantity")
    def _sync_in_stock(self, _key: str, value: int) -> int:
        self.in_stock = value > 0
        return value

    @property
    def search_document(self) -> str:
        """Text indexed for full-text matching."""
        return " ".join([self.name or "", self.description or "", " ".join(self.tags or [])])

    def __repr__(self) -> str:
        return f"<Product {self.name} ({self.sku})>"
