"""Product review model."""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, SoftDeleteMixin


class Review(SoftDeleteMixin, Base):
    """A customer's review of a product. One per (user, product)."""

    __tablename__ = "reviews"

    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Subject of the verified token; accounts live in another service
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    verified: Mapped[bool] = mapped_column(default=False, nullable=False)
    helpful: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    images: Mapped[list[str]] = mapped_column(ARRAY(String), default=list, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_reviews_user_product"),
        Index("ix_reviews_product_active", "product_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Review {self.rating}/5 on {self.product_id}>"
