"""Brand model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, SoftDeleteMixin


class Brand(SoftDeleteMixin, Base):
    """Product brand, used as a filter dimension and facet."""

    __tablename__ = "brands"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Brand {self.slug}>"
