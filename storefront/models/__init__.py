"""SQLAlchemy models."""

from storefront.models.base import Base, SoftDeleteMixin
from storefront.models.brand import Brand
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.review import Review

__all__ = [
    # Base
    "Base",
    "SoftDeleteMixin",
    # Catalog
    "Brand",
    "Category",
    "Product",
    # Reviews
    "Review",
]
