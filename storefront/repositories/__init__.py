"""Persistence ports and their SQLAlchemy adapters."""

from storefront.repositories.catalog import (
    CatalogRepository,
    ProductCriteria,
    SqlCatalogRepository,
)
from storefront.repositories.reviews import ReviewRepository, SqlReviewRepository

__all__ = [
    "CatalogRepository",
    "ProductCriteria",
    "ReviewRepository",
    "SqlCatalogRepository",
    "SqlReviewRepository",
]
