"""Pydantic schemas for products, categories and brands."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from storefront.schemas.common import BaseSchema, Pagination

SLUG_PATTERN = r"^[a-z0-9-]+$"


class CategoryRef(BaseSchema):
    """Category as embedded in a product."""

    id: UUID
    name: str
    slug: str


class BrandRef(BaseSchema):
    """Brand as embedded in a product."""

    id: UUID
    name: str
    slug: str


class Dimensions(BaseSchema):
    """Physical dimensions of a product."""

    length: float = Field(..., ge=0)
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class ProductResponse(BaseSchema):
    """A product resolved with its category and brand."""

    id: UUID
    name: str
    slug: str
    description: str
    sku: str
    price: float
    original_price: float | None = None
    image: str
    images: list[str] = []
    category: CategoryRef
    brand: BrandRef
    tags: list[str] = []
    in_stock: bool
    stock_quantity: int
    featured: bool = False
    rating: float = 0.0
    review_count: int = 0
    specifications: dict[str, Any] = {}
    weight: float | None = None
    dimensions: Dimensions | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class ProductPayload(BaseSchema):
    """Admin create/replace body for a product.

    ``in_stock`` is not accepted; it follows ``stock_quantity``.
    """

    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1, max_length=2000)
    price: float = Field(..., ge=0)
    original_price: float | None = Field(None, ge=0)
    image: str = Field(..., min_length=1)
    images: list[str] = []
    category_id: UUID
    brand_id: UUID
    stock_quantity: int = Field(..., ge=0)
    featured: bool = False
    specifications: dict[str, Any] = {}
    tags: list[str] = []
    sku: str = Field(..., min_length=1, max_length=100)
    weight: float | None = Field(None, ge=0)
    dimensions: Dimensions | None = None

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, tags: list[str]) -> list[str]:
        return [t.strip().lower() for t in tags if t.strip()]

    @field_validator("sku")
    @classmethod
    def _normalize_sku(cls, sku: str) -> str:
        return sku.strip().upper()


class ProductListResponse(BaseSchema):
    """Admin product listing."""

    products: list[ProductResponse]
    pagination: Pagination


class CategoryPayload(BaseSchema):
    """Admin create/replace body for a category."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    image: str | None = None


class CategoryResponse(BaseSchema):
    """A category."""

    id: UUID
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    is_active: bool = True
    created_at: datetime


class BrandPayload(BaseSchema):
    """Admin create/replace body for a brand."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    logo: str | None = None
    description: str | None = Field(None, max_length=500)
    website: str | None = Field(None, pattern=r"^https?://.+")


class BrandResponse(BaseSchema):
    """A brand."""

    id: UUID
    name: str
    slug: str
    logo: str | None = None
    description: str | None = None
    website: str | None = None
    is_active: bool = True
    created_at: datetime
