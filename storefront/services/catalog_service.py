"""Catalog reads for the storefront and catalog management for admins."""

import logging
from typing import Any
from uuid import UUID

from storefront.models.brand import Brand
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.repositories.base import gather_reads
from storefront.repositories.catalog import CatalogRepository, ProductCriteria
from storefront.schemas.catalog import (
    BrandPayload,
    BrandResponse,
    CategoryPayload,
    CategoryResponse,
    ProductListResponse,
    ProductPayload,
    ProductResponse,
)
from storefront.schemas.common import Pagination
from storefront.schemas.search import SortKey

logger = logging.getLogger(__name__)


class CatalogService:
    """Products, categories and brands.

    Deletes are soft: the row is kept with ``is_active = False`` and drops
    out of every storefront read, search included.
    """

    def __init__(self, catalog: CatalogRepository) -> None:
        self.catalog = catalog

    # === Storefront reads ===

    async def get_product_by_slug(self, slug: str) -> ProductResponse | None:
        product = await self.catalog.get_product_by_slug(slug)
        if product is None:
            return None
        return ProductResponse.model_validate(product)

    async def list_categories(self, *, include_inactive: bool = False) -> list[CategoryResponse]:
        categories = await self.catalog.list_categories(active_only=not include_inactive)
        return [CategoryResponse.model_validate(c) for c in categories]

    async def list_brands(self, *, include_inactive: bool = False) -> list[BrandResponse]:
        brands = await self.catalog.list_brands(active_only=not include_inactive)
        return [BrandResponse.model_validate(b) for b in brands]

    # === Products (admin) ===

    async def list_products(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        category_id: UUID | None = None,
        brand_id: UUID | None = None,
    ) -> ProductListResponse:
        """All products, inactive ones included, newest first."""
        criteria = ProductCriteria(
            text=search or None,
            category_id=category_id,
            brand_id=brand_id,
            active_only=False,
        )
        products, total = await gather_reads(
            self.catalog.find_products(criteria, SortKey.NEWEST, (page - 1) * limit, limit),
            self.catalog.count_products(criteria),
        )
        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            pagination=Pagination.from_total(page=page, limit=limit, total=total),
        )

    async def create_product(self, payload: ProductPayload) -> ProductResponse:
        """Create a product.

        Raises:
            ValueError: If the referenced category or brand does not exist
        """
        category, brand = await self._classification(payload)
        product = Product(
            **self._product_fields(payload),
            category=category,
            brand=brand,
            rating=0.0,
            review_count=0,
            is_active=True,
        )
        saved = await self.catalog.save_product(product)
        logger.info("Created product %s (%s)", saved.id, saved.slug)
        return ProductResponse.model_validate(saved)

    async def update_product(
        self, product_id: UUID, payload: ProductPayload
    ) -> ProductResponse | None:
        """Replace a product's editable fields. Returns None if it does not exist.

        Raises:
            ValueError: If the referenced category or brand does not exist
        """
        product = await self.catalog.get_product(product_id)
        if product is None:
            return None

        category, brand = await self._classification(payload)
        for field, value in self._product_fields(payload).items():
            setattr(product, field, value)
        product.category = category
        product.brand = brand

        saved = await self.catalog.save_product(product)
        return ProductResponse.model_validate(saved)

    async def deactivate_product(self, product_id: UUID) -> bool:
        product = await self.catalog.get_product(product_id)
        if product is None:
            return False
        product.is_active = False
        await self.catalog.save_product(product)
        logger.info("Deactivated product %s", product_id)
        return True

    async def _classification(self, payload: ProductPayload) -> tuple[Category, Brand]:
        category, brand = await gather_reads(
            self.catalog.get_category(payload.category_id),
            self.catalog.get_brand(payload.brand_id),
        )
        if category is None:
            raise ValueError(f"Category {payload.category_id} does not exist")
        if brand is None:
            raise ValueError(f"Brand {payload.brand_id} does not exist")
        return category, brand

    @staticmethod
    def _product_fields(payload: ProductPayload) -> dict[str, Any]:
        fields = payload.model_dump(exclude={"dimensions"})
        fields["dimensions"] = payload.dimensions.model_dump() if payload.dimensions else None
        return fields

    # === Categories (admin) ===

    async def create_category(self, payload: CategoryPayload) -> CategoryResponse:
        category = await self.catalog.save_category(
            Category(**payload.model_dump(), is_active=True)
        )
        return CategoryResponse.model_validate(category)

    async def update_category(
        self, category_id: UUID, payload: CategoryPayload
    ) -> CategoryResponse | None:
        category = await self.catalog.get_category(category_id)
        if category is None:
            return None
        for field, value in payload.model_dump().items():
            setattr(category, field, value)
        return CategoryResponse.model_validate(await self.catalog.save_category(category))

    async def deactivate_category(self, category_id: UUID) -> bool:
        category = await self.catalog.get_category(category_id)
        if category is None:
            return False
        category.is_active = False
        await self.catalog.save_category(category)
        return True

    # === Brands (admin) ===

    async def create_brand(self, payload: BrandPayload) -> BrandResponse:
        brand = await self.catalog.save_brand(Brand(**payload.model_dump(), is_active=True))
        return BrandResponse.model_validate(brand)

    async def update_brand(self, brand_id: UUID, payload: BrandPayload) -> BrandResponse | None:
        brand = await self.catalog.get_brand(brand_id)
        if brand is None:
            return None
        for field, value in payload.model_dump().items():
            setattr(brand, field, value)
        return BrandResponse.model_validate(await self.catalog.save_brand(brand))

    async def deactivate_brand(self, brand_id: UUID) -> bool:
        brand = await self.catalog.get_brand(brand_id)
        if brand is None:
            return False
        brand.is_active = False
        await self.catalog.save_brand(brand)
        return True
