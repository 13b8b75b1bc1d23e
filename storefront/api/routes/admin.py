"""Admin catalog management endpoints.

Mounted with the admin-role dependency, so every route here requires a
bearer token whose ``role`` claim is ``admin``.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from storefront.core.deps import CatalogServiceDep
from storefront.schemas.catalog import (
    BrandPayload,
    BrandResponse,
    CategoryPayload,
    CategoryResponse,
    ProductListResponse,
    ProductPayload,
    ProductResponse,
)
from storefront.schemas.common import MessageResponse

router = APIRouter()


def _not_found(kind: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found")


def _invalid_reference(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


# === Products ===


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    service: CatalogServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=200),
    category: UUID | None = Query(None, description="Category id"),
    brand: UUID | None = Query(None, description="Brand id"),
) -> ProductListResponse:
    """All products, including deactivated ones, newest first."""
    return await service.list_products(
        page=page, limit=limit, search=search, category_id=category, brand_id=brand
    )


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductPayload, service: CatalogServiceDep) -> ProductResponse:
    try:
        return await service.create_product(payload)
    except ValueError as e:
        raise _invalid_reference(e)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID, payload: ProductPayload, service: CatalogServiceDep
) -> ProductResponse:
    try:
        product = await service.update_product(product_id, payload)
    except ValueError as e:
        raise _invalid_reference(e)
    if product is None:
        raise _not_found("Product")
    return product


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: UUID, service: CatalogServiceDep) -> MessageResponse:
    if not await service.deactivate_product(product_id):
        raise _not_found("Product")
    return MessageResponse(message="Product deactivated successfully")


# === Categories ===


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(service: CatalogServiceDep) -> list[CategoryResponse]:
    return await service.list_categories(include_inactive=True)


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(payload: CategoryPayload, service: CatalogServiceDep) -> CategoryResponse:
    return await service.create_category(payload)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID, payload: CategoryPayload, service: CatalogServiceDep
) -> CategoryResponse:
    category = await service.update_category(category_id, payload)
    if category is None:
        raise _not_found("Category")
    return category


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: UUID, service: CatalogServiceDep) -> MessageResponse:
    if not await service.deactivate_category(category_id):
        raise _not_found("Category")
    return MessageResponse(message="Category deactivated successfully")


# === Brands ===


@router.get("/brands", response_model=list[BrandResponse])
async def list_brands(service: CatalogServiceDep) -> list[BrandResponse]:
    return await service.list_brands(include_inactive=True)


@router.post("/brands", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
async def create_brand(payload: BrandPayload, service: CatalogServiceDep) -> BrandResponse:
    return await service.create_brand(payload)


@router.put("/brands/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: UUID, payload: BrandPayload, service: CatalogServiceDep
) -> BrandResponse:
    brand = await service.update_brand(brand_id, payload)
    if brand is None:
        raise _not_found("Brand")
    return brand


@router.delete("/brands/{brand_id}", response_model=MessageResponse)
async def delete_brand(brand_id: UUID, service: CatalogServiceDep) -> MessageResponse:
    if not await service.deactivate_brand(brand_id):
        raise _not_found("Brand")
    return MessageResponse(message="Brand deactivated successfully")
