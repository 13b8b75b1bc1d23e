"""Public catalog endpoints: product detail, categories, brands."""

from fastapi import APIRouter, HTTPException, status

from storefront.core.deps import CatalogServiceDep
from storefront.schemas.catalog import BrandResponse, CategoryResponse, ProductResponse
from storefront.schemas.common import ErrorResponse

router = APIRouter()


@router.get(
    "/products/{slug}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(slug: str, service: CatalogServiceDep) -> ProductResponse:
    """Get an active product by slug."""
    product = await service.get_product_by_slug(slug)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(service: CatalogServiceDep) -> list[CategoryResponse]:
    return await service.list_categories()


@router.get("/brands", response_model=list[BrandResponse])
async def list_brands(service: CatalogServiceDep) -> list[BrandResponse]:
    return await service.list_brands()
