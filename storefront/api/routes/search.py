"""Catalog search API endpoints (public, no auth)."""

import uuid

from fastapi import APIRouter, Query, Request

from storefront.core.config import settings
from storefront.core.deps import SearchServiceDep
from storefront.core.rate_limit import limiter
from storefront.schemas.search import (
    PopularTermsResponse,
    ProductsResponse,
    QuickSearchResponse,
    SearchFilters,
    SearchResult,
    SortKey,
    SuggestionsResponse,
)

router = APIRouter()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("/products", response_model=SearchResult)
@limiter.limit(settings.search_rate_limit)
async def search_products(
    request: Request,  # noqa: ARG001 — required by slowapi
    service: SearchServiceDep,
    q: str | None = Query(None, max_length=200, description="Free-text query"),
    category: str | None = Query(None, description="Category slug"),
    brand: str | None = Query(None, description="Brand slug"),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    rating: float | None = Query(None, ge=0, le=5, description="Minimum rating"),
    in_stock: bool | None = Query(None, alias="inStock"),
    featured: bool | None = Query(None),
    tags: str | None = Query(None, description="Comma-separated tags, any may match"),
    sort_by: SortKey = Query(SortKey.RELEVANCE, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.search_default_limit, ge=1, le=settings.search_max_limit),
) -> SearchResult:
    """Search the catalog with filters, sorting and pagination.

    Facets (categories, brands, price range) describe the full filtered set.
    An unknown category or brand slug yields an empty result.
    """
    filters = SearchFilters(
        query=q,
        category=category or None,
        brand=brand or None,
        min_price=min_price,
        max_price=max_price,
        rating=rating,
        in_stock=in_stock,
        featured=featured,
        tags=_split_csv(tags) or None,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return await service.search(filters)


@router.get("/suggestions", response_model=SuggestionsResponse)
@limiter.limit(settings.search_rate_limit)
async def get_suggestions(
    request: Request,  # noqa: ARG001 — required by slowapi
    service: SearchServiceDep,
    q: str | None = Query(None, max_length=200),
) -> SuggestionsResponse:
    """Product, category and brand names matching a partial query."""
    if not q or not q.strip():
        return SuggestionsResponse(suggestions=[])
    return SuggestionsResponse(suggestions=await service.get_suggestions(q))


@router.get("/popular", response_model=PopularTermsResponse)
async def get_popular_terms(
    service: SearchServiceDep,
    limit: int = Query(10, ge=1, le=50),
) -> PopularTermsResponse:
    return PopularTermsResponse(popular_terms=await service.get_popular_terms(limit))


@router.get("/trending", response_model=ProductsResponse)
async def get_trending(
    service: SearchServiceDep,
    limit: int = Query(settings.trending_default_limit, ge=1, le=50),
) -> ProductsResponse:
    """Most reviewed, best rated products."""
    return ProductsResponse(products=await service.get_trending(limit))


@router.get("/recently-viewed", response_model=ProductsResponse)
async def get_recently_viewed(
    service: SearchServiceDep,
    product_ids: str | None = Query(None, alias="productIds", description="Comma-separated ids"),
    limit: int = Query(10, ge=1, le=50),
) -> ProductsResponse:
    """Resolve a client-side viewing history. Malformed ids are skipped."""
    ids = []
    for raw in _split_csv(product_ids):
        try:
            ids.append(uuid.UUID(raw))
        except ValueError:
            continue
    return ProductsResponse(products=await service.get_recently_viewed(ids, limit))


@router.get("/quick", response_model=QuickSearchResponse)
@limiter.limit(settings.search_rate_limit)
async def quick_search(
    request: Request,  # noqa: ARG001 — required by slowapi
    service: SearchServiceDep,
    q: str | None = Query(None, max_length=200),
    limit: int = Query(settings.quick_search_default_limit, ge=1, le=20),
) -> QuickSearchResponse:
    """Autocomplete results for the header search box."""
    if not q or not q.strip():
        return QuickSearchResponse(results=[])
    return QuickSearchResponse(results=await service.quick_search(q, limit))
