"""Catalog search: filtering, sorting, pagination, facets and suggestions."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from uuid import UUID

from storefront.core.config import settings
from storefront.core.exceptions import SearchUnavailableError, StoreUnavailableError
from storefront.repositories.base import gather_reads
from storefront.repositories.catalog import CatalogRepository, ProductCriteria
from storefront.schemas.catalog import ProductResponse
from storefront.schemas.common import Pagination
from storefront.schemas.search import (
    QuickSearchResult,
    SearchFacets,
    SearchFilters,
    SearchResult,
    SortKey,
)

logger = logging.getLogger(__name__)

# Per-source caps before the combined list is cut to settings.suggestion_limit
PRODUCT_SUGGESTIONS = 5
CATEGORY_SUGGESTIONS = 3
BRAND_SUGGESTIONS = 3


@contextmanager
def _search_failure(operation: str) -> Iterator[None]:
    """Turn any store failure inside the block into a SearchUnavailableError."""
    try:
        yield
    except StoreUnavailableError as exc:
        logger.exception("Catalog %s failed", operation)
        raise SearchUnavailableError(f"{operation} failed") from exc


class SearchService:
    """Product search over a :class:`CatalogRepository`.

    Stateless: every call builds its predicate from the request and reads
    through the repository. Independent reads of one request are issued
    concurrently.
    """

    def __init__(self, catalog: CatalogRepository) -> None:
        self.catalog = catalog

    async def search(self, filters: SearchFilters) -> SearchResult:
        """Run a filtered, sorted, paginated search.

        The page, the total, the facets and (for a text query) the suggestions
        are read concurrently against the same predicate. Facets describe the
        whole filtered set, category and brand filters included.

        Args:
            filters: Validated filters, sort key and page

        Returns:
            SearchResult with products, pagination, facets and suggestions

        Raises:
            SearchUnavailableError: If any read against the store failed
        """
        with _search_failure("search"):
            criteria = await self._build_criteria(filters)
            products, total, categories, brands, price_range, suggestions = await gather_reads(
                self.catalog.find_products(criteria, filters.sort_by, filters.offset, filters.limit),
                self.catalog.count_products(criteria),
                self.catalog.category_facets(criteria),
                self.catalog.brand_facets(criteria),
                self.catalog.price_range(criteria),
                self._suggestions(filters.query),
            )

        logger.debug(
            "Search matched %d products (page %d, sort %s)",
            total,
            filters.page,
            filters.sort_by,
        )

        return SearchResult(
            products=[ProductResponse.model_validate(p) for p in products],
            pagination=Pagination.from_total(page=filters.page, limit=filters.limit, total=total),
            filters=SearchFacets(categories=categories, brands=brands, price_range=price_range),
            suggestions=suggestions,
        )

    async def get_suggestions(self, query: str) -> list[str]:
        """Suggestion strings for a partial query (empty for a blank query)."""
        with _search_failure("suggestions"):
            return await self._suggestions(query.strip() or None)

    async def quick_search(self, query: str, limit: int) -> list[QuickSearchResult]:
        """Relevance-ordered autocomplete results with a minimal projection."""
        filters = SearchFilters(query=query, limit=limit, sort_by=SortKey.RELEVANCE)
        if not filters.query:
            return []

        with _search_failure("quick search"):
            criteria = await self._build_criteria(filters)
            products = await self.catalog.find_products(criteria, SortKey.RELEVANCE, 0, limit)

        return [
            QuickSearchResult(
                id=p.id,
                name=p.name,
                slug=p.slug,
                price=p.price,
                image=p.image,
                category=p.category.name if p.category else None,
                brand=p.brand.name if p.brand else None,
            )
            for p in products
        ]

    async def get_trending(self, limit: int) -> list[ProductResponse]:
        """Most reviewed, then best rated, active products. Ignores all filters."""
        with _search_failure("trending"):
            products = await self.catalog.find_products(ProductCriteria(), SortKey.POPULAR, 0, limit)
        return [ProductResponse.model_validate(p) for p in products]

    async def get_recently_viewed(
        self, product_ids: Sequence[UUID], limit: int
    ) -> list[ProductResponse]:
        """Active products among ``product_ids``, in the order given."""
        wanted = list(dict.fromkeys(product_ids))[:limit]
        if not wanted:
            return []

        with _search_failure("recently viewed"):
            products = await self.catalog.find_products(
                ProductCriteria(product_ids=tuple(wanted)), SortKey.NEWEST, 0, limit
            )

        position = {pid: i for i, pid in enumerate(wanted)}
        products.sort(key=lambda p: position[p.id])
        return [ProductResponse.model_validate(p) for p in products]

    async def get_popular_terms(self, limit: int) -> list[str]:
        """The configured popular search terms, cut to ``limit``."""
        return settings.popular_search_terms[:limit]

    async def _build_criteria(self, filters: SearchFilters) -> ProductCriteria:
        """Resolve slugs and turn request filters into a repository predicate.

        A slug that does not resolve makes the predicate match nothing rather
        than dropping that filter.
        """
        match_nothing = False

        category_id = None
        if filters.category:
            category = await self.catalog.get_category_by_slug(filters.category)
            if category is None:
                logger.debug("Unknown category slug %r", filters.category)
                match_nothing = True
            else:
                category_id = category.id

        brand_id = None
        if filters.brand:
            brand = await self.catalog.get_brand_by_slug(filters.brand)
            if brand is None:
                logger.debug("Unknown brand slug %r", filters.brand)
                match_nothing = True
            else:
                brand_id = brand.id

        return ProductCriteria(
            text=filters.query,
            category_id=category_id,
            brand_id=brand_id,
            min_price=filters.min_price,
            max_price=filters.max_price,
            min_rating=filters.rating,
            in_stock=filters.in_stock,
            featured=filters.featured,
            tags=tuple(filters.tags or ()),
            match_nothing=match_nothing,
        )

    async def _suggestions(self, query: str | None) -> list[str]:
        """Product names first, then category names, then brand names, deduplicated."""
        if not query:
            return []

        names, categories, brands = await gather_reads(
            self.catalog.match_product_names(query, PRODUCT_SUGGESTIONS),
            self.catalog.match_category_names(query, CATEGORY_SUGGESTIONS),
            self.catalog.match_brand_names(query, BRAND_SUGGESTIONS),
        )
        return list(dict.fromkeys([*names, *categories, *brands]))[: settings.suggestion_limit]
