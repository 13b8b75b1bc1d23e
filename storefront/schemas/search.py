"""Pydantic schemas for catalog search, facets and suggestions."""

from enum import StrEnum
from uuid import UUID

from pydantic import ConfigDict, Field, model_validator

from storefront.schemas.catalog import ProductResponse
from storefront.schemas.common import BaseSchema, Pagination

RATING_BUCKETS = [5, 4, 3, 2, 1]


class SortKey(StrEnum):
    """Result orderings a client may request."""

    RELEVANCE = "relevance"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    NEWEST = "newest"
    POPULAR = "popular"


class SearchFilters(BaseSchema):
    """Filters, sort and page of a catalog search.

    Every filter is optional and ``None`` means "no constraint on this
    dimension". ``in_stock`` and ``featured`` are ternary: ``False`` is a
    constraint, ``None`` is not.
    """

    model_config = ConfigDict(extra="forbid")

    query: str | None = Field(None, max_length=200, description="Free-text query")
    category: str | None = Field(None, description="Category slug")
    brand: str | None = Field(None, description="Brand slug")
    min_price: float | None = Field(None, ge=0)
    max_price: float | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5, description="Minimum rating")
    in_stock: bool | None = None
    featured: bool | None = None
    tags: list[str] | None = None
    sort_by: SortKey = SortKey.RELEVANCE
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @model_validator(mode="after")
    def _normalize(self) -> "SearchFilters":
        if self.query is not None:
            self.query = self.query.strip() or None
        if self.tags is not None:
            self.tags = [t.strip().lower() for t in self.tags if t.strip()] or None
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class FacetOption(BaseSchema):
    """One category or brand with the number of matching products."""

    id: UUID
    name: str
    slug: str
    count: int


class PriceRange(BaseSchema):
    """Observed price range of the matching products."""

    min: float = 0.0
    max: float = 0.0


class SearchFacets(BaseSchema):
    """Filter options available for the current result set."""

    categories: list[FacetOption] = []
    brands: list[FacetOption] = []
    price_range: PriceRange = PriceRange()
    ratings: list[int] = RATING_BUCKETS


class SearchResult(BaseSchema):
    """A page of matching products with facets and suggestions."""

    products: list[ProductResponse]
    pagination: Pagination
    filters: SearchFacets
    suggestions: list[str] = []


class SuggestionsResponse(BaseSchema):
    suggestions: list[str]


class ProductsResponse(BaseSchema):
    products: list[ProductResponse]


class PopularTermsResponse(BaseSchema):
    popular_terms: list[str]


class QuickSearchResult(BaseSchema):
    """Minimal product projection for autocomplete."""

    id: UUID
    name: str
    slug: str
    price: float
    image: str
    category: str | None = None
    brand: str | None = None


class QuickSearchResponse(BaseSchema):
    results: list[QuickSearchResult]
