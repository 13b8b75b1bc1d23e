"""Catalog persistence port and its PostgreSQL adapter.

The search and catalog services depend on :class:`CatalogRepository` only.
:class:`SqlCatalogRepository` implements it with PostgreSQL full-text
search (any-word ``tsquery`` ranked by ``ts_rank``) over
``products.search_vector``.
"""

from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import ColumnElement, Select, Text, cast, desc, false, func, select
from sqlalchemy.dialects.postgresql import REGCONFIG, TSQUERY

from storefront.core.config import settings
from storefront.models.brand import Brand
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.repositories.base import SqlRepository, like_pattern
from storefront.schemas.search import FacetOption, PriceRange, SortKey


@dataclass(frozen=True)
class ProductCriteria:
    """A resolved product predicate.

    Slugs have already been turned into ids. ``match_nothing`` is set when a
    requested slug did not resolve; the predicate then matches no rows.
    ``None`` on any dimension means that dimension is unconstrained.
    """

    text: str | None = None
    category_id: UUID | None = None
    brand_id: UUID | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    in_stock: bool | None = None
    featured: bool | None = None
    tags: tuple[str, ...] = ()
    product_ids: tuple[UUID, ...] | None = None
    active_only: bool = True
    match_nothing: bool = False


class CatalogRepository(Protocol):
    """Read/write access to products, categories and brands."""

    async def get_category_by_slug(self, slug: str) -> Category | None: ...

    async def get_brand_by_slug(self, slug: str) -> Brand | None: ...

    async def find_products(
        self, criteria: ProductCriteria, sort: SortKey, offset: int, limit: int
    ) -> list[Product]: ...

    async def count_products(self, criteria: ProductCriteria) -> int: ...

    async def category_facets(self, criteria: ProductCriteria) -> list[FacetOption]: ...

    async def brand_facets(self, criteria: ProductCriteria) -> list[FacetOption]: ...

    async def price_range(self, criteria: ProductCriteria) -> PriceRange: ...

    async def match_product_names(self, text: str, limit: int) -> list[str]: ...

    async def match_category_names(self, fragment: str, limit: int) -> list[str]: ...

    async def match_brand_names(self, fragment: str, limit: int) -> list[str]: ...

    async def get_product(self, product_id: UUID) -> Product | None: ...

    async def get_product_by_slug(self, slug: str) -> Product | None: ...

    async def get_category(self, category_id: UUID) -> Category | None: ...

    async def get_brand(self, brand_id: UUID) -> Brand | None: ...

    async def list_categories(self, *, active_only: bool = True) -> list[Category]: ...

    async def list_brands(self, *, active_only: bool = True) -> list[Brand]: ...

    async def save_product(self, product: Product) -> Product: ...

    async def save_category(self, category: Category) -> Category: ...

    async def save_brand(self, brand: Brand) -> Brand: ...


# ---------------------------------------------------------------------------
# Statement construction
# ---------------------------------------------------------------------------


def text_query(text: str, config: str | None = None) -> ColumnElement[Any]:
    """Any-word ``tsquery`` for raw user input.

    ``plainto_tsquery`` parses and stems the words; its ``&`` operators are
    rewritten to ``|`` so a product matching any one word qualifies, ranked
    by ``ts_rank``.
    """
    regconfig = cast(config or settings.search_text_config, REGCONFIG)
    all_words = cast(func.plainto_tsquery(regconfig, text), Text)
    return cast(func.replace(all_words, "&", "|"), TSQUERY)


def text_rank(text: str, config: str | None = None) -> ColumnElement[Any]:
    return func.ts_rank(Product.search_vector, text_query(text, config))


def apply_criteria(stmt: Any, criteria: ProductCriteria) -> Any:
    """Add the WHERE clauses for ``criteria`` to a statement over products."""
    if criteria.match_nothing:
        return stmt.where(false())

    if criteria.active_only:
        stmt = stmt.where(Product.is_active.is_(True))

    if criteria.text:
        stmt = stmt.where(Product.search_vector.op("@@")(text_query(criteria.text)))

    if criteria.category_id is not None:
        stmt = stmt.where(Product.category_id == criteria.category_id)

    if criteria.brand_id is not None:
        stmt = stmt.where(Product.brand_id == criteria.brand_id)

    if criteria.min_price is not None:
        stmt = stmt.where(Product.price >= criteria.min_price)
    if criteria.max_price is not None:
        stmt = stmt.where(Product.price <= criteria.max_price)

    if criteria.min_rating is not None:
        stmt = stmt.where(Product.rating >= criteria.min_rating)

    if criteria.in_stock is not None:
        stmt = stmt.where(Product.in_stock.is_(criteria.in_stock))

    if criteria.featured is not None:
        stmt = stmt.where(Product.featured.is_(criteria.featured))

    if criteria.tags:
        stmt = stmt.where(Product.tags.overlap(list(criteria.tags)))

    if criteria.product_ids is not None:
        if not criteria.product_ids:
            return stmt.where(false())
        stmt = stmt.where(Product.id.in_(criteria.product_ids))

    return stmt


def sort_clauses(sort: SortKey, text: str | None = None) -> list[Any]:
    """ORDER BY clauses for a sort key.

    Product id is always the last key so pages are stable across requests.
    """
    if sort is SortKey.PRICE_LOW:
        clauses = [Product.price.asc()]
    elif sort is SortKey.PRICE_HIGH:
        clauses = [Product.price.desc()]
    elif sort is SortKey.RATING:
        clauses = [Product.rating.desc(), Product.review_count.desc()]
    elif sort is SortKey.NEWEST:
        clauses = [Product.created_at.desc()]
    elif sort is SortKey.POPULAR:
        clauses = [Product.review_count.desc(), Product.rating.desc()]
    elif text:
        clauses = [text_rank(text).desc()]
    else:
        clauses = [Product.featured.desc(), Product.rating.desc(), Product.created_at.desc()]
    return [*clauses, Product.id.asc()]


def build_product_query(
    criteria: ProductCriteria, sort: SortKey, offset: int, limit: int
) -> Select[tuple[Product]]:
    stmt = select(Product)
    stmt = apply_criteria(stmt, criteria)
    return stmt.order_by(*sort_clauses(sort, criteria.text)).offset(offset).limit(limit)


def build_count_query(criteria: ProductCriteria) -> Select[tuple[int]]:
    return apply_criteria(select(func.count()).select_from(Product), criteria)


def build_facet_query(model: type[Category] | type[Brand], criteria: ProductCriteria) -> Any:
    """Group the matching products by category or brand and count them."""
    fk = Product.category_id if model is Category else Product.brand_id
    count = func.count(Product.id).label("count")
    stmt = (
        select(model.id, model.name, model.slug, count)
        .select_from(Product)
        .join(model, fk == model.id)
        .group_by(model.id, model.name, model.slug)
        .order_by(desc("count"), model.name)
    )
    return apply_criteria(stmt, criteria)


def build_price_range_query(criteria: ProductCriteria) -> Any:
    stmt = select(func.min(Product.price), func.max(Product.price)).select_from(Product)
    return apply_criteria(stmt, criteria)


# ---------------------------------------------------------------------------
# PostgreSQL adapter
# ---------------------------------------------------------------------------


class SqlCatalogRepository(SqlRepository):
    """CatalogRepository backed by PostgreSQL through SQLAlchemy."""

    async def get_category_by_slug(self, slug: str) -> Category | None:
        async with self._session() as session:
            stmt = select(Category).where(Category.slug == slug, Category.is_active.is_(True))
            return (await session.execute(stmt)).scalar_one_or_none()

    async def get_brand_by_slug(self, slug: str) -> Brand | None:
        async with self._session() as session:
            stmt = select(Brand).where(Brand.slug == slug, Brand.is_active.is_(True))
            return (await session.execute(stmt)).scalar_one_or_none()

    async def find_products(
        self, criteria: ProductCriteria, sort: SortKey, offset: int, limit: int
    ) -> list[Product]:
        async with self._session() as session:
            result = await session.execute(build_product_query(criteria, sort, offset, limit))
            return list(result.scalars().all())

    async def count_products(self, criteria: ProductCriteria) -> int:
        async with self._session() as session:
            return (await session.execute(build_count_query(criteria))).scalar() or 0

    async def category_facets(self, criteria: ProductCriteria) -> list[FacetOption]:
        return await self._facets(Category, criteria)

    async def brand_facets(self, criteria: ProductCriteria) -> list[FacetOption]:
        return await self._facets(Brand, criteria)

    async def _facets(
        self, model: type[Category] | type[Brand], criteria: ProductCriteria
    ) -> list[FacetOption]:
        async with self._session() as session:
            rows = (await session.execute(build_facet_query(model, criteria))).all()
        return [
            FacetOption(id=row.id, name=row.name, slug=row.slug, count=row.count) for row in rows
        ]

    async def price_range(self, criteria: ProductCriteria) -> PriceRange:
        async with self._session() as session:
            low, high = (await session.execute(build_price_range_query(criteria))).one()
        if low is None:
            return PriceRange()
        return PriceRange(min=low, max=high)

    async def match_product_names(self, text: str, limit: int) -> list[str]:
        stmt = (
            select(Product.name)
            .where(
                Product.is_active.is_(True),
                Product.search_vector.op("@@")(text_query(text)),
            )
            .order_by(text_rank(text).desc(), Product.id)
            .limit(limit)
        )
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def match_category_names(self, fragment: str, limit: int) -> list[str]:
        stmt = (
            select(Category.name)
            .where(
                Category.is_active.is_(True),
                Category.name.ilike(like_pattern(fragment), escape="\\"),
            )
            .order_by(Category.name)
            .limit(limit)
        )
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def match_brand_names(self, fragment: str, limit: int) -> list[str]:
        stmt = (
            select(Brand.name)
            .where(
                Brand.is_active.is_(True),
                Brand.name.ilike(like_pattern(fragment), escape="\\"),
            )
            .order_by(Brand.name)
            .limit(limit)
        )
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def get_product(self, product_id: UUID) -> Product | None:
        async with self._session() as session:
            return await session.get(Product, product_id)

    async def get_product_by_slug(self, slug: str) -> Product | None:
        async with self._session() as session:
            stmt = select(Product).where(Product.slug == slug, Product.is_active.is_(True))
            return (await session.execute(stmt)).scalar_one_or_none()

    async def get_category(self, category_id: UUID) -> Category | None:
        async with self._session() as session:
            return await session.get(Category, category_id)

    async def get_brand(self, brand_id: UUID) -> Brand | None:
        async with self._session() as session:
            return await session.get(Brand, brand_id)

    async def list_categories(self, *, active_only: bool = True) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        if active_only:
            stmt = stmt.where(Category.is_active.is_(True))
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def list_brands(self, *, active_only: bool = True) -> list[Brand]:
        stmt = select(Brand).order_by(Brand.name)
        if active_only:
            stmt = stmt.where(Brand.is_active.is_(True))
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def save_product(self, product: Product) -> Product:
        """Insert or update a product and refresh its full-text vector."""
        async with self._session() as session:
            merged = await session.merge(product)
            merged.search_vector = func.to_tsvector(
                cast(settings.search_text_config, REGCONFIG), product.search_document
            )
            await session.commit()
            await session.refresh(merged)
            return merged

    async def save_category(self, category: Category) -> Category:
        async with self._session() as session:
            merged = await session.merge(category)
            await session.commit()
            await session.refresh(merged)
            return merged

    async def save_brand(self, brand: Brand) -> Brand:
        async with self._session() as session:
            merged = await session.merge(brand)
            await session.commit()
            await session.refresh(merged)
            return merged
