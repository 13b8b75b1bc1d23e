"""Tests for the SQL built by the PostgreSQL catalog adapter.

Statements are compiled against the PostgreSQL dialect and inspected; no
database connection is needed.
"""

import asyncio
import uuid
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from storefront.core.exceptions import (
    ConflictError,
    SearchUnavailableError,
    StoreUnavailableError,
)
from storefront.models.brand import Brand
from storefront.models.category import Category
from storefront.repositories.base import SqlRepository, gather_reads, like_pattern
from storefront.repositories.catalog import (
    ProductCriteria,
    SqlCatalogRepository,
    build_count_query,
    build_facet_query,
    build_price_range_query,
    build_product_query,
    sort_clauses,
)
from storefront.schemas.search import SearchFilters, SortKey
from storefront.services.search_service import SearchService


def _sql(stmt: Any) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def _params(stmt: Any) -> dict[str, Any]:
    return stmt.compile(dialect=postgresql.dialect()).params


class TestCriteria:
    """Tests for apply_criteria via the product query."""

    def test_active_only_by_default(self) -> None:
        sql = _sql(build_product_query(ProductCriteria(), SortKey.RELEVANCE, 0, 20))
        assert "products.is_active IS true" in sql

    def test_admin_listing_includes_inactive(self) -> None:
        criteria = ProductCriteria(active_only=False)
        sql = _sql(build_product_query(criteria, SortKey.NEWEST, 0, 20))
        assert "WHERE" not in sql

    def test_text_uses_full_text_index(self) -> None:
        stmt = build_product_query(ProductCriteria(text="red shoes"), SortKey.RELEVANCE, 0, 20)
        sql = _sql(stmt)

        assert "products.search_vector @@ CAST(replace(CAST(plainto_tsquery(" in sql
        assert "ts_rank(products.search_vector, CAST(replace(" in sql
        assert "AS TSQUERY)" in sql
        assert "red shoes" in _params(stmt).values()

    def test_text_words_are_or_ed(self) -> None:
        stmt = build_count_query(ProductCriteria(text="iphone samsung"))
        values = list(_params(stmt).values())

        assert "&" in values
        assert "|" in values
        assert values.index("&") < values.index("|")

    def test_all_dimensions(self) -> None:
        category_id, brand_id = uuid.uuid4(), uuid.uuid4()
        criteria = ProductCriteria(
            category_id=category_id,
            brand_id=brand_id,
            min_price=10,
            max_price=20,
            min_rating=4,
            in_stock=True,
            featured=False,
            tags=("5g", "ios"),
        )
        stmt = build_product_query(criteria, SortKey.PRICE_LOW, 0, 20)
        sql = _sql(stmt)

        assert "products.category_id = " in sql
        assert "products.brand_id = " in sql
        assert "products.price >= " in sql
        assert "products.price <= " in sql
        assert "products.rating >= " in sql
        assert "products.in_stock IS true" in sql
        assert "products.featured IS false" in sql
        assert "products.tags && " in sql

        params = _params(stmt)
        assert category_id in params.values()
        assert brand_id in params.values()
        assert ["5g", "ios"] in params.values()

    def test_match_nothing(self) -> None:
        sql = _sql(build_count_query(ProductCriteria(match_nothing=True)))
        assert "false" in sql.split("WHERE")[1]

    def test_empty_id_list_matches_nothing(self) -> None:
        sql = _sql(build_product_query(ProductCriteria(product_ids=()), SortKey.NEWEST, 0, 5))
        assert "false" in sql.split("WHERE")[1]

    def test_id_list(self) -> None:
        ids = (uuid.uuid4(), uuid.uuid4())
        sql = _sql(build_product_query(ProductCriteria(product_ids=ids), SortKey.NEWEST, 0, 5))
        assert "products.id IN" in sql


class TestSorting:
    """Tests for ORDER BY construction."""

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            (SortKey.PRICE_LOW, "products.price ASC"),
            (SortKey.PRICE_HIGH, "products.price DESC"),
            (SortKey.RATING, "products.rating DESC, products.review_count DESC"),
            (SortKey.NEWEST, "products.created_at DESC"),
            (SortKey.POPULAR, "products.review_count DESC, products.rating DESC"),
            (
                SortKey.RELEVANCE,
                "products.featured DESC, products.rating DESC, products.created_at DESC",
            ),
        ],
    )
    def test_sort_keys(self, sort: SortKey, expected: str) -> None:
        sql = _sql(build_product_query(ProductCriteria(), sort, 0, 20))
        assert f"ORDER BY {expected}, products.id ASC" in sql

    def test_relevance_with_text_ranks(self) -> None:
        clauses = sort_clauses(SortKey.RELEVANCE, "laptop")
        assert len(clauses) == 2

    def test_offset_and_limit(self) -> None:
        stmt = build_product_query(ProductCriteria(), SortKey.NEWEST, 40, 20)
        sql = _sql(stmt)
        values = _params(stmt).values()

        assert "LIMIT" in sql
        assert "OFFSET" in sql
        assert 20 in values
        assert 40 in values


class TestAggregates:
    """Tests for count, facet and price range queries."""

    def test_count_has_no_order_or_limit(self) -> None:
        sql = _sql(build_count_query(ProductCriteria(in_stock=True)))
        assert sql.startswith("SELECT count(*)")
        assert "ORDER BY" not in sql
        assert "LIMIT" not in sql

    @pytest.mark.parametrize(("model", "column"), [(Category, "category_id"), (Brand, "brand_id")])
    def test_facet_query(self, model: Any, column: str) -> None:
        sql = _sql(build_facet_query(model, ProductCriteria(min_price=5)))
        table = model.__tablename__

        assert f"JOIN {table} ON products.{column} = {table}.id" in sql
        assert f"GROUP BY {table}.id" in sql
        assert f"ORDER BY count DESC, {table}.name" in sql
        assert "products.price >= " in sql

    def test_price_range_query(self) -> None:
        sql = _sql(build_price_range_query(ProductCriteria(featured=True)))
        assert "min(products.price)" in sql
        assert "max(products.price)" in sql
        assert "products.featured IS true" in sql


class TestLikePattern:
    def test_wildcards_escaped(self) -> None:
        assert like_pattern("50%_off") == "%50\\%\\_off%"

    def test_plain(self) -> None:
        assert like_pattern("app") == "%app%"


class _FailingSession:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def __aenter__(self) -> "_FailingSession":
        raise self.exc

    async def __aexit__(self, *args: object) -> None:
        return None


class TestErrorTranslation:
    """Driver errors are translated at the adapter boundary."""

    async def test_integrity_error_becomes_conflict(self) -> None:
        exc = IntegrityError("INSERT", {}, Exception("duplicate key"))
        repo = SqlRepository(lambda: _FailingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(ConflictError):
            async with repo._session():
                pass

    async def test_operational_error_becomes_unavailable(self) -> None:
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
        repo = SqlRepository(lambda: _FailingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(StoreUnavailableError):
            async with repo._session():
                pass

    async def test_connection_refused_becomes_unavailable(self) -> None:
        repo = SqlRepository(lambda: _FailingSession(ConnectionRefusedError()))  # type: ignore[arg-type]

        with pytest.raises(StoreUnavailableError):
            async with repo._session():
                pass

    async def test_pool_timeout_becomes_unavailable(self) -> None:
        exc = PoolTimeoutError("QueuePool limit of size 10 overflow 20 reached")
        repo = SqlRepository(lambda: _FailingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(StoreUnavailableError):
            async with repo._session():
                pass

    async def test_pool_timeout_fails_search_opaquely(self) -> None:
        exc = PoolTimeoutError("QueuePool limit of size 10 overflow 20 reached")
        repo = SqlCatalogRepository(lambda: _FailingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(SearchUnavailableError):
            await SearchService(repo).search(SearchFilters(query="phone"))


class TestGatherReads:
    """Concurrent reads all settle before a failure is raised."""

    async def test_results_in_order(self) -> None:
        async def read(value: int) -> int:
            await asyncio.sleep(0.01 * (3 - value))
            return value

        assert await gather_reads(read(1), read(2), read(3)) == [1, 2, 3]

    async def test_first_failure_raised_after_all_settle(self) -> None:
        finished: list[str] = []

        async def fail(name: str) -> None:
            raise StoreUnavailableError(name)

        async def slow() -> None:
            await asyncio.sleep(0.01)
            finished.append("slow")

        with pytest.raises(StoreUnavailableError, match="first"):
            await gather_reads(fail("first"), slow(), fail("second"))

        assert finished == ["slow"]
