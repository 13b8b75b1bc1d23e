"""Review persistence port and its PostgreSQL adapter."""

from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select, update

from storefront.models.review import Review
from storefront.repositories.base import SqlRepository
from storefront.schemas.review import ReviewSort


class ReviewRepository(Protocol):
    """Read/write access to product reviews."""

    async def get(self, review_id: UUID) -> Review | None: ...

    async def get_for_user_and_product(self, user_id: str, product_id: UUID) -> Review | None: ...

    async def list_for_product(
        self, product_id: UUID, sort: ReviewSort, offset: int, limit: int
    ) -> list[Review]: ...

    async def rating_summary(self, product_id: UUID) -> tuple[float | None, int]: ...

    async def rating_distribution(self, product_id: UUID) -> list[tuple[int, int]]: ...

    async def increment_helpful(self, review_id: UUID) -> Review | None: ...

    async def save(self, review: Review) -> Review: ...


_REVIEW_ORDER = {
    ReviewSort.NEWEST: (Review.created_at.desc(),),
    ReviewSort.OLDEST: (Review.created_at.asc(),),
    ReviewSort.RATING_HIGH: (Review.rating.desc(), Review.created_at.desc()),
    ReviewSort.RATING_LOW: (Review.rating.asc(), Review.created_at.desc()),
    ReviewSort.HELPFUL: (Review.helpful.desc(), Review.created_at.desc()),
}


class SqlReviewRepository(SqlRepository):
    """ReviewRepository backed by PostgreSQL through SQLAlchemy."""

    async def get(self, review_id: UUID) -> Review | None:
        async with self._session() as session:
            return await session.get(Review, review_id)

    async def get_for_user_and_product(self, user_id: str, product_id: UUID) -> Review | None:
        # Inactive reviews count too: the unique constraint covers them
        stmt = select(Review).where(Review.user_id == user_id, Review.product_id == product_id)
        async with self._session() as session:
            return (await session.execute(stmt)).scalar_one_or_none()

    async def list_for_product(
        self, product_id: UUID, sort: ReviewSort, offset: int, limit: int
    ) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.product_id == product_id, Review.is_active.is_(True))
            .order_by(*_REVIEW_ORDER[sort], Review.id)
            .offset(offset)
            .limit(limit)
        )
        async with self._session() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def rating_summary(self, product_id: UUID) -> tuple[float | None, int]:
        """Average rating and number of the product's active reviews."""
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.product_id == product_id, Review.is_active.is_(True)
        )
        async with self._session() as session:
            average, count = (await session.execute(stmt)).one()
        return (float(average) if average is not None else None), count

    async def rating_distribution(self, product_id: UUID) -> list[tuple[int, int]]:
        stmt = (
            select(Review.rating, func.count(Review.id))
            .where(Review.product_id == product_id, Review.is_active.is_(True))
            .group_by(Review.rating)
            .order_by(Review.rating.desc())
        )
        async with self._session() as session:
            return [(rating, count) for rating, count in (await session.execute(stmt)).all()]

    async def increment_helpful(self, review_id: UUID) -> Review | None:
        stmt = (
            update(Review)
            .where(Review.id == review_id, Review.is_active.is_(True))
            .values(helpful=Review.helpful + 1)
            .returning(Review)
        )
        async with self._session() as session:
            review = (await session.execute(stmt)).scalar_one_or_none()
            await session.commit()
            return review

    async def save(self, review: Review) -> Review:
        async with self._session() as session:
            merged = await session.merge(review)
            await session.commit()
            await session.refresh(merged)
            return merged
