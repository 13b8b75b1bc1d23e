"""Product reviews and the product rating they drive."""

import logging
import math
from uuid import UUID

from storefront.core.exceptions import DuplicateReviewError
from storefront.models.review import Review
from storefront.repositories.base import gather_reads
from storefront.repositories.catalog import CatalogRepository
from storefront.repositories.reviews import ReviewRepository
from storefront.schemas.common import Pagination
from storefront.schemas.review import (
    RatingBucket,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewSort,
    ReviewStats,
    ReviewUpdate,
)

logger = logging.getLogger(__name__)


def round_rating(value: float) -> float:
    """Round half up to one decimal (4.25 -> 4.3)."""
    return math.floor(value * 10 + 0.5) / 10


class ReviewService:
    """Review lifecycle.

    Every create, edit and deactivation recomputes the product's ``rating``
    (mean of active reviews, one decimal) and ``review_count``.
    """

    def __init__(self, reviews: ReviewRepository, catalog: CatalogRepository) -> None:
        self.reviews = reviews
        self.catalog = catalog

    async def list_for_product(
        self,
        product_id: UUID,
        *,
        page: int = 1,
        limit: int = 10,
        sort: ReviewSort = ReviewSort.NEWEST,
    ) -> ReviewListResponse:
        reviews, (average, total), distribution = await gather_reads(
            self.reviews.list_for_product(product_id, sort, (page - 1) * limit, limit),
            self.reviews.rating_summary(product_id),
            self.reviews.rating_distribution(product_id),
        )
        return ReviewListResponse(
            reviews=[ReviewResponse.model_validate(r) for r in reviews],
            pagination=Pagination.from_total(page=page, limit=limit, total=total),
            stats=ReviewStats(
                average_rating=round_rating(average) if average is not None else 0.0,
                total_reviews=total,
                rating_distribution=[
                    RatingBucket(rating=rating, count=count) for rating, count in distribution
                ],
            ),
        )

    async def create(self, user_id: str, data: ReviewCreate) -> ReviewResponse | None:
        """Post a review. Returns None if the product does not exist or is inactive.

        Raises:
            DuplicateReviewError: If the user already reviewed this product
        """
        product = await self.catalog.get_product(data.product_id)
        if product is None or not product.is_active:
            return None

        if await self.reviews.get_for_user_and_product(user_id, data.product_id):
            raise DuplicateReviewError("You have already reviewed this product")

        review = Review(
            product_id=data.product_id,
            user_id=user_id,
            rating=data.rating,
            title=data.title,
            comment=data.comment,
            images=data.images,
            verified=False,
            helpful=0,
            is_active=True,
        )
        saved = await self.reviews.save(review)
        await self._refresh_product_rating(data.product_id)
        return ReviewResponse.model_validate(saved)

    async def update(
        self, user_id: str, review_id: UUID, data: ReviewUpdate
    ) -> ReviewResponse | None:
        """Edit the user's own active review. Returns None if there is none."""
        review = await self._own_review(user_id, review_id)
        if review is None:
            return None

        for field, value in data.model_dump().items():
            setattr(review, field, value)
        saved = await self.reviews.save(review)
        await self._refresh_product_rating(review.product_id)
        return ReviewResponse.model_validate(saved)

    async def deactivate(self, user_id: str, review_id: UUID) -> bool:
        review = await self._own_review(user_id, review_id)
        if review is None:
            return False

        review.is_active = False
        await self.reviews.save(review)
        await self._refresh_product_rating(review.product_id)
        return True

    async def mark_helpful(self, review_id: UUID) -> ReviewResponse | None:
        review = await self.reviews.increment_helpful(review_id)
        return ReviewResponse.model_validate(review) if review else None

    async def _own_review(self, user_id: str, review_id: UUID) -> Review | None:
        review = await self.reviews.get(review_id)
        if review is None or review.user_id != user_id or not review.is_active:
            return None
        return review

    async def _refresh_product_rating(self, product_id: UUID) -> None:
        average, count = await self.reviews.rating_summary(product_id)
        product = await self.catalog.get_product(product_id)
        if product is None:
            return

        product.rating = round_rating(average) if average is not None else 0.0
        product.review_count = count
        await self.catalog.save_product(product)
        logger.info(
            "Product %s rating now %.1f over %d reviews", product_id, product.rating, count
        )
