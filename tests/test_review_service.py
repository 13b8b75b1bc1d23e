"""Unit tests for ReviewService and product rating maintenance."""

import uuid
from datetime import timedelta
from typing import Any

import pytest
import pytest_asyncio

from storefront.core.exceptions import DuplicateReviewError
from storefront.schemas.review import ReviewCreate, ReviewSort, ReviewUpdate
from storefront.services.review_service import ReviewService, round_rating
from tests.conftest import OTHER_USER_ID, TEST_USER_ID
from tests.fakes import InMemoryCatalogRepository, InMemoryReviewRepository


@pytest.fixture
def service(
    review_repo: InMemoryReviewRepository, catalog_repo: InMemoryCatalogRepository
) -> ReviewService:
    return ReviewService(review_repo, catalog_repo)


@pytest_asyncio.fixture
async def product(category_factory: Any, brand_factory: Any, product_factory: Any) -> Any:
    phones = await category_factory(name="Smartphones")
    acme = await brand_factory(name="Acme")
    return await product_factory(name="Acme Phone", category=phones, brand=acme)


def _review(product_id: uuid.UUID, rating: int, title: str = "Fine") -> ReviewCreate:
    return ReviewCreate(
        product_id=product_id, rating=rating, title=title, comment=f"{title} phone"
    )


class TestRoundRating:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(4.25, 4.3), (4.24, 4.2), (3.0, 3.0), (4.666, 4.7), (4.95, 5.0)],
    )
    def test_half_up_to_one_decimal(self, value: float, expected: float) -> None:
        assert round_rating(value) == expected


class TestCreateReview:
    """Tests for ReviewService.create()."""

    async def test_creates_and_updates_product_rating(
        self, service: ReviewService, product: Any
    ) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 4))

        assert review is not None
        assert review.user_id == TEST_USER_ID
        assert review.verified is False
        assert review.helpful == 0
        assert product.rating == 4.0
        assert product.review_count == 1

    async def test_average_of_active_reviews(
        self, service: ReviewService, product: Any
    ) -> None:
        await service.create(TEST_USER_ID, _review(product.id, 5))
        await service.create(OTHER_USER_ID, _review(product.id, 4))
        await service.create("user-3", _review(product.id, 4))

        assert product.rating == 4.3
        assert product.review_count == 3

    async def test_duplicate_review_rejected(self, service: ReviewService, product: Any) -> None:
        await service.create(TEST_USER_ID, _review(product.id, 5))

        with pytest.raises(DuplicateReviewError):
            await service.create(TEST_USER_ID, _review(product.id, 3))

    async def test_duplicate_after_delete_still_rejected(
        self, service: ReviewService, product: Any
    ) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 5))
        assert review is not None
        await service.deactivate(TEST_USER_ID, review.id)

        with pytest.raises(DuplicateReviewError):
            await service.create(TEST_USER_ID, _review(product.id, 3))

    async def test_unknown_product(self, service: ReviewService) -> None:
        assert await service.create(TEST_USER_ID, _review(uuid.uuid4(), 5)) is None

    async def test_inactive_product(self, service: ReviewService, product: Any) -> None:
        product.is_active = False
        assert await service.create(TEST_USER_ID, _review(product.id, 5)) is None


class TestEditAndDelete:
    """Tests for update(), deactivate() and mark_helpful()."""

    async def test_update_recomputes_rating(self, service: ReviewService, product: Any) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 2))
        assert review is not None

        updated = await service.update(
            TEST_USER_ID,
            review.id,
            ReviewUpdate(rating=5, title="Better", comment="Grew on me"),
        )

        assert updated is not None
        assert updated.title == "Better"
        assert product.rating == 5.0

    async def test_cannot_update_someone_elses_review(
        self, service: ReviewService, product: Any
    ) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 2))
        assert review is not None

        result = await service.update(
            OTHER_USER_ID, review.id, ReviewUpdate(rating=1, title="Bad", comment="Nope")
        )

        assert result is None
        assert product.rating == 2.0

    async def test_deactivate_resets_rating_when_last_review(
        self, service: ReviewService, product: Any
    ) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 3))
        assert review is not None

        assert await service.deactivate(TEST_USER_ID, review.id) is True

        assert product.rating == 0.0
        assert product.review_count == 0

    async def test_deactivate_twice(self, service: ReviewService, product: Any) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 3))
        assert review is not None

        assert await service.deactivate(TEST_USER_ID, review.id) is True
        assert await service.deactivate(TEST_USER_ID, review.id) is False

    async def test_mark_helpful(self, service: ReviewService, product: Any) -> None:
        review = await service.create(TEST_USER_ID, _review(product.id, 3))
        assert review is not None

        await service.mark_helpful(review.id)
        marked = await service.mark_helpful(review.id)

        assert marked is not None
        assert marked.helpful == 2

    async def test_mark_helpful_unknown(self, service: ReviewService) -> None:
        assert await service.mark_helpful(uuid.uuid4()) is None


class TestListReviews:
    """Tests for list_for_product() and its statistics."""

    async def test_stats_and_distribution(self, service: ReviewService, product: Any) -> None:
        for user, rating in [("a", 5), ("b", 5), ("c", 4), ("d", 1)]:
            await service.create(user, _review(product.id, rating))

        listing = await service.list_for_product(product.id)

        assert listing.stats.total_reviews == 4
        assert listing.stats.average_rating == 3.8
        assert [(b.rating, b.count) for b in listing.stats.rating_distribution] == [
            (5, 2),
            (4, 1),
            (1, 1),
        ]
        assert listing.pagination.total == 4
        assert listing.pagination.pages == 1

    async def test_sorted_by_rating_low(self, service: ReviewService, product: Any) -> None:
        for user, rating in [("a", 3), ("b", 1), ("c", 5)]:
            await service.create(user, _review(product.id, rating))

        listing = await service.list_for_product(product.id, sort=ReviewSort.RATING_LOW)

        assert [r.rating for r in listing.reviews] == [1, 3, 5]

    async def test_newest_first_by_default(
        self,
        service: ReviewService,
        review_repo: InMemoryReviewRepository,
        product: Any,
    ) -> None:
        first = await service.create("a", _review(product.id, 3, "First"))
        second = await service.create("b", _review(product.id, 4, "Second"))
        assert first is not None and second is not None
        review_repo.reviews[first.id].created_at -= timedelta(days=1)

        listing = await service.list_for_product(product.id)

        assert [r.title for r in listing.reviews] == ["Second", "First"]

    async def test_empty(self, service: ReviewService, product: Any) -> None:
        listing = await service.list_for_product(product.id)

        assert listing.reviews == []
        assert listing.stats.average_rating == 0.0
        assert listing.stats.total_reviews == 0
        assert listing.pagination.pages == 0
