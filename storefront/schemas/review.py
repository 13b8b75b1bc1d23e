"""Pydantic schemas for product reviews."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import BaseSchema, Pagination


class ReviewSort(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RATING_HIGH = "rating-high"
    RATING_LOW = "rating-low"
    HELPFUL = "helpful"


class ReviewUpdate(BaseSchema):
    """Editable fields of a review."""

    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=1000)
    images: list[str] = []


class ReviewCreate(ReviewUpdate):
    """Request body for posting a review."""

    product_id: UUID


class ReviewResponse(BaseSchema):
    """A single review."""

    id: UUID
    product_id: UUID
    user_id: str
    rating: int
    title: str
    comment: str
    verified: bool = False
    helpful: int = 0
    images: list[str] = []
    created_at: datetime
    updated_at: datetime


class RatingBucket(BaseSchema):
    rating: int
    count: int


class ReviewStats(BaseSchema):
    """Aggregate over a product's active reviews."""

    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: list[RatingBucket] = []


class ReviewListResponse(BaseSchema):
    reviews: list[ReviewResponse]
    pagination: Pagination
    stats: ReviewStats


class ReviewMutationResponse(BaseSchema):
    message: str
    review: ReviewResponse
