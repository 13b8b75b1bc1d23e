"""Product review endpoints.

Listing is public; writing requires a bearer token and only ever touches
the caller's own reviews.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from storefront.core.deps import CurrentUser, ReviewServiceDep
from storefront.core.exceptions import DuplicateReviewError
from storefront.schemas.common import MessageResponse
from storefront.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewMutationResponse,
    ReviewSort,
    ReviewUpdate,
)

router = APIRouter()


@router.get("/product/{product_id}", response_model=ReviewListResponse)
async def list_product_reviews(
    product_id: UUID,
    service: ReviewServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    sort: ReviewSort = Query(ReviewSort.NEWEST),
) -> ReviewListResponse:
    """Active reviews of a product with rating statistics."""
    return await service.list_for_product(product_id, page=page, limit=limit, sort=sort)


@router.post("", response_model=ReviewMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreate,
    user: CurrentUser,
    service: ReviewServiceDep,
) -> ReviewMutationResponse:
    try:
        review = await service.create(user["userId"], data)
    except DuplicateReviewError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return ReviewMutationResponse(message="Review created successfully", review=review)


@router.put("/{review_id}", response_model=ReviewMutationResponse)
async def update_review(
    review_id: UUID,
    data: ReviewUpdate,
    user: CurrentUser,
    service: ReviewServiceDep,
) -> ReviewMutationResponse:
    review = await service.update(user["userId"], review_id, data)
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found or unauthorized",
        )
    return ReviewMutationResponse(message="Review updated successfully", review=review)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: UUID,
    user: CurrentUser,
    service: ReviewServiceDep,
) -> MessageResponse:
    """Soft-delete the caller's review."""
    if not await service.deactivate(user["userId"], review_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found or unauthorized",
        )
    return MessageResponse(message="Review deleted successfully")


@router.post("/{review_id}/helpful", response_model=ReviewMutationResponse)
async def mark_review_helpful(
    review_id: UUID,
    _user: CurrentUser,
    service: ReviewServiceDep,
) -> ReviewMutationResponse:
    review = await service.mark_helpful(review_id)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return ReviewMutationResponse(message="Review marked as helpful", review=review)
