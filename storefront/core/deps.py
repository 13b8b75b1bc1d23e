"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Re-export auth dependencies for convenience
from storefront.core.auth import (
    CurrentUser,
    get_admin_user,
    get_current_user,
)
from storefront.core.database import async_session_maker, get_async_session
from storefront.repositories.catalog import CatalogRepository, SqlCatalogRepository
from storefront.repositories.reviews import ReviewRepository, SqlReviewRepository
from storefront.services.catalog_service import CatalogService
from storefront.services.review_service import ReviewService
from storefront.services.search_service import SearchService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Alias for get_async_session."""
    async for session in get_async_session():
        yield session


# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


# === Repositories ===


def get_catalog_repository() -> CatalogRepository:
    """Catalog port bound to the application's session factory."""
    return SqlCatalogRepository(async_session_maker)


def get_review_repository() -> ReviewRepository:
    """Review port bound to the application's session factory."""
    return SqlReviewRepository(async_session_maker)


CatalogRepo = Annotated[CatalogRepository, Depends(get_catalog_repository)]
ReviewRepo = Annotated[ReviewRepository, Depends(get_review_repository)]


# === Services ===


def get_search_service(catalog: CatalogRepo) -> SearchService:
    return SearchService(catalog)


def get_catalog_service(catalog: CatalogRepo) -> CatalogService:
    return CatalogService(catalog)


def get_review_service(reviews: ReviewRepo, catalog: CatalogRepo) -> ReviewService:
    return ReviewService(reviews, catalog)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]


__all__ = [
    "CatalogRepo",
    "CatalogServiceDep",
    "CurrentUser",
    "DBSession",
    "ReviewRepo",
    "ReviewServiceDep",
    "SearchServiceDep",
    "get_admin_user",
    "get_catalog_repository",
    "get_catalog_service",
    "get_current_user",
    "get_db",
    "get_review_repository",
    "get_review_service",
    "get_search_service",
]
