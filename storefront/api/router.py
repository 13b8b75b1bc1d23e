"""API router combining all route modules."""

from fastapi import APIRouter, Depends

from storefront.api.routes import admin, catalog, health, reviews, search
from storefront.core.auth import get_admin_user

api_router = APIRouter()

# Health checks (no prefix)
api_router.include_router(health.router)

# Catalog search (public, rate limited)
api_router.include_router(
    search.router,
    prefix="/search",
    tags=["search"],
)

# Product detail, categories and brands (public)
api_router.include_router(
    catalog.router,
    tags=["catalog"],
)

# Reviews (listing public, writes require auth)
api_router.include_router(
    reviews.router,
    prefix="/reviews",
    tags=["reviews"],
)

# Catalog management (admin role only)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(get_admin_user)],
)
