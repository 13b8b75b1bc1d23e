"""Pydantic schemas for request/response validation."""

from storefront.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    Pagination,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "MessageResponse",
    "Pagination",
]
