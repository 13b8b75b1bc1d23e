"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire, which is what
    the storefront SPA reads and sends.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    checks: dict[str, str]


class ErrorResponse(BaseSchema):
    """Error response schema."""

    detail: str


class MessageResponse(BaseSchema):
    """Plain acknowledgement."""

    message: str


class Pagination(BaseSchema):
    """Pagination metadata for a page of results."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def from_total(cls, *, page: int, limit: int, total: int) -> "Pagination":
        """Build metadata where ``pages == ceil(total / limit)``."""
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)
