"""Domain exceptions raised below the HTTP layer.

Routes and the exception handlers in ``storefront.main`` translate these
into HTTP responses; services and repositories never build responses.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""


class StoreUnavailableError(StorefrontError):
    """The backing database could not be reached or failed to run a query."""


class SearchUnavailableError(StorefrontError):
    """A catalog search could not be completed.

    This is the only failure the search service reports. It carries no
    detail about which read failed; callers get all of the result or none.
    """


class ConflictError(StorefrontError):
    """A write collided with a uniqueness constraint (slug, SKU, ...)."""


class DuplicateReviewError(ConflictError):
    """The user has already reviewed this product."""
