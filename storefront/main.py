"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from storefront.api.router import api_router
from storefront.core.config import settings
from storefront.core.exceptions import (
    ConflictError,
    SearchUnavailableError,
    StoreUnavailableError,
)
from storefront.core.logging_config import (
    generate_request_id,
    request_id_var,
    setup_logging,
)
from storefront.core.rate_limit import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging(debug=settings.debug)
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    logger.info("Environment: %s", settings.environment)
    yield
    logger.info("Shutting down...")


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP responses."""

    @app.exception_handler(SearchUnavailableError)
    async def search_unavailable_handler(
        _request: Request, exc: SearchUnavailableError
    ) -> JSONResponse:
        logger.error("Search failed: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Search failed"})

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(
        _request: Request, exc: StoreUnavailableError
    ) -> JSONResponse:
        logger.error("Catalog store unavailable: %s", exc)
        return JSONResponse(status_code=503, content={"detail": "Service temporarily unavailable"})

    @app.exception_handler(ConflictError)
    async def conflict_handler(_request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    # Catch-all so unhandled errors still pass through CORS with a JSON body
    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    # Sentry/GlitchTip init (before middleware)
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Response:
        rid = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(rid)
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    app.include_router(api_router, prefix=settings.api_prefix)
    register_exception_handlers(app)

    @app.get("/docs", include_in_schema=False)
    async def docs_redirect() -> RedirectResponse:
        return RedirectResponse(url=f"{settings.api_prefix}/docs")

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": f"{settings.api_prefix}/docs",
            "health": f"{settings.api_prefix}/health",
        }

    return app


app = create_app()
