"""Pytest configuration and fixtures for the storefront API test suite.

Provides:
- In-memory catalog and review repositories seeded with a small catalog
- Signed JWTs for a customer, a second customer and an admin
- Async HTTP clients wired to the in-memory repositories
- Disabled rate limiting
"""

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from storefront.core.config import settings
from storefront.core.deps import get_catalog_repository, get_review_repository
from storefront.core.rate_limit import limiter
from storefront.main import app
from storefront.models.brand import Brand
from storefront.models.category import Category
from storefront.models.product import Product
from tests.fakes import InMemoryCatalogRepository, InMemoryReviewRepository

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"
ADMIN_USER_ID = "admin-1"

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def make_token(
    user_id: str = TEST_USER_ID,
    *,
    role: str = "customer",
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
    **claims: Any,
) -> str:
    """Sign a token the way the accounts service does."""
    payload = {
        "userId": user_id,
        "email": f"{user_id}@example.com",
        "role": role,
        "exp": datetime.now(UTC) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return bearer(make_token(TEST_USER_ID))


@pytest.fixture
def other_user_headers() -> dict[str, str]:
    return bearer(make_token(OTHER_USER_ID))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer(make_token(ADMIN_USER_ID, role="admin"))


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog_repo() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def review_repo() -> InMemoryReviewRepository:
    return InMemoryReviewRepository()


@pytest.fixture
def category_factory(catalog_repo: InMemoryCatalogRepository) -> Callable[..., Any]:
    """Factory that adds Category instances to the in-memory catalog."""

    async def _create(*, name: str, slug: str | None = None, is_active: bool = True) -> Category:
        category = Category(
            id=uuid.uuid4(),
            name=name,
            slug=slug or name.lower(),
            is_active=is_active,
            created_at=BASE_TIME,
        )
        return await catalog_repo.save_category(category)

    return _create


@pytest.fixture
def brand_factory(catalog_repo: InMemoryCatalogRepository) -> Callable[..., Any]:
    """Factory that adds Brand instances to the in-memory catalog."""

    async def _create(*, name: str, slug: str | None = None, is_active: bool = True) -> Brand:
        brand = Brand(
            id=uuid.uuid4(),
            name=name,
            slug=slug or name.lower(),
            is_active=is_active,
            created_at=BASE_TIME,
        )
        return await catalog_repo.save_brand(brand)

    return _create


@pytest.fixture
def product_factory(catalog_repo: InMemoryCatalogRepository) -> Callable[..., Any]:
    """Factory that adds Product instances to the in-memory catalog."""
    counter = iter(range(1, 1000))

    async def _create(
        *,
        name: str,
        category: Category,
        brand: Brand,
        price: float = 100.0,
        description: str | None = None,
        tags: list[str] | None = None,
        stock_quantity: int = 10,
        featured: bool = False,
        rating: float = 0.0,
        review_count: int = 0,
        is_active: bool = True,
        created_at: datetime | None = None,
        product_id: uuid.UUID | None = None,
    ) -> Product:
        n = next(counter)
        slug = "-".join(name.lower().replace('"', "").split())
        product = Product(
            id=product_id or uuid.uuid4(),
            name=name,
            slug=slug,
            description=description or f"{name} by {brand.name}",
            sku=f"SKU-{n:04d}",
            price=price,
            image=f"https://img.example.com/{slug}.jpg",
            images=[],
            category_id=category.id,
            category=category,
            brand_id=brand.id,
            brand=brand,
            tags=tags or [],
            stock_quantity=stock_quantity,
            featured=featured,
            rating=rating,
            review_count=review_count,
            specifications={},
            is_active=is_active,
            created_at=created_at or BASE_TIME + timedelta(days=n),
        )
        return await catalog_repo.save_product(product)

    return _create


@pytest_asyncio.fixture
async def catalog(
    category_factory: Callable[..., Any],
    brand_factory: Callable[..., Any],
    product_factory: Callable[..., Any],
) -> dict[str, Any]:
    """A small electronics catalog: 2 categories, 7 brands, 9 products."""
    phones = await category_factory(name="Smartphones")
    laptops = await category_factory(name="Laptops")
    brands = {
        slug: await brand_factory(name=name, slug=slug)
        for slug, name in [
            ("apple", "Apple"),
            ("samsung", "Samsung"),
            ("google", "Google"),
            ("oneplus", "OnePlus"),
            ("dell", "Dell"),
            ("hp", "HP"),
            ("asus", "ASUS"),
        ]
    }

    specs = [
        ("iPhone 15 Pro", phones, "apple", 189999, 4.9, 128, True, ["5g", "ios"], 50),
        ('MacBook Pro 16"', laptops, "apple", 449999, 4.8, 89, True, ["macos", "pro"], 20),
        ("Galaxy S24 Ultra", phones, "samsung", 159999, 4.7, 156, True, ["5g", "android"], 35),
        ("Google Pixel 8 Pro", phones, "google", 129999, 4.6, 45, False, ["5g", "android"], 25),
        ("Dell XPS 13", laptops, "dell", 179999, 4.5, 67, False, ["windows"], 15),
        ("OnePlus 12", phones, "oneplus", 89999, 4.8, 92, False, ["5g", "android"], 40),
        ("HP Spectre x360", laptops, "hp", 199999, 4.3, 34, False, ["windows", "oled"], 0),
        ("iPhone 14", phones, "apple", 119999, 4.7, 203, False, ["5g", "ios"], 60),
        ("ASUS ROG Strix G15", laptops, "asus", 159999, 4.6, 78, False, ["windows", "gaming"], 10),
    ]
    products = {}
    for name, category, brand, price, rating, reviews, featured, tags, stock in specs:
        products[name] = await product_factory(
            name=name,
            category=category,
            brand=brands[brand],
            price=price,
            rating=rating,
            review_count=reviews,
            featured=featured,
            tags=tags,
            stock_quantity=stock,
        )

    return {
        "categories": {"smartphones": phones, "laptops": laptops},
        "brands": brands,
        "products": products,
    }


# ---------------------------------------------------------------------------
# HTTP clients (repositories overridden, auth real)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    catalog_repo: InMemoryCatalogRepository,
    review_repo: InMemoryReviewRepository,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client backed by the in-memory repositories."""
    app.dependency_overrides[get_catalog_repository] = lambda: catalog_repo
    app.dependency_overrides[get_review_repository] = lambda: review_repo

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
