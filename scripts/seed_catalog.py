"""Seed script for a demo catalog.

Creates:
- 2 categories (Smartphones, Laptops)
- 7 brands
- 9 products with ratings, review counts and stock, indexed for search

Existing rows are wiped first, so the script can be re-run.

Usage:
    uv run python -m scripts.seed_catalog
"""

import asyncio
from typing import Any

from sqlalchemy import text

from storefront.core.database import async_session_maker
from storefront.models import Brand, Category, Product
from storefront.repositories import SqlCatalogRepository

CATEGORIES = [
    {
        "name": "Smartphones",
        "slug": "smartphones",
        "description": "Latest smartphones from top brands",
        "image": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=400",
    },
    {
        "name": "Laptops",
        "slug": "laptops",
        "description": "High-performance laptops for work and gaming",
        "image": "https://images.unsplash.com/photo-1496181133206-80ce9b88a853?w=400",
    },
]

BRANDS = [
    {"name": "Apple", "slug": "apple", "website": "https://www.apple.com"},
    {"name": "Samsung", "slug": "samsung", "website": "https://www.samsung.com"},
    {"name": "Google", "slug": "google", "website": "https://store.google.com"},
    {"name": "OnePlus", "slug": "oneplus", "website": "https://www.oneplus.com"},
    {"name": "Dell", "slug": "dell", "website": "https://www.dell.com"},
    {"name": "HP", "slug": "hp", "website": "https://www.hp.com"},
    {"name": "ASUS", "slug": "asus", "website": "https://www.asus.com"},
]

# (category slug, brand slug, product fields)
PRODUCTS: list[tuple[str, str, dict[str, Any]]] = [
    (
        "smartphones",
        "apple",
        {
            "name": "iPhone 15 Pro",
            "sku": "APL-IP15P-128",
            "description": "Titanium design, A17 Pro chip and a 48MP main camera.",
            "price": 189999,
            "original_price": 199999,
            "tags": ["5g", "ios", "titanium", "flagship"],
            "stock_quantity": 50,
            "featured": True,
            "rating": 4.9,
            "review_count": 128,
            "specifications": {"display": "6.1-inch Super Retina XDR", "chip": "A17 Pro"},
        },
    ),
    (
        "laptops",
        "apple",
        {
            "name": 'MacBook Pro 16"',
            "sku": "APL-MBP16-M3",
            "description": "M3 Max chip, Liquid Retina XDR display and all-day battery.",
            "price": 449999,
            "tags": ["macos", "pro", "creator"],
            "stock_quantity": 20,
            "featured": True,
            "rating": 4.8,
            "review_count": 89,
            "specifications": {"display": "16.2-inch Liquid Retina XDR", "chip": "M3 Max"},
        },
    ),
    (
        "smartphones",
        "samsung",
        {
            "name": "Samsung Galaxy S24 Ultra",
            "sku": "SAM-S24U-256",
            "description": "Galaxy AI, built-in S Pen and a 200MP camera.",
            "price": 159999,
            "original_price": 169999,
            "tags": ["5g", "android", "s-pen", "flagship"],
            "stock_quantity": 35,
            "featured": True,
            "rating": 4.7,
            "review_count": 156,
            "specifications": {"display": "6.8-inch Dynamic AMOLED 2X"},
        },
    ),
    (
        "smartphones",
        "google",
        {
            "name": "Google Pixel 8 Pro",
            "sku": "GOO-PX8P-128",
            "description": "Tensor G3 with the best of Google AI and a pro-level camera.",
            "price": 129999,
            "tags": ["5g", "android", "camera"],
            "stock_quantity": 25,
            "rating": 4.6,
            "review_count": 45,
        },
    ),
    (
        "laptops",
        "dell",
        {
            "name": "Dell XPS 13",
            "sku": "DEL-XPS13-I7",
            "description": "Compact ultrabook with an InfinityEdge display.",
            "price": 179999,
            "tags": ["windows", "ultrabook"],
            "stock_quantity": 15,
            "rating": 4.5,
            "review_count": 67,
        },
    ),
    (
        "smartphones",
        "oneplus",
        {
            "name": "OnePlus 12",
            "sku": "ONP-12-256",
            "description": "Snapdragon 8 Gen 3, Hasselblad camera and 100W charging.",
            "price": 89999,
            "tags": ["5g", "android", "fast-charging"],
            "stock_quantity": 40,
            "rating": 4.8,
            "review_count": 92,
        },
    ),
    (
        "laptops",
        "hp",
        {
            "name": "HP Spectre x360",
            "sku": "HP-SPX360-14",
            "description": "Convertible 2-in-1 with an OLED touch display and pen support.",
            "price": 199999,
            "tags": ["windows", "2-in-1", "oled"],
            "stock_quantity": 0,
            "rating": 4.3,
            "review_count": 34,
        },
    ),
    (
        "smartphones",
        "apple",
        {
            "name": "iPhone 14",
            "sku": "APL-IP14-128",
            "description": "A15 Bionic, dual-camera system and Crash Detection.",
            "price": 119999,
            "original_price": 129999,
            "tags": ["5g", "ios"],
            "stock_quantity": 60,
            "rating": 4.7,
            "review_count": 203,
        },
    ),
    (
        "laptops",
        "asus",
        {
            "name": "ASUS ROG Strix G15",
            "sku": "ASU-ROG-G15",
            "description": "Gaming laptop with a Ryzen 9 CPU and RTX graphics.",
            "price": 159999,
            "tags": ["windows", "gaming", "rtx"],
            "stock_quantity": 10,
            "rating": 4.6,
            "review_count": 78,
        },
    ),
]


def _slugify(name: str) -> str:
    cleaned = "".join(ch if ch.isalnum() else "-" for ch in name.lower())
    return "-".join(part for part in cleaned.split("-") if part)


async def seed() -> None:
    async with async_session_maker() as session:
        # Clean up from previous runs
        for table in ("reviews", "products", "brands", "categories"):
            await session.execute(text(f"DELETE FROM {table}"))
        await session.commit()

    repository = SqlCatalogRepository(async_session_maker)

    categories = {}
    for fields in CATEGORIES:
        categories[fields["slug"]] = await repository.save_category(Category(**fields))

    brands = {}
    for fields in BRANDS:
        brands[fields["slug"]] = await repository.save_brand(Brand(**fields))

    for category_slug, brand_slug, fields in PRODUCTS:
        category = categories[category_slug]
        brand = brands[brand_slug]
        await repository.save_product(
            Product(
                slug=_slugify(fields["name"]),
                image=f"https://placehold.co/400x400?text={_slugify(fields['name'])}",
                category_id=category.id,
                category=category,
                brand_id=brand.id,
                brand=brand,
                **fields,
            )
        )


async def main() -> None:
    await seed()

    print("=" * 60)
    print("  Catalog seed data created successfully!")
    print("=" * 60)
    print(f"  Categories: {len(CATEGORIES)}")
    print(f"  Brands:     {len(BRANDS)}")
    print(f"  Products:   {len(PRODUCTS)}")


if __name__ == "__main__":
    asyncio.run(main())
