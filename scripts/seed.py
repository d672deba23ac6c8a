#!/usr/bin/env python3
"""Seed database with sample stores and products.

Creates:
- Three stores (electronics, fashion, tech)
- A handful of products per store, some of them below the low-stock threshold

The script is destructive: existing products and stores are deleted first,
so running it twice leaves the same data set.

Usage:
    python -m scripts.seed
"""

import asyncio
import os
import sys
from decimal import Decimal

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

load_dotenv()

from tiny_inventory.models import Product, Store
from tiny_inventory.storage.postgres import close_db, get_session, init_db

# ============================================================
# Sample data
# ============================================================
# Each store lists (name, category, price, quantity) tuples.

SAMPLE_STORES = [
    {
        "name": "Downtown Electronics",
        "address": "123 Main St, New York, NY 10001",
        "products": [
            ("Laptop Pro 15", "Electronics", "1299.99", 25),
            ("Wireless Mouse", "Electronics", "29.99", 150),
            ("USB-C Cable", "Accessories", "12.99", 200),
            ("4K Monitor", "Electronics", "599.99", 15),
            ("Mechanical Keyboard", "Electronics", "149.99", 50),
            ("Webcam HD", "Electronics", "89.99", 8),
            ("Phone Stand", "Accessories", "19.99", 3),
        ],
    },
    {
        "name": "Westside Fashion",
        "address": "456 West Ave, Los Angeles, CA 90001",
        "products": [
            ("Cotton T-Shirt", "Clothing", "24.99", 120),
            ("Denim Jeans", "Clothing", "79.99", 85),
            ("Summer Dress", "Clothing", "59.99", 45),
            ("Leather Belt", "Accessories", "34.99", 60),
            ("Running Shoes", "Footwear", "89.99", 40),
            ("Winter Jacket", "Clothing", "149.99", 5),
            ("Baseball Cap", "Accessories", "19.99", 2),
        ],
    },
    {
        "name": "Tech Hub Central",
        "address": "789 Tech Blvd, San Francisco, CA 94102",
        "products": [
            ("Smartphone X", "Electronics", "899.99", 30),
            ("Tablet Pro", "Electronics", "649.99", 20),
            ("Wireless Earbuds", "Electronics", "159.99", 75),
            ("Smart Watch", "Electronics", "399.99", 12),
            ("Portable Charger", "Accessories", "39.99", 100),
            ("Bluetooth Speaker", "Electronics", "79.99", 6),
            ("Screen Protector", "Accessories", "9.99", 250),
            ("Phone Case", "Accessories", "24.99", 4),
        ],
    },
]


async def clear_inventory(session: AsyncSession) -> None:
    """Remove all products and stores."""
    await session.execute(delete(Product))
    await session.execute(delete(Store))


async def seed_stores(session: AsyncSession) -> int:
    """Create sample stores with their products; returns the product count."""
    created = 0
    for store_def in SAMPLE_STORES:
        store = Store(name=store_def["name"], address=store_def["address"])
        session.add(store)
        await session.flush()

        for name, category, price, quantity in store_def["products"]:
            session.add(
                Product(
                    name=name,
                    category=category,
                    price=Decimal(price),
                    quantity=quantity,
                    store_id=store.id,
                )
            )
            created += 1

        print(f"  + {store.name} ({len(store_def['products'])} products)")

    return created


async def seed_database() -> None:
    """Seed database with sample data."""
    await init_db()
    try:
        async with get_session() as session:
            print("Seeding database...")

            print("\nClearing existing inventory...")
            await clear_inventory(session)

            print("\nCreating stores...")
            product_count = await seed_stores(session)

        print(f"\nDatabase seeded: {len(SAMPLE_STORES)} stores, {product_count} products.")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
