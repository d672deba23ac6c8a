"""Store service: CRUD and inventory statistics.

Statistics are computed with database aggregates:
1. Product count for the store
2. Per-category count and SUM(price * quantity)
3. Low-stock count (quantity < LOW_STOCK_THRESHOLD)
4. Total inventory value SUM(price * quantity)

Deleting a store removes its products first, in the same transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tiny_inventory.constants import DEFAULT_LIMIT, DEFAULT_PAGE, LOW_STOCK_THRESHOLD
from tiny_inventory.models import Product, Store
from tiny_inventory.schemas import (
    CategorySummary,
    StoreCreate,
    StoreOut,
    StorePage,
    StoreStats,
    StoreUpdate,
    StoreWithCount,
)
from tiny_inventory.services.errors import NotFoundError
from tiny_inventory.services.pagination import build_page_meta, calculate_skip
from tiny_inventory.storage.postgres import get_session

logger = logging.getLogger("uvicorn.error")


def _to_store_with_count(store: Store, product_count: int) -> StoreWithCount:
    return StoreWithCount(
        id=store.id,
        name=store.name,
        address=store.address,
        created_at=store.created_at,
        updated_at=store.updated_at,
        product_count=product_count,
    )


async def _get_store_or_404(session: AsyncSession, store_id: UUID) -> Store:
    store = await session.get(Store, store_id)
    if store is None:
        raise NotFoundError("Store", store_id)
    return store


async def create_store(data: StoreCreate) -> StoreOut:
    """Create a new store."""
    async with get_session() as session:
        store = Store(name=data.name, address=data.address)
        session.add(store)
        await session.flush()
        await session.refresh(store)
        logger.info("[stores] created id=%s name=%r", store.id, store.name)
        return StoreOut.model_validate(store)


async def list_stores(page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> StorePage:
    """List stores newest first, each with its product count.

    Args:
        page: 1-based page number.
        limit: Page size.

    Returns:
        StorePage with data and pagination meta.
    """
    product_count = func.count(Product.id).label("product_count")
    query = (
        select(Store, product_count)
        .outerjoin(Product, Product.store_id == Store.id)
        .group_by(Store.id)
        .order_by(Store.created_at.desc(), Store.id)
        .offset(calculate_skip(page, limit))
        .limit(limit)
    )

    async with get_session() as session:
        rows = (await session.execute(query)).all()
        total = (await session.execute(select(func.count()).select_from(Store))).scalar() or 0

    return StorePage(
        data=[_to_store_with_count(store, count) for store, count in rows],
        meta=build_page_meta(total, page, limit),
    )


async def get_store(store_id: UUID) -> StoreWithCount:
    """Get a store with its product count.

    Raises:
        NotFoundError: If the store does not exist.
    """
    async with get_session() as session:
        store = await _get_store_or_404(session, store_id)
        count = (
            await session.execute(
                select(func.count(Product.id)).where(Product.store_id == store_id)
            )
        ).scalar() or 0
        return _to_store_with_count(store, count)


async def update_store(store_id: UUID, data: StoreUpdate) -> StoreOut:
    """Apply a partial update to a store.

    Raises:
        NotFoundError: If the store does not exist.
    """
    changes = data.model_dump(exclude_none=True)
    async with get_session() as session:
        store = await _get_store_or_404(session, store_id)
        for field, value in changes.items():
            setattr(store, field, value)
        if changes:
            await session.flush()
            await session.refresh(store)
            logger.info("[stores] updated id=%s fields=%s", store_id, sorted(changes))
        return StoreOut.model_validate(store)


async def delete_store(store_id: UUID) -> None:
    """Delete a store and all of its products atomically.

    Raises:
        NotFoundError: If the store does not exist.
    """
    async with get_session() as session:
        await _get_store_or_404(session, store_id)
        result = await session.execute(delete(Product).where(Product.store_id == store_id))
        await session.execute(delete(Store).where(Store.id == store_id))
        logger.info("[stores] deleted id=%s products_removed=%s", store_id, result.rowcount)


async def get_store_stats(store_id: UUID) -> StoreStats:
    """Compute inventory statistics for a store.

    Returns:
        StoreStats with totals, per-category summary and low-stock count.

    Raises:
        NotFoundError: If the store does not exist.
    """
    line_value = Product.price * Product.quantity

    async with get_session() as session:
        await _get_store_or_404(session, store_id)

        total_products = (
            await session.execute(
                select(func.count(Product.id)).where(Product.store_id == store_id)
            )
        ).scalar() or 0

        category_rows = (
            await session.execute(
                select(
                    Product.category,
                    func.count(Product.id),
                    func.coalesce(func.sum(line_value), 0),
                )
                .where(Product.store_id == store_id)
                .group_by(Product.category)
                .order_by(Product.category)
            )
        ).all()

        low_stock_count = (
            await session.execute(
                select(func.count(Product.id)).where(
                    Product.store_id == store_id,
                    Product.quantity < LOW_STOCK_THRESHOLD,
                )
            )
        ).scalar() or 0

        total_value = (
            await session.execute(
                select(func.coalesce(func.sum(line_value), 0)).where(Product.store_id == store_id)
            )
        ).scalar() or 0

    return StoreStats(
        store_id=store_id,
        total_products=total_products,
        total_inventory_value=round(float(total_value), 2),
        category_summary=[
            CategorySummary(category=category, count=count, total_value=round(float(value), 2))
            for category, count, value in category_rows
        ],
        low_stock_count=low_stock_count,
    )
