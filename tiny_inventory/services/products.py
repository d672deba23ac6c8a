"""Product service: CRUD and the filterable product listing.

Filter rules (all optional, combined with AND):
- search: case-insensitive substring of name
- storeId / category: exact match
- stockStatus: quantity bucket (see services.stock)
- minPrice / maxPrice: inclusive price range
- minStock / maxStock: inclusive quantity range, only when stockStatus is unset

Sorting uses sortBy/sortOrder with the product id as tie-breaker so that
pages are stable.
"""

import logging
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tiny_inventory.models import Product, Store
from tiny_inventory.schemas import (
    ProductCreate,
    ProductOut,
    ProductPage,
    ProductPageMeta,
    ProductQuery,
    ProductSorting,
    ProductUpdate,
    StoreRef,
)
from tiny_inventory.services.errors import InvalidReferenceError, NotFoundError
from tiny_inventory.services.pagination import build_page_meta, calculate_skip
from tiny_inventory.services.stock import classify_stock, stock_status_condition
from tiny_inventory.storage.postgres import get_session

logger = logging.getLogger("uvicorn.error")

SORT_COLUMNS = {
    "name": Product.name,
    "category": Product.category,
    "price": Product.price,
    "quantity": Product.quantity,
    "createdAt": Product.created_at,
}


def to_product_out(product: Product, store: Store | None = None) -> ProductOut:
    """Convert a Product row (and optionally its store) to the API schema."""
    return ProductOut(
        id=product.id,
        name=product.name,
        category=product.category,
        price=product.price,
        quantity=product.quantity,
        stock_status=classify_stock(product.quantity),
        store_id=product.store_id,
        created_at=product.created_at,
        updated_at=product.updated_at,
        store=StoreRef(id=store.id, name=store.name) if store is not None else None,
    )


def build_product_filters(query: ProductQuery) -> list[ColumnElement[bool]]:
    """Translate list filters into SQL conditions.

    Args:
        query: Validated list query.

    Returns:
        Conditions to AND together; empty when no filter is set.
    """
    conditions: list[ColumnElement[bool]] = []

    if query.search:
        conditions.append(Product.name.icontains(query.search, autoescape=True))

    if query.store_id is not None:
        conditions.append(Product.store_id == query.store_id)

    if query.stock_status is not None:
        conditions.append(stock_status_condition(query.stock_status))

    if query.category:
        conditions.append(Product.category == query.category)

    if query.min_price is not None:
        conditions.append(Product.price >= query.min_price)
    if query.max_price is not None:
        conditions.append(Product.price <= query.max_price)

    # Explicit stock range only applies without a stock status bucket
    if query.stock_status is None:
        if query.min_stock is not None:
            conditions.append(Product.quantity >= query.min_stock)
        if query.max_stock is not None:
            conditions.append(Product.quantity <= query.max_stock)

    return conditions


async def _get_store_or_400(session: AsyncSession, store_id: UUID) -> Store:
    store = await session.get(Store, store_id)
    if store is None:
        raise InvalidReferenceError(
            f"Store with ID {store_id} not found",
            detail={"field": "storeId", "storeId": str(store_id)},
        )
    return store


async def _get_product_or_404(session: AsyncSession, product_id: UUID) -> Product:
    result = await session.execute(
        select(Product).options(selectinload(Product.store)).where(Product.id == product_id)
    )
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def create_product(data: ProductCreate) -> ProductOut:
    """Create a product in an existing store.

    Raises:
        InvalidReferenceError: If storeId does not reference a store.
    """
    async with get_session() as session:
        store = await _get_store_or_400(session, data.store_id)
        product = Product(
            name=data.name,
            category=data.category,
            price=data.price,
            quantity=data.quantity,
            store_id=store.id,
        )
        session.add(product)
        await session.flush()
        await session.refresh(product)
        logger.info("[products] created id=%s store_id=%s", product.id, store.id)
        return to_product_out(product, store)


async def list_products(query: ProductQuery) -> ProductPage:
    """List products matching the query's filters, sorted and paginated."""
    conditions = build_product_filters(query)
    column = SORT_COLUMNS[query.sort_by]
    order = column.asc() if query.sort_order == "asc" else column.desc()

    stmt = (
        select(Product)
        .options(selectinload(Product.store))
        .where(*conditions)
        .order_by(order, Product.id)
        .offset(calculate_skip(query.page, query.limit))
        .limit(query.limit)
    )
    count_stmt = select(func.count(Product.id)).where(*conditions)

    async with get_session() as session:
        products = (await session.execute(stmt)).scalars().all()
        total = (await session.execute(count_stmt)).scalar() or 0
        data = [to_product_out(product, product.store) for product in products]

    page_meta = build_page_meta(total, query.page, query.limit)
    return ProductPage(
        data=data,
        meta=ProductPageMeta(
            **page_meta.model_dump(),
            filters=query.applied_filters(),
            sorting=ProductSorting(sort_by=query.sort_by, sort_order=query.sort_order),
        ),
    )


async def get_product(product_id: UUID) -> ProductOut:
    """Get a product with its store.

    Raises:
        NotFoundError: If the product does not exist.
    """
    async with get_session() as session:
        product = await _get_product_or_404(session, product_id)
        return to_product_out(product, product.store)


async def update_product(product_id: UUID, data: ProductUpdate) -> ProductOut:
    """Apply a partial update to a product.

    Raises:
        InvalidReferenceError: If a new storeId does not reference a store.
        NotFoundError: If the product does not exist.
    """
    changes = data.model_dump(exclude_none=True)
    async with get_session() as session:
        if data.store_id is not None:
            await _get_store_or_400(session, data.store_id)

        product = await _get_product_or_404(session, product_id)
        for field, value in changes.items():
            setattr(product, field, value)

        if changes:
            await session.flush()
            await session.refresh(product)
            logger.info("[products] updated id=%s fields=%s", product_id, sorted(changes))

        store = await session.get(Store, product.store_id)
        return to_product_out(product, store)


async def delete_product(product_id: UUID) -> None:
    """Delete a product.

    Raises:
        NotFoundError: If the product does not exist.
    """
    async with get_session() as session:
        product = await _get_product_or_404(session, product_id)
        await session.delete(product)
        logger.info("[products] deleted id=%s", product_id)
