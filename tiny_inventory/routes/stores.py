"""Store endpoints.

POST   /api/stores             - create
GET    /api/stores             - paginated list with product counts
GET    /api/stores/{id}        - single store with product count
GET    /api/stores/{id}/stats  - inventory statistics
PATCH  /api/stores/{id}        - partial update
DELETE /api/stores/{id}        - delete store and its products

Routers are thin: call services for business logic.
"""

from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from tiny_inventory.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE
from tiny_inventory.schemas import (
    ErrorResponse,
    StoreCreate,
    StoreOut,
    StorePage,
    StoreStats,
    StoreUpdate,
    StoreWithCount,
)
from tiny_inventory.services import stores as store_service

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Store not found"}}


@router.post(
    "",
    response_model=StoreOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
)
async def create_store(body: StoreCreate) -> StoreOut:
    """Create a new store."""
    return await store_service.create_store(body)


@router.get("", response_model=StorePage)
async def list_stores(
    page: int = Query(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="Page number"),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page"),
) -> StorePage:
    """Get all stores with pagination, newest first."""
    return await store_service.list_stores(page=page, limit=limit)


@router.get("/{store_id}/stats", response_model=StoreStats, responses=NOT_FOUND)
async def get_store_stats(
    store_id: UUID = Path(description="Store UUID"),
) -> StoreStats:
    """Get store statistics including inventory value."""
    return await store_service.get_store_stats(store_id)


@router.get("/{store_id}", response_model=StoreWithCount, responses=NOT_FOUND)
async def get_store(
    store_id: UUID = Path(description="Store UUID"),
) -> StoreWithCount:
    """Get a store by ID."""
    return await store_service.get_store(store_id)


@router.patch("/{store_id}", response_model=StoreOut, responses=NOT_FOUND)
async def update_store(
    body: StoreUpdate,
    store_id: UUID = Path(description="Store UUID"),
) -> StoreOut:
    """Update a store."""
    return await store_service.update_store(store_id, body)


@router.delete("/{store_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_store(
    store_id: UUID = Path(description="Store UUID"),
) -> Response:
    """Delete a store together with its products."""
    await store_service.delete_store(store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
