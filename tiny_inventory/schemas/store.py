"""Schemas for the stores resource (/api/stores)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from tiny_inventory.constants import MAX_ADDRESS_LENGTH, MAX_NAME_LENGTH
from tiny_inventory.schemas.common import PageMeta


class StoreCreate(BaseModel):
    """Request body for creating a store."""

    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH, examples=["Downtown Electronics"])
    address: str = Field(
        min_length=1,
        max_length=MAX_ADDRESS_LENGTH,
        examples=["123 Main St, New York, NY 10001"],
    )

    model_config = {"str_strip_whitespace": True, "extra": "forbid"}


class StoreUpdate(BaseModel):
    """Request body for a partial store update."""

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    address: str | None = Field(default=None, min_length=1, max_length=MAX_ADDRESS_LENGTH)

    model_config = {"str_strip_whitespace": True, "extra": "forbid"}


class StoreOut(BaseModel):
    """A store as returned by the API."""

    id: UUID
    name: str
    address: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "from_attributes": True}


class StoreWithCount(StoreOut):
    """Store with the number of products it owns."""

    product_count: int = Field(alias="productCount", ge=0)


class StorePage(BaseModel):
    """Paginated list of stores."""

    data: list[StoreWithCount]
    meta: PageMeta


class CategorySummary(BaseModel):
    """Per-category slice of store statistics."""

    category: str
    count: int = Field(ge=0)
    total_value: float = Field(alias="totalValue")

    model_config = {"populate_by_name": True}


class StoreStats(BaseModel):
    """Response payload for GET /api/stores/{id}/stats."""

    store_id: UUID = Field(alias="storeId")
    total_products: int = Field(alias="totalProducts", ge=0)
    total_inventory_value: float = Field(alias="totalInventoryValue")
    category_summary: list[CategorySummary] = Field(alias="categorySummary")
    low_stock_count: int = Field(alias="lowStockCount", ge=0)

    model_config = {"populate_by_name": True}
