"""Schemas for the products resource (/api/products)."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from tiny_inventory.constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_CATEGORY_LENGTH,
    MAX_LIMIT,
    MAX_NAME_LENGTH,
    MAX_PAGE,
    MAX_QUANTITY,
    StockStatus,
)
from tiny_inventory.schemas.common import PageMeta

SortField = Literal["name", "category", "price", "quantity", "createdAt"]
SortOrder = Literal["asc", "desc"]


class ProductCreate(BaseModel):
    """Request body for creating a product."""

    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH, examples=["iPhone 15 Pro"])
    category: str = Field(min_length=1, max_length=MAX_CATEGORY_LENGTH, examples=["Electronics"])
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2, examples=[999.99])
    quantity: int = Field(ge=0, le=MAX_QUANTITY, examples=[50])
    store_id: UUID = Field(alias="storeId")

    model_config = {"str_strip_whitespace": True, "extra": "forbid", "populate_by_name": True}


class ProductUpdate(BaseModel):
    """Request body for a partial product update."""

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    category: str | None = Field(default=None, min_length=1, max_length=MAX_CATEGORY_LENGTH)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    quantity: int | None = Field(default=None, ge=0, le=MAX_QUANTITY)
    store_id: UUID | None = Field(default=None, alias="storeId")

    model_config = {"str_strip_whitespace": True, "extra": "forbid", "populate_by_name": True}


class StoreRef(BaseModel):
    """Short store reference embedded in products."""

    id: UUID
    name: str

    model_config = {"from_attributes": True}


class ProductOut(BaseModel):
    """A product as returned by the API."""

    id: UUID
    name: str
    category: str
    price: Decimal
    quantity: int
    stock_status: StockStatus = Field(alias="stockStatus")
    store_id: UUID = Field(alias="storeId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    store: StoreRef | None = None

    model_config = {"populate_by_name": True}


class ProductQuery(BaseModel):
    """Filters, sorting and pagination for GET /api/products.

    minStock/maxStock are ignored when stockStatus is set.
    """

    page: int = Field(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    search: str | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    store_id: UUID | None = Field(default=None, alias="storeId")
    stock_status: StockStatus | None = Field(default=None, alias="stockStatus")
    category: str | None = Field(default=None, max_length=MAX_CATEGORY_LENGTH)
    min_price: float | None = Field(default=None, alias="minPrice", ge=0)
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0)
    min_stock: int | None = Field(default=None, alias="minStock", ge=0, le=MAX_QUANTITY)
    max_stock: int | None = Field(default=None, alias="maxStock", ge=0, le=MAX_QUANTITY)
    sort_by: SortField = Field(default="createdAt", alias="sortBy")
    sort_order: SortOrder = Field(default="desc", alias="sortOrder")

    model_config = {"str_strip_whitespace": True, "populate_by_name": True}

    @field_validator("search", "category")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    @model_validator(mode="after")
    def _check_ranges(self) -> "ProductQuery":
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("maxPrice must be greater than or equal to minPrice")
        if self.min_stock is not None and self.max_stock is not None and self.max_stock < self.min_stock:
            raise ValueError("maxStock must be greater than or equal to minStock")
        return self

    def applied_filters(self) -> dict[str, Any]:
        """Filters that were actually supplied, keyed by their wire names."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"page", "limit", "sort_by", "sort_order"},
        )


class ProductSorting(BaseModel):
    sort_by: SortField = Field(alias="sortBy")
    sort_order: SortOrder = Field(alias="sortOrder")

    model_config = {"populate_by_name": True}


class ProductPageMeta(PageMeta):
    """Pagination metadata plus the filters and sorting that produced the page."""

    filters: dict[str, Any] = Field(default_factory=dict)
    sorting: ProductSorting


class ProductPage(BaseModel):
    """Paginated list of products."""

    data: list[ProductOut]
    meta: ProductPageMeta
