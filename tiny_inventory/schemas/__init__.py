"""Pydantic schemas for API request/response validation."""

from tiny_inventory.schemas.common import ErrorDetail, ErrorResponse, HealthResponse, PageMeta
from tiny_inventory.schemas.product import (
    ProductCreate,
    ProductOut,
    ProductPage,
    ProductPageMeta,
    ProductQuery,
    ProductSorting,
    ProductUpdate,
    StoreRef,
)
from tiny_inventory.schemas.store import (
    CategorySummary,
    StoreCreate,
    StoreOut,
    StorePage,
    StoreStats,
    StoreUpdate,
    StoreWithCount,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "PageMeta",
    "ProductCreate",
    "ProductOut",
    "ProductPage",
    "ProductPageMeta",
    "ProductQuery",
    "ProductSorting",
    "ProductUpdate",
    "StoreRef",
    "CategorySummary",
    "StoreCreate",
    "StoreOut",
    "StorePage",
    "StoreStats",
    "StoreUpdate",
    "StoreWithCount",
]
