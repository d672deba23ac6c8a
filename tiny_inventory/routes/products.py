"""Product endpoints.

POST   /api/products        - create (storeId must exist)
GET    /api/products        - filter, sort and paginate
GET    /api/products/{id}   - single product with its store
PATCH  /api/products/{id}   - partial update
DELETE /api/products/{id}   - delete
"""

from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

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
from tiny_inventory.schemas import (
    ErrorResponse,
    ProductCreate,
    ProductOut,
    ProductPage,
    ProductQuery,
    ProductUpdate,
)
from tiny_inventory.schemas.product import SortField, SortOrder
from tiny_inventory.services import products as product_service

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Product not found"}}
BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Validation error or unknown store"}}


@router.post(
    "",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_product(body: ProductCreate) -> ProductOut:
    """Create a new product in an existing store."""
    return await product_service.create_product(body)


@router.get("", response_model=ProductPage, responses=BAD_REQUEST)
async def list_products(
    page: int = Query(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="Page number"),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page"),
    search: str | None = Query(
        default=None,
        max_length=MAX_NAME_LENGTH,
        description="Search by product name (case-insensitive)",
        examples=["iPhone"],
    ),
    store_id: UUID | None = Query(default=None, alias="storeId", description="Filter by store ID"),
    stock_status: StockStatus | None = Query(
        default=None,
        alias="stockStatus",
        description="Filter by stock status",
    ),
    category: str | None = Query(
        default=None,
        max_length=MAX_CATEGORY_LENGTH,
        description="Filter by category",
        examples=["Electronics"],
    ),
    min_price: float | None = Query(default=None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: float | None = Query(
        default=None,
        alias="maxPrice",
        ge=0,
        description="Maximum price (must be >= minPrice)",
    ),
    min_stock: int | None = Query(
        default=None,
        alias="minStock",
        ge=0,
        le=MAX_QUANTITY,
        description="Minimum stock level",
    ),
    max_stock: int | None = Query(
        default=None,
        alias="maxStock",
        ge=0,
        le=MAX_QUANTITY,
        description="Maximum stock level (must be >= minStock)",
    ),
    sort_by: SortField = Query(default="createdAt", alias="sortBy", description="Field to sort by"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder", description="Sort order"),
) -> ProductPage:
    """Get products with filtering, sorting and pagination.

    minStock/maxStock are ignored when stockStatus is given.
    """
    try:
        query = ProductQuery(
            page=page,
            limit=limit,
            search=search,
            store_id=store_id,
            stock_status=stock_status,
            category=category,
            min_price=min_price,
            max_price=max_price,
            min_stock=min_stock,
            max_stock=max_stock,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValidationError as e:
        # Cross-field rules (max >= min) live on the model; report like any query error.
        raise RequestValidationError(
            [{**err, "loc": ("query", *err["loc"])} for err in e.errors(include_context=False)]
        )

    return await product_service.list_products(query)


@router.get("/{product_id}", response_model=ProductOut, responses=NOT_FOUND)
async def get_product(
    product_id: UUID = Path(description="Product UUID"),
) -> ProductOut:
    """Get a product by ID."""
    return await product_service.get_product(product_id)


@router.patch("/{product_id}", response_model=ProductOut, responses={**NOT_FOUND, **BAD_REQUEST})
async def update_product(
    body: ProductUpdate,
    product_id: UUID = Path(description="Product UUID"),
) -> ProductOut:
    """Update a product."""
    return await product_service.update_product(product_id, body)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_product(
    product_id: UUID = Path(description="Product UUID"),
) -> Response:
    """Delete a product."""
    await product_service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
