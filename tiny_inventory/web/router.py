"""Web router for the server-rendered inventory pages.

Pages call the same services as the JSON API. Mutations follow
POST/redirect/GET and report success through a short `notice` query
parameter; invalid forms are re-rendered with per-field messages.
"""

import logging
from pathlib import Path
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ValidationError

from tiny_inventory.constants import (
    MAX_ADDRESS_LENGTH,
    MAX_CATEGORY_LENGTH,
    MAX_LIMIT,
    MAX_NAME_LENGTH,
    SORT_FIELDS,
    StockStatus,
)
from tiny_inventory.schemas import ProductCreate, ProductUpdate, StoreCreate, StoreUpdate
from tiny_inventory.services import products as product_service
from tiny_inventory.services import stores as store_service
from tiny_inventory.services.errors import InventoryError, NotFoundError
from tiny_inventory.services.stock import STOCK_STATUS_LABELS
from tiny_inventory.web.filters import ProductFilters, page_from_params, url_with
from tiny_inventory.web.format import format_currency, format_number, page_title

logger = logging.getLogger("uvicorn.error")

# Setup templates
TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["currency"] = format_currency
templates.env.filters["number"] = format_number
templates.env.globals.update(
    page_title=page_title,
    url_with=url_with,
    stock_labels=STOCK_STATUS_LABELS,
    stock_statuses=list(StockStatus),
    sort_fields=SORT_FIELDS,
    limits={
        "name": MAX_NAME_LENGTH,
        "address": MAX_ADDRESS_LENGTH,
        "category": MAX_CATEGORY_LENGTH,
    },
)

web_router = APIRouter()


def _render(request: Request, template: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    context.setdefault("notice", request.query_params.get("notice"))
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def _redirect(path: str, notice: str | None = None) -> RedirectResponse:
    return RedirectResponse(url_with(path, {"notice": notice} if notice else {}), status_code=303)


def _errors_to_record(e: ValidationError) -> dict[str, str]:
    """Map pydantic errors to {field: first message}."""
    record: dict[str, str] = {}
    for err in e.errors(include_context=False):
        field = str(err["loc"][0]) if err["loc"] else "form"
        record.setdefault(field, err["msg"].removeprefix("Value error, "))
    return record


async def _parse_form(
    request: Request,
    model: type[BaseModel],
    fixed: dict[str, str] | None = None,
) -> tuple[dict[str, str], Any, dict[str, str]]:
    """Validate a submitted form against a schema.

    Args:
        fixed: Values taken from the URL rather than the form (e.g. storeId).

    Returns:
        (raw values, parsed model or None, field errors)
    """
    form = await request.form()
    raw = {key: str(value) for key, value in form.items()}
    # Empty inputs mean "not provided" so required-field errors come from the schema.
    values = {key: value for key, value in raw.items() if value.strip()}
    values.update(fixed or {})
    try:
        return raw, model.model_validate(values), {}
    except ValidationError as e:
        return raw, None, _errors_to_record(e)


def _not_found(request: Request, error: NotFoundError) -> HTMLResponse:
    return _render(request, "error.html", status_code=404, title="Not found", message=error.message)


# =============================================================================
# Stores
# =============================================================================


@web_router.get("/")
async def index() -> RedirectResponse:
    return RedirectResponse(url="/stores", status_code=302)


@web_router.get("/stores", response_class=HTMLResponse)
async def stores_page(request: Request) -> HTMLResponse:
    """Paginated list of stores with product counts."""
    page = page_from_params(request.query_params)
    stores = await store_service.list_stores(page=page)
    return _render(request, "stores/list.html", title="Stores", stores=stores, page=page)


@web_router.get("/stores/new", response_class=HTMLResponse)
async def new_store_page(request: Request) -> HTMLResponse:
    return _render(request, "stores/form.html", title="New store", store=None, values={}, errors={})


@web_router.post("/stores/new", response_class=HTMLResponse)
async def create_store_submit(request: Request) -> Response:
    raw, data, errors = await _parse_form(request, StoreCreate)
    if errors:
        return _render(
            request, "stores/form.html", status_code=400, title="New store", store=None, values=raw, errors=errors
        )
    store = await store_service.create_store(data)
    return _redirect(f"/stores/{store.id}", "Store created successfully")


@web_router.get("/stores/{store_id}", response_class=HTMLResponse)
async def store_detail_page(request: Request, store_id: UUID) -> HTMLResponse:
    """Store details, statistics and the filterable products table."""
    try:
        store = await store_service.get_store(store_id)
        stats = await store_service.get_store_stats(store_id)
    except NotFoundError as e:
        return _not_found(request, e)

    filters = ProductFilters.from_params(request.query_params)
    page = page_from_params(request.query_params)
    query, warning = filters.to_query(store_id, page)
    products = await product_service.list_products(query)

    return _render(
        request,
        "stores/detail.html",
        title=store.name,
        store=store,
        stats=stats,
        products=products,
        filters=filters,
        page=page,
        warning=warning,
        base_path=f"/stores/{store_id}",
    )


@web_router.get("/stores/{store_id}/edit", response_class=HTMLResponse)
async def edit_store_page(request: Request, store_id: UUID) -> HTMLResponse:
    try:
        store = await store_service.get_store(store_id)
    except NotFoundError as e:
        return _not_found(request, e)
    values = {"name": store.name, "address": store.address}
    return _render(request, "stores/form.html", title=f"Edit {store.name}", store=store, values=values, errors={})


@web_router.post("/stores/{store_id}/edit", response_class=HTMLResponse)
async def update_store_submit(request: Request, store_id: UUID) -> Response:
    try:
        store = await store_service.get_store(store_id)
    except NotFoundError as e:
        return _not_found(request, e)

    raw, data, errors = await _parse_form(request, StoreCreate)
    if errors:
        return _render(
            request,
            "stores/form.html",
            status_code=400,
            title=f"Edit {store.name}",
            store=store,
            values=raw,
            errors=errors,
        )
    await store_service.update_store(store_id, StoreUpdate(name=data.name, address=data.address))
    return _redirect(f"/stores/{store_id}", "Store updated successfully")


@web_router.post("/stores/{store_id}/delete")
async def delete_store_submit(request: Request, store_id: UUID) -> Response:
    try:
        await store_service.delete_store(store_id)
    except NotFoundError as e:
        return _not_found(request, e)
    return _redirect("/stores", "Store deleted successfully")


# =============================================================================
# Products
# =============================================================================


@web_router.get("/stores/{store_id}/products/new", response_class=HTMLResponse)
async def new_product_page(request: Request, store_id: UUID) -> HTMLResponse:
    try:
        store = await store_service.get_store(store_id)
    except NotFoundError as e:
        return _not_found(request, e)
    return _render(
        request,
        "products/form.html",
        title="Add product",
        product=None,
        store=store,
        stores=None,
        values={"storeId": str(store_id)},
        errors={},
    )


@web_router.post("/stores/{store_id}/products/new", response_class=HTMLResponse)
async def create_product_submit(request: Request, store_id: UUID) -> Response:
    try:
        store = await store_service.get_store(store_id)
    except NotFoundError as e:
        return _not_found(request, e)

    raw, data, errors = await _parse_form(request, ProductCreate, fixed={"storeId": str(store_id)})
    if not errors:
        try:
            await product_service.create_product(data)
        except InventoryError as e:
            errors = {"form": e.message}

    if errors:
        return _render(
            request,
            "products/form.html",
            status_code=400,
            title="Add product",
            product=None,
            store=store,
            stores=None,
            values=raw,
            errors=errors,
        )
    return _redirect(f"/stores/{store_id}", "Product created successfully")


async def _store_choices(current: Any) -> list[Any]:
    """Stores offered when moving a product; the current store is always present."""
    choices: list[Any] = list((await store_service.list_stores(page=1, limit=MAX_LIMIT)).data)
    if current is not None and all(choice.id != current.id for choice in choices):
        choices.insert(0, current)
    return choices


@web_router.get("/products/{product_id}/edit", response_class=HTMLResponse)
async def edit_product_page(request: Request, product_id: UUID) -> HTMLResponse:
    try:
        product = await product_service.get_product(product_id)
    except NotFoundError as e:
        return _not_found(request, e)
    values = {
        "name": product.name,
        "category": product.category,
        "price": str(product.price),
        "quantity": str(product.quantity),
        "storeId": str(product.store_id),
    }
    return _render(
        request,
        "products/form.html",
        title=f"Edit {product.name}",
        product=product,
        store=product.store,
        stores=await _store_choices(product.store),
        values=values,
        errors={},
    )


@web_router.post("/products/{product_id}/edit", response_class=HTMLResponse)
async def update_product_submit(request: Request, product_id: UUID) -> Response:
    try:
        product = await product_service.get_product(product_id)
    except NotFoundError as e:
        return _not_found(request, e)

    raw, data, errors = await _parse_form(request, ProductCreate)
    if not errors:
        try:
            updated = await product_service.update_product(
                product_id,
                ProductUpdate(
                    name=data.name,
                    category=data.category,
                    price=data.price,
                    quantity=data.quantity,
                    store_id=data.store_id,
                ),
            )
        except InventoryError as e:
            errors = {"storeId": e.message}
        else:
            return _redirect(f"/stores/{updated.store_id}", "Product updated successfully")

    return _render(
        request,
        "products/form.html",
        status_code=400,
        title=f"Edit {product.name}",
        product=product,
        store=product.store,
        stores=await _store_choices(product.store),
        values=raw,
        errors=errors,
    )


@web_router.post("/products/{product_id}/delete")
async def delete_product_submit(request: Request, product_id: UUID) -> Response:
    try:
        product = await product_service.get_product(product_id)
        await product_service.delete_product(product_id)
    except NotFoundError as e:
        return _not_found(request, e)
    logger.info("[web] product deleted id=%s", product_id)
    return _redirect(f"/stores/{product.store_id}", "Product deleted successfully")
