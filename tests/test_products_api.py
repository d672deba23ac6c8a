"""Tests for /api/products endpoints."""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient


async def _create_store(client: AsyncClient, name: str) -> dict:
    response = await client.post("/api/stores", json={"name": name, "address": f"{name} street"})
    assert response.status_code == 201
    return response.json()


async def _create_product(client: AsyncClient, store: dict, name: str, category: str, price: float, quantity: int) -> dict:
    response = await client.post(
        "/api/products",
        json={"name": name, "category": category, "price": price, "quantity": quantity, "storeId": store["id"]},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def catalog(client: AsyncClient) -> dict:
    """Two stores and four products spread across stock levels."""
    main = await _create_store(client, "Main")
    annex = await _create_store(client, "Annex")
    products = {
        "laptop": await _create_product(client, main, "Laptop", "Electronics", 1000, 25),
        "mouse": await _create_product(client, main, "Mouse", "Electronics", 20, 5),
        "cable": await _create_product(client, main, "Cable", "Accessories", 10, 0),
        "stand": await _create_product(client, annex, "Laptop Stand", "Accessories", 50, 12),
    }
    return {"main": main, "annex": annex, "products": products}


def _names(response) -> list[str]:
    assert response.status_code == 200, response.text
    return [item["name"] for item in response.json()["data"]]


@pytest.mark.asyncio
async def test_create_product(client: AsyncClient):
    store = await _create_store(client, "Main")
    data = await _create_product(client, store, "Webcam HD", "Electronics", 89.99, 8)

    assert data["name"] == "Webcam HD"
    assert Decimal(data["price"]) == Decimal("89.99")
    assert data["quantity"] == 8
    assert data["stockStatus"] == "low_stock"
    assert data["storeId"] == store["id"]
    assert data["store"] == {"id": store["id"], "name": "Main"}


@pytest.mark.asyncio
async def test_create_product_unknown_store(client: AsyncClient):
    missing = uuid4()
    response = await client.post(
        "/api/products",
        json={"name": "Ghost", "category": "Misc", "price": 1, "quantity": 1, "storeId": str(missing)},
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_REFERENCE"
    assert error["message"] == f"Store with ID {missing} not found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"price": -1}, "price"),
        ({"price": 10.001}, "price"),
        ({"quantity": -1}, "quantity"),
        ({"quantity": 1.5}, "quantity"),
        ({"name": ""}, "name"),
        ({"category": "c" * 101}, "category"),
        ({"storeId": "nope"}, "storeId"),
    ],
)
async def test_create_product_validation(client: AsyncClient, overrides: dict, field: str):
    store = await _create_store(client, "Main")
    body = {"name": "Thing", "category": "Misc", "price": 1, "quantity": 1, "storeId": store["id"]}
    body.update(overrides)

    response = await client.post("/api/products", json=body)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert field in {item["field"] for item in error["detail"]}


@pytest.mark.asyncio
async def test_get_product(client: AsyncClient, catalog: dict):
    product = catalog["products"]["cable"]
    response = await client.get(f"/api/products/{product['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["stockStatus"] == "out_of_stock"
    assert data["store"]["name"] == "Main"


@pytest.mark.asyncio
async def test_get_product_not_found(client: AsyncClient, db):
    response = await client.get(f"/api/products/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_defaults(client: AsyncClient, catalog: dict):
    response = await client.get("/api/products")
    assert response.status_code == 200
    meta = response.json()["meta"]
    assert meta["total"] == 4
    assert meta["page"] == 1
    assert meta["limit"] == 10
    assert meta["totalPages"] == 1
    assert meta["filters"] == {}
    assert meta["sorting"] == {"sortBy": "createdAt", "sortOrder": "desc"}


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(client: AsyncClient, catalog: dict):
    response = await client.get("/api/products", params={"search": "LAPTOP", "sortBy": "name", "sortOrder": "asc"})
    assert _names(response) == ["Laptop", "Laptop Stand"]
    assert response.json()["meta"]["filters"] == {"search": "LAPTOP"}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client: AsyncClient, catalog: dict):
    response = await client.get("/api/products", params={"search": "%"})
    assert _names(response) == []


@pytest.mark.asyncio
async def test_filter_by_store_and_category(client: AsyncClient, catalog: dict):
    response = await client.get(
        "/api/products",
        params={"storeId": catalog["main"]["id"], "category": "Electronics", "sortBy": "name", "sortOrder": "asc"},
    )
    assert _names(response) == ["Laptop", "Mouse"]
    assert response.json()["meta"]["filters"] == {"storeId": catalog["main"]["id"], "category": "Electronics"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("in_stock", ["Laptop", "Laptop Stand"]),
        ("low_stock", ["Mouse"]),
        ("out_of_stock", ["Cable"]),
    ],
)
async def test_filter_by_stock_status(client: AsyncClient, catalog: dict, status: str, expected: list[str]):
    response = await client.get("/api/products", params={"stockStatus": status, "sortBy": "name", "sortOrder": "asc"})
    assert _names(response) == expected


@pytest.mark.asyncio
async def test_stock_range_ignored_with_stock_status(client: AsyncClient, catalog: dict):
    response = await client.get(
        "/api/products",
        params={"stockStatus": "in_stock", "maxStock": 5, "sortBy": "name", "sortOrder": "asc"},
    )
    assert _names(response) == ["Laptop", "Laptop Stand"]


@pytest.mark.asyncio
async def test_filter_by_stock_range(client: AsyncClient, catalog: dict):
    response = await client.get(
        "/api/products",
        params={"minStock": 5, "maxStock": 12, "sortBy": "quantity", "sortOrder": "asc"},
    )
    assert _names(response) == ["Mouse", "Laptop Stand"]


@pytest.mark.asyncio
async def test_filter_by_price_range_inclusive(client: AsyncClient, catalog: dict):
    response = await client.get(
        "/api/products",
        params={"minPrice": 20, "maxPrice": 50, "sortBy": "price", "sortOrder": "asc"},
    )
    assert _names(response) == ["Mouse", "Laptop Stand"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"minPrice": 100, "maxPrice": 10}, "maxPrice must be greater than or equal to minPrice"),
        ({"minStock": 10, "maxStock": 1}, "maxStock must be greater than or equal to minStock"),
    ],
)
async def test_inverted_ranges_are_rejected(client: AsyncClient, catalog: dict, params: dict, message: str):
    response = await client.get("/api/products", params=params)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(message in item["message"] for item in error["detail"])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"sortBy": "color"},
        {"sortOrder": "up"},
        {"stockStatus": "plenty"},
        {"minPrice": -1},
        {"storeId": "not-a-uuid"},
        {"limit": 101},
    ],
)
async def test_invalid_query_values(client: AsyncClient, db, params: dict):
    response = await client.get("/api/products", params=params)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_query_params_are_ignored(client: AsyncClient, catalog: dict):
    response = await client.get("/api/products", params={"color": "red"})
    assert response.status_code == 200
    assert response.json()["meta"]["total"] == 4


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("sort_by", "sort_order", "expected"),
    [
        ("price", "asc", ["Cable", "Mouse", "Laptop Stand", "Laptop"]),
        ("price", "desc", ["Laptop", "Laptop Stand", "Mouse", "Cable"]),
        ("quantity", "asc", ["Cable", "Mouse", "Laptop Stand", "Laptop"]),
        ("name", "desc", ["Mouse", "Laptop Stand", "Laptop", "Cable"]),
    ],
)
async def test_sorting(client: AsyncClient, catalog: dict, sort_by: str, sort_order: str, expected: list[str]):
    response = await client.get("/api/products", params={"sortBy": sort_by, "sortOrder": sort_order})
    assert _names(response) == expected
    assert response.json()["meta"]["sorting"] == {"sortBy": sort_by, "sortOrder": sort_order}


@pytest.mark.asyncio
async def test_pagination(client: AsyncClient, catalog: dict):
    first = await client.get("/api/products", params={"limit": 3, "sortBy": "name", "sortOrder": "asc"})
    second = await client.get("/api/products", params={"limit": 3, "page": 2, "sortBy": "name", "sortOrder": "asc"})

    assert _names(first) == ["Cable", "Laptop", "Laptop Stand"]
    assert _names(second) == ["Mouse"]
    assert second.json()["meta"] == {
        "total": 4,
        "page": 2,
        "limit": 3,
        "totalPages": 2,
        "filters": {},
        "sorting": {"sortBy": "name", "sortOrder": "asc"},
    }


@pytest.mark.asyncio
async def test_update_product(client: AsyncClient, catalog: dict):
    product = catalog["products"]["laptop"]
    response = await client.patch(f"/api/products/{product['id']}", json={"quantity": 3, "price": 899.5})
    assert response.status_code == 200
    data = response.json()
    assert data["quantity"] == 3
    assert data["stockStatus"] == "low_stock"
    assert Decimal(data["price"]) == Decimal("899.50")
    assert data["name"] == "Laptop"


@pytest.mark.asyncio
async def test_update_product_null_means_unchanged(client: AsyncClient, catalog: dict):
    product = catalog["products"]["mouse"]
    response = await client.patch(f"/api/products/{product['id']}", json={"price": None})
    assert response.status_code == 200
    assert Decimal(response.json()["price"]) == Decimal("20")


@pytest.mark.asyncio
async def test_update_product_moves_store(client: AsyncClient, catalog: dict):
    product = catalog["products"]["cable"]
    response = await client.patch(f"/api/products/{product['id']}", json={"storeId": catalog["annex"]["id"]})
    assert response.status_code == 200
    assert response.json()["store"] == {"id": catalog["annex"]["id"], "name": "Annex"}


@pytest.mark.asyncio
async def test_update_product_unknown_store_leaves_product_untouched(client: AsyncClient, catalog: dict):
    product = catalog["products"]["cable"]
    response = await client.patch(
        f"/api/products/{product['id']}",
        json={"storeId": str(uuid4()), "name": "Renamed"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REFERENCE"

    unchanged = (await client.get(f"/api/products/{product['id']}")).json()
    assert unchanged["name"] == "Cable"
    assert unchanged["storeId"] == catalog["main"]["id"]


@pytest.mark.asyncio
async def test_update_product_not_found(client: AsyncClient, db):
    response = await client.patch(f"/api/products/{uuid4()}", json={"name": "X"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_product(client: AsyncClient, catalog: dict):
    product = catalog["products"]["mouse"]
    response = await client.delete(f"/api/products/{product['id']}")
    assert response.status_code == 204

    assert (await client.get(f"/api/products/{product['id']}")).status_code == 404
    assert (await client.delete(f"/api/products/{product['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_create_product_rejects_quantity_beyond_integer_column(client: AsyncClient):
    store = await _create_store(client, "Main")
    body = {"name": "Bulk", "category": "Misc", "price": 1, "quantity": 2**63, "storeId": store["id"]}

    response = await client.post("/api/products", json=body)
    assert response.status_code == 400
    assert response.json()["error"]["detail"][0]["field"] == "quantity"

    body["quantity"] = 2_147_483_647
    assert (await client.post("/api/products", json=body)).status_code == 201


@pytest.mark.asyncio
async def test_update_product_rejects_quantity_beyond_integer_column(client: AsyncClient, catalog: dict):
    product = catalog["products"]["mouse"]
    response = await client.patch(f"/api/products/{product['id']}", json={"quantity": 2**31})
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 2**63}, {"minStock": 2**63}, {"maxStock": 2**31}])
async def test_list_products_rejects_out_of_range_integers(client: AsyncClient, db, params: dict):
    response = await client.get("/api/products", params=params)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
