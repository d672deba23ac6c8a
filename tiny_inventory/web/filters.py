"""Product filter state carried in the page URL.

Reading is forgiving: unknown or malformed values are dropped so a shared
link never breaks the page. Writing omits empty values and defaults so URLs
stay short, and any filter change starts again from page 1.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlencode
from uuid import UUID

from pydantic import ValidationError

from tiny_inventory.constants import DEFAULT_LIMIT, MAX_PAGE, SORT_FIELDS, SORT_ORDERS, StockStatus
from tiny_inventory.schemas import ProductQuery

DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


def _parse_number(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _parse_page(raw: str | None) -> int:
    try:
        page = int(raw) if raw else 1
    except ValueError:
        return 1
    return min(max(page, 1), MAX_PAGE)


def _rejected_fields(error: ValidationError) -> set[str]:
    """Query fields named by a validation error; cross-field errors name the price range."""
    by_alias = {field.alias: name for name, field in ProductQuery.model_fields.items() if field.alias}
    fields: set[str] = set()
    for err in error.errors(include_context=False):
        if err["loc"]:
            loc = str(err["loc"][0])
            fields.add(by_alias.get(loc, loc))
        else:
            fields.update(("min_price", "max_price"))
    return fields


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


@dataclass(frozen=True)
class ProductFilters:
    """Filters and sorting of the products table on the store page."""

    search: str | None = None
    category: str | None = None
    stock_status: StockStatus | None = None
    min_price: float | None = None
    max_price: float | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ProductFilters":
        """Parse filters from URL query parameters."""
        stock_status = params.get("stockStatus")
        sort_by = params.get("sortBy")
        sort_order = params.get("sortOrder")
        return cls(
            search=(params.get("search") or "").strip() or None,
            category=(params.get("category") or "").strip() or None,
            stock_status=StockStatus(stock_status)
            if stock_status in {s.value for s in StockStatus}
            else None,
            min_price=_parse_number(params.get("minPrice")),
            max_price=_parse_number(params.get("maxPrice")),
            sort_by=sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_BY,
            sort_order=sort_order if sort_order in SORT_ORDERS else DEFAULT_SORT_ORDER,
        )

    def to_params(self, page: int = 1) -> dict[str, str]:
        """Query parameters for these filters; defaults and page 1 are omitted."""
        params: dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category
        if self.stock_status is not None:
            params["stockStatus"] = self.stock_status.value
        if self.min_price is not None:
            params["minPrice"] = _format_number(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = _format_number(self.max_price)
        if self.sort_by != DEFAULT_SORT_BY:
            params["sortBy"] = self.sort_by
        if self.sort_order != DEFAULT_SORT_ORDER:
            params["sortOrder"] = self.sort_order
        if page > 1:
            params["page"] = str(page)
        return params

    @property
    def is_filtered(self) -> bool:
        return any(
            value is not None
            for value in (self.search, self.category, self.stock_status, self.min_price, self.max_price)
        )

    def sorted_by(self, field: str) -> "ProductFilters":
        """Filters after clicking a column header: toggle order or switch column."""
        if self.sort_by == field:
            return replace(self, sort_order="asc" if self.sort_order == "desc" else "desc")
        return replace(self, sort_by=field, sort_order="asc")

    def to_query(self, store_id: UUID, page: int, limit: int = DEFAULT_LIMIT) -> tuple[ProductQuery, str | None]:
        """Build the service query for one store.

        Returns:
            (query, warning). Values the query rejects are dropped and reported
            through the warning instead of failing the page; an inverted price
            range drops both bounds.
        """
        values: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "search": self.search,
            "store_id": store_id,
            "stock_status": self.stock_status,
            "category": self.category,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }
        try:
            return ProductQuery(**values), None
        except ValidationError as e:
            warning = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
            for field in _rejected_fields(e):
                values[field] = None
            return ProductQuery(**values), warning


def url_with(path: str, params: Mapping[str, str]) -> str:
    """Join a path and query parameters into a link."""
    return f"{path}?{urlencode(params)}" if params else path


def page_from_params(params: Mapping[str, str]) -> int:
    return _parse_page(params.get("page"))
