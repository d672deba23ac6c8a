"""Shared constants for validation, pagination and stock levels."""

from enum import Enum

# Products with quantity below this are considered low stock
LOW_STOCK_THRESHOLD = 10

# Pagination
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps the row offset (page - 1) * limit inside a BIGINT
MAX_PAGE = 2**31

# Postgres INTEGER upper bound for quantity columns
MAX_QUANTITY = 2_147_483_647

# Field lengths
MAX_NAME_LENGTH = 200
MAX_ADDRESS_LENGTH = 500
MAX_CATEGORY_LENGTH = 100


class StockStatus(str, Enum):
    """Stock status buckets."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


SORT_FIELDS = ("name", "category", "price", "quantity", "createdAt")
SORT_ORDERS = ("asc", "desc")
