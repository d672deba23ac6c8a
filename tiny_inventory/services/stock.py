"""Stock level classification.

Rules (shared by the product filter and the UI badges):
- quantity == 0                        -> out_of_stock
- 0 < quantity < LOW_STOCK_THRESHOLD   -> low_stock
- quantity >= LOW_STOCK_THRESHOLD      -> in_stock

Store statistics count every product below the threshold as low stock,
out-of-stock items included.
"""

from sqlalchemy import ColumnElement

from tiny_inventory.constants import LOW_STOCK_THRESHOLD, StockStatus
from tiny_inventory.models import Product

STOCK_STATUS_LABELS = {
    StockStatus.IN_STOCK: "In stock",
    StockStatus.LOW_STOCK: "Low stock",
    StockStatus.OUT_OF_STOCK: "Out of stock",
}


def classify_stock(quantity: int) -> StockStatus:
    """Return the stock status bucket for a quantity."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity < LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def stock_status_condition(status: StockStatus) -> ColumnElement[bool]:
    """SQL condition on Product.quantity matching a stock status."""
    if status is StockStatus.OUT_OF_STOCK:
        return Product.quantity == 0
    if status is StockStatus.LOW_STOCK:
        return (Product.quantity > 0) & (Product.quantity < LOW_STOCK_THRESHOLD)
    return Product.quantity >= LOW_STOCK_THRESHOLD
