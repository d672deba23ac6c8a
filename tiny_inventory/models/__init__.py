"""SQLAlchemy ORM models.

Models represent database tables:
- stores: Physical locations owning products
- products: Inventory items with price and quantity
"""

from tiny_inventory.models.store import Store
from tiny_inventory.models.product import Product

__all__ = ["Store", "Product"]
