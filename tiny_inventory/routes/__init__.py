"""API routes."""

from fastapi import APIRouter, Depends

from tiny_inventory.middleware import enforce_rate_limit
from tiny_inventory.routes import products, stores

api_router = APIRouter(prefix="/api", dependencies=[Depends(enforce_rate_limit)])

# Store management
api_router.include_router(stores.router, prefix="/stores", tags=["stores"])

# Product management
api_router.include_router(products.router, prefix="/products", tags=["products"])
