"""Server-rendered browser client."""

from tiny_inventory.web.router import web_router

__all__ = ["web_router"]
