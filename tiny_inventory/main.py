"""FastAPI application entry point.

Tiny Inventory API - stores and the products they stock.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tiny_inventory.middleware import REQUEST_ID_HEADER, RequestContextMiddleware, SlidingWindowRateLimiter
from tiny_inventory.routes import api_router
from tiny_inventory.schemas import HealthResponse
from tiny_inventory.services.errors import InventoryError
from tiny_inventory.settings import Settings, get_settings
from tiny_inventory.storage.postgres import close_db, init_db, ping_db
from tiny_inventory.web import web_router

logger = logging.getLogger("uvicorn.error")

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    yield

    # Shutdown
    await close_db()


def _error_body(code: str, message: str, detail: Any = None) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "detail": detail}}


def _format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten FastAPI/Pydantic errors into {field, message} pairs."""
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return formatted


def _install_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
        """Domain errors raised by services."""
        if not settings.is_production:
            logger.warning(
                "[error] %s %s -> %s %s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Validation failures are bad requests, not 422."""
        errors = _format_validation_errors(list(exc.errors()))
        return JSONResponse(
            status_code=400,
            content=_error_body("VALIDATION_ERROR", "Request validation failed", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Wrap framework HTTP errors (404 routes, 429) in the standard envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
                str(exc.detail),
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        request_id = getattr(request.state, "request_id", None)
        logger.exception(
            "[error] unhandled %s %s request_id=%s", request.method, request.url.path, request_id
        )
        headers = {REQUEST_ID_HEADER: request_id} if request_id else None
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "INTERNAL_ERROR",
                str(exc) if settings.debug else "Internal server error",
            ),
            headers=headers,
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    show_docs = not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A small inventory management system that tracks stores and products",
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        openapi_tags=[
            {"name": "stores", "description": "Store management endpoints"},
            {"name": "products", "description": "Product management endpoints"},
        ],
    )

    app.state.rate_limiter = (
        SlidingWindowRateLimiter(settings.rate_limit_requests, settings.rate_limit_window_seconds)
        if settings.rate_limit_enabled
        else None
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestContextMiddleware)

    _install_exception_handlers(app, settings)

    # Health check endpoint
    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Report service health including database connectivity."""
        try:
            await ping_db()
            database = "connected"
        except Exception:
            logger.warning("[health] database ping failed", exc_info=True)
            database = "disconnected"

        return HealthResponse(
            status="healthy" if database == "connected" else "unhealthy",
            services={"database": database},
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    # Include API routes
    app.include_router(api_router)

    # Browser client
    app.include_router(web_router, include_in_schema=False)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tiny_inventory.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
