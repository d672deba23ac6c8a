"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | list[Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail


class PageMeta(BaseModel):
    """Pagination metadata."""

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total_pages: int = Field(alias="totalPages", ge=0)

    model_config = {"populate_by_name": True}


class HealthResponse(BaseModel):
    """Response payload for GET /health."""

    status: str
    services: dict[str, str]
    timestamp: str
