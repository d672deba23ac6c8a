"""Domain errors raised by services.

Routes don't catch these; the application exception handler turns them
into the structured error envelope.
"""

from typing import Any


class InventoryError(Exception):
    """Base class for errors with an HTTP mapping."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFoundError(InventoryError):
    """Requested record does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(
            f"{entity} with ID {entity_id} not found",
            detail={"entity": entity.lower(), "id": str(entity_id)},
        )
        self.code = f"{entity.upper()}_NOT_FOUND"


class InvalidReferenceError(InventoryError):
    """Foreign key points at a record that does not exist."""

    status_code = 400
    code = "INVALID_REFERENCE"
