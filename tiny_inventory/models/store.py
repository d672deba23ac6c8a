"""Store model.

Represents a physical location that owns zero or more products.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tiny_inventory.storage.postgres import Base

if TYPE_CHECKING:
    from tiny_inventory.models.product import Product


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Store(Base):
    """Store owning an inventory of products."""

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(200))
    address: Mapped[str] = mapped_column(String(500))

    # Products go with the store (ON DELETE CASCADE in the schema as well)
    products: Mapped[list[Product]] = relationship(
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Store {self.name} ({self.id})>"
