"""Client model for the people and companies quotes are prepared for."""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotekit.db.base import Base
from quotekit.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from quotekit.models.quote import Quote


class Client(TimestampMixin, Base):
    """A client that can hold any number of quotes."""

    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), default="", nullable=False, index=True
    )
    company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    quotes: Mapped[list["Quote"]] = relationship(
        "Quote", back_populates="client", cascade="all, delete-orphan"
    )
