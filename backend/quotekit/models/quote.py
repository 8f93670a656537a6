"""Saved price quotes."""

from __future__ import annotations

import datetime
import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotekit.db.base import Base
from quotekit.models.mixins import TimestampMixin
from quotekit.models.types import JSONB_TYPE

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from quotekit.models.client import Client


class ServiceType(str, enum.Enum):
    """Service lines the pricing engine knows how to quote."""

    WEB = "web"
    DESIGN = "design"
    VIDEO = "video"


class QuoteStatus(str, enum.Enum):
    """Lifecycle of a quote once it has been sent to a client."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Quote(TimestampMixin, Base):
    """A priced request, frozen with its breakdown at save time."""

    __tablename__ = "quotes"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_name: Mapped[str] = mapped_column(
        String(255), default="Untitled Project", nullable=False
    )
    quoted_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.datetime.now(datetime.UTC),
    )
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType), nullable=False
    )
    request: Mapped[dict[str, Any]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
    breakdown: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    original_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    recurring_monthly: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("0"), nullable=False
    )
    discount: Mapped[dict[str, Any] | None] = mapped_column(JSONB_TYPE, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="INR", nullable=False)
    status: Mapped[QuoteStatus] = mapped_column(
        Enum(QuoteStatus), default=QuoteStatus.PENDING, nullable=False
    )
    client_notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    internal_notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    client: Mapped["Client"] = relationship("Client", back_populates="quotes")
