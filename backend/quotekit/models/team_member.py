"""Team roster used for revenue sharing."""
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from quotekit.db.base import Base
from quotekit.models.mixins import TimestampMixin
from quotekit.models.types import JSONB_TYPE


class TeamMember(TimestampMixin, Base):
    """A collaborator who receives a percentage of project revenue."""

    __tablename__ = "team_members"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), default="", nullable=False)
    country: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    timezone: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    role: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    share_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    skills: Mapped[dict[str, str]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    projects_completed: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    total_earnings: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("0"), nullable=False
    )
    project_history: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
