"""Key/value JSON documents for operator-editable settings."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from quotekit.db.base import Base
from quotekit.models.mixins import TimestampMixin
from quotekit.models.types import JSONB_TYPE


class SettingsDocument(TimestampMixin, Base):
    """A named JSON document such as rate overrides or exchange rates."""

    __tablename__ = "settings_documents"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
