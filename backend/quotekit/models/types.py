"""Column types shared across models."""

from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")
