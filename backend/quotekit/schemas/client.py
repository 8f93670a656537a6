"""Pydantic schemas for clients."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ClientCreate(BaseModel):
    """Payload for creating a client."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    company: str = ""
    notes: str = ""


class ClientUpdate(BaseModel):
    """Mutable client fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    company: str | None = None
    notes: str | None = None


class ClientSummary(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    company: str

    model_config = ConfigDict(from_attributes=True)


class ClientRead(ClientSummary):
    """Serialized client representation."""

    notes: str
    created_at: datetime
    updated_at: datetime
