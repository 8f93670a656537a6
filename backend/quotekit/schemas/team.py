"""Pydantic schemas for the team roster and revenue sharing."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TeamMemberCreate(BaseModel):
    """Payload for adding a team member."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    country: str = ""
    timezone: str = ""
    role: str = ""
    hourly_rate: Decimal
    share_percentage: Decimal
    skills: dict[str, str] = Field(default_factory=dict)
    active: bool = True


class TeamMemberUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    country: str | None = None
    timezone: str | None = None
    role: str | None = None
    hourly_rate: Decimal | None = None
    share_percentage: Decimal | None = None
    skills: dict[str, str] | None = None
    active: bool | None = None


class TeamMemberRead(BaseModel):
    """Serialized team member."""

    id: uuid.UUID
    name: str
    email: str
    country: str
    timezone: str
    role: str
    hourly_rate: Decimal
    share_percentage: Decimal
    skills: dict[str, str]
    active: bool
    projects_completed: int
    total_earnings: Decimal
    project_history: list[dict[str, Any]]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShareRequest(BaseModel):
    project_total: Decimal = Field(gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class LocalEquivalentRead(BaseModel):
    currency: str
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class ShareAllocationRead(BaseModel):
    participant_id: str
    name: str
    role: str
    country: str
    percentage: Decimal
    amount: Decimal
    local_equivalent: LocalEquivalentRead | None = None

    model_config = ConfigDict(from_attributes=True)


class ShareCalculationRead(BaseModel):
    """Revenue split with the rounding drift it carries."""

    project_total: Decimal
    currency: str
    base_total: Decimal
    allocations: list[ShareAllocationRead]
    allocated: Decimal
    drift: Decimal


class Contribution(BaseModel):
    member_id: uuid.UUID
    amount: Decimal = Field(ge=0)


class ProjectCompletionRequest(BaseModel):
    contributions: list[Contribution] = Field(min_length=1)


class SkillMatchRequest(BaseModel):
    """Skill category -> minimum level."""

    skills: dict[str, str] = Field(min_length=1)


class SkillsSummaryRead(BaseModel):
    categories: dict[str, str]
    levels: list[str]
    summary: dict[str, dict[str, int]]


class TimezoneReport(BaseModel):
    distribution: dict[str, int]
    target: str | None = None
    target_hours: float | None = None
    range_hours: float | None = None
    members: list[TeamMemberRead] = Field(default_factory=list)
