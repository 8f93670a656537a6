"""Team roster management and revenue-share calculation."""
from __future__ import annotations

import logging
import re
import uuid
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.core.config import get_settings
from quotekit.models import TeamMember
from quotekit.services import currency_service, revenue_share_service
from quotekit.services.errors import InvalidShare
from quotekit.services.revenue_share_service import (
    Participant,
    ShareAllocation,
    ShareSummary,
)

logger = logging.getLogger(__name__)

SKILL_CATEGORIES: tuple[str, ...] = (
    "webDevelopment",
    "design",
    "videoProduction",
    "marketing",
    "seo",
    "contentWriting",
    "projectManagement",
)
SKILL_LEVELS: tuple[str, ...] = ("beginner", "intermediate", "advanced", "expert")
_LEVEL_RANK = {level: rank for rank, level in enumerate(SKILL_LEVELS, start=1)}

DEFAULT_TIMEZONE_RANGE = 3.0
_CLEARABLE_FIELDS = frozenset({"email", "skills"})

_NAMED_OFFSET = re.compile(r"^(GMT|UTC)([+-])(\d+)(?::(\d+))?$")
_NUMERIC_OFFSET = re.compile(r"^([+-])?(\d+)(?:\.(\d+))?$")
_CAMEL_BREAK = re.compile(r"(?<=[a-z])(?=[A-Z])")


@dataclass(slots=True)
class ShareCalculation:
    """Revenue split for one project, in base currency."""

    project_total: Decimal
    currency: str
    base_total: Decimal
    allocations: list[ShareAllocation]
    summary: ShareSummary


def format_skill_category(category: str) -> str:
    """``webDevelopment`` -> ``Web Development``."""
    text = _CAMEL_BREAK.sub(" ", category)
    return text[:1].upper() + text[1:]


def compare_skill_levels(first: str, second: str) -> int:
    """Negative when ``first`` ranks below ``second``, zero when equal."""
    return _LEVEL_RANK.get(first, 0) - _LEVEL_RANK.get(second, 0)


def validate_skills(skills: Mapping[str, str]) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for category, level in skills.items():
        if category not in SKILL_CATEGORIES:
            raise ValueError(f"Unknown skill category '{category}'")
        if level not in _LEVEL_RANK:
            raise ValueError(f"Unknown skill level '{level}'")
        cleaned[category] = level
    return cleaned


def parse_timezone(value: str | None) -> float | None:
    """Parse ``GMT+5:30``, ``UTC-7``, ``+5.5`` or ``-7`` into hours."""
    if not value:
        return None
    text = value.strip()
    match = _NAMED_OFFSET.match(text)
    if match:
        hours = int(match.group(3))
        minutes = int(match.group(4)) if match.group(4) else 0
        sign = 1 if match.group(2) == "+" else -1
        return sign * (hours + minutes / 60)
    match = _NUMERIC_OFFSET.match(text)
    if match:
        hours = int(match.group(2))
        digits = match.group(3)
        fraction = int(digits) / 10 ** len(digits) if digits else 0
        sign = -1 if match.group(1) == "-" else 1
        return sign * (hours + fraction)
    return None


def find_members_with_skills(
    members: Iterable[TeamMember], requirements: Mapping[str, str]
) -> list[TeamMember]:
    """Active members meeting every required skill level."""
    matches = []
    for member in members:
        if not member.active:
            continue
        skills = member.skills or {}
        if all(
            skills.get(skill) and compare_skill_levels(skills[skill], level) >= 0
            for skill, level in requirements.items()
        ):
            matches.append(member)
    return matches


def members_in_timezone_range(
    members: Iterable[TeamMember],
    target: str,
    range_hours: float = DEFAULT_TIMEZONE_RANGE,
) -> list[TeamMember]:
    target_hours = parse_timezone(target)
    if target_hours is None:
        return []
    matches = []
    for member in members:
        if not member.active:
            continue
        hours = parse_timezone(member.timezone)
        if hours is None:
            continue
        diff = abs(target_hours - hours)
        if diff > 12:
            diff = 24 - diff
        if diff <= range_hours:
            matches.append(member)
    return matches


def skills_summary(members: Iterable[TeamMember]) -> dict[str, dict[str, int]]:
    """Count active members per skill category and level."""
    summary = {
        category: {level: 0 for level in SKILL_LEVELS} for category in SKILL_CATEGORIES
    }
    for member in members:
        if not member.active:
            continue
        for skill, level in (member.skills or {}).items():
            if skill in summary and level in summary[skill]:
                summary[skill][level] += 1
    return summary


def timezone_distribution(members: Iterable[TeamMember]) -> dict[str, int]:
    return dict(
        Counter(member.timezone for member in members if member.active and member.timezone)
    )


def to_participant(member: TeamMember) -> Participant:
    return Participant(
        id=str(member.id),
        name=member.name,
        share_percentage=Decimal(member.share_percentage),
        role=member.role,
        active=member.active,
        country=member.country,
    )


def _check_share(share: Decimal) -> Decimal:
    share = Decimal(share)
    if share <= 0 or share > 100:
        raise InvalidShare("Please enter a valid share percentage (1-100)")
    return share


def _check_rate(rate: Decimal) -> Decimal:
    rate = Decimal(rate)
    if rate <= 0:
        raise ValueError("Please enter a valid hourly rate")
    return rate


async def list_members(
    session: AsyncSession, *, active_only: bool = False
) -> Sequence[TeamMember]:
    """Active members first, then alphabetical."""
    stmt = select(TeamMember).order_by(
        TeamMember.active.desc(), func.lower(TeamMember.name)
    )
    if active_only:
        stmt = stmt.where(TeamMember.active.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_member(
    session: AsyncSession, member_id: uuid.UUID
) -> TeamMember | None:
    return await session.get(TeamMember, member_id)


async def create_member(
    session: AsyncSession,
    *,
    name: str,
    hourly_rate: Decimal,
    share_percentage: Decimal,
    email: str = "",
    country: str = "",
    timezone: str = "",
    role: str = "",
    skills: Mapping[str, str] | None = None,
    active: bool = True,
) -> TeamMember:
    if not name.strip():
        raise ValueError("Team member name is required")
    member = TeamMember(
        name=name.strip(),
        email=email.strip().lower(),
        country=country.strip(),
        timezone=timezone.strip(),
        role=role.strip(),
        hourly_rate=_check_rate(hourly_rate),
        share_percentage=_check_share(share_percentage),
        skills=validate_skills(skills or {}),
        active=active,
        projects_completed=0,
        total_earnings=Decimal("0"),
        project_history=[],
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)
    logger.info("Added team member %s (%s%% share)", member.id, member.share_percentage)
    return member


async def update_member(
    session: AsyncSession,
    *,
    member: TeamMember,
    updates: Mapping[str, Any],
) -> TeamMember:
    """Apply a partial update; keys mirror the model's column names.

    Only ``email`` and ``skills`` may be cleared with ``None``.
    """
    for key, value in updates.items():
        if value is None and key not in _CLEARABLE_FIELDS:
            raise ValueError(f"Team member field '{key}' cannot be empty")
    for key, value in updates.items():
        if key == "name":
            if not str(value).strip():
                raise ValueError("Team member name is required")
            member.name = str(value).strip()
        elif key == "email":
            member.email = (value or "").strip().lower()
        elif key in {"country", "timezone", "role"}:
            setattr(member, key, str(value).strip())
        elif key == "hourly_rate":
            member.hourly_rate = _check_rate(value)
        elif key == "share_percentage":
            member.share_percentage = _check_share(value)
        elif key == "skills":
            member.skills = validate_skills(value or {})
        elif key == "active":
            member.active = bool(value)
        else:
            raise ValueError(f"Unknown team member field '{key}'")
    await session.commit()
    await session.refresh(member)
    return member


async def toggle_member(session: AsyncSession, *, member: TeamMember) -> TeamMember:
    member.active = not member.active
    await session.commit()
    await session.refresh(member)
    logger.info(
        "Team member %s %s", member.id, "activated" if member.active else "deactivated"
    )
    return member


async def delete_member(session: AsyncSession, member_id: uuid.UUID) -> bool:
    member = await session.get(TeamMember, member_id)
    if member is None:
        return False
    await session.delete(member)
    await session.commit()
    return True


async def calculate_shares(
    session: AsyncSession,
    *,
    project_total: Decimal,
    currency: str | None = None,
) -> ShareCalculation:
    """Split a project total among active members.

    Non-base totals are converted with the stored exchange rates and rounded
    before allocation; the original figure drives the local equivalents.
    """
    settings = get_settings()
    code = (currency or settings.base_currency).upper()
    project_total = Decimal(project_total)
    rates = await currency_service.load_rates(session)
    base_total = currency_service.take_home(
        project_total, code, rates, base_currency=settings.base_currency
    )
    members = await list_members(session)
    allocations = revenue_share_service.allocate(
        base_total,
        [to_participant(member) for member in members],
        local_total=project_total,
        local_currency=code,
        home_country=settings.home_country,
        base_currency=settings.base_currency,
    )
    logger.info(
        "Calculated revenue sharing for %s %s (%s %s) among %d participants",
        code,
        project_total,
        settings.base_currency,
        base_total,
        len(allocations),
    )
    return ShareCalculation(
        project_total=project_total,
        currency=code,
        base_total=base_total,
        allocations=allocations,
        summary=revenue_share_service.summarize(base_total, allocations),
    )


async def record_project_completion(
    session: AsyncSession,
    *,
    project_id: str,
    contributions: Iterable[tuple[uuid.UUID, Decimal]],
) -> list[TeamMember]:
    """Credit each contributor; unknown member ids are skipped."""
    now = datetime.now(UTC).isoformat()
    updated: list[TeamMember] = []
    for member_id, amount in contributions:
        member = await session.get(TeamMember, member_id)
        if member is None:
            logger.debug("Skipping unknown team member %s", member_id)
            continue
        amount = Decimal(amount)
        member.projects_completed = (member.projects_completed or 0) + 1
        member.total_earnings = Decimal(member.total_earnings or 0) + amount
        member.project_history = [
            *(member.project_history or []),
            {"project_id": project_id, "date": now, "amount": str(amount)},
        ]
        updated.append(member)
    await session.commit()
    for member in updated:
        await session.refresh(member)
    logger.info(
        "Recorded completion of project %s with %d contributors", project_id, len(updated)
    )
    return updated
