"""Team roster and revenue-sharing API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.api import deps
from quotekit.models import TeamMember
from quotekit.schemas.team import (
    ProjectCompletionRequest,
    ShareAllocationRead,
    ShareCalculationRead,
    ShareRequest,
    SkillMatchRequest,
    SkillsSummaryRead,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
    TimezoneReport,
)
from quotekit.services import team_service

router = APIRouter()


async def _require_member(session: AsyncSession, member_id: uuid.UUID) -> TeamMember:
    member = await team_service.get_member(session, member_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found"
        )
    return member


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/members", response_model=list[TeamMemberRead], summary="List team")
async def list_members(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    active_only: bool = False,
) -> list[TeamMemberRead]:
    members = await team_service.list_members(session, active_only=active_only)
    return [TeamMemberRead.model_validate(member) for member in members]


@router.post(
    "/members",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add team member",
)
async def create_member(
    payload: TeamMemberCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> TeamMemberRead:
    data = payload.model_dump()
    data["email"] = data["email"] or ""
    try:
        member = await team_service.create_member(session, **data)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return TeamMemberRead.model_validate(member)


@router.patch(
    "/members/{member_id}", response_model=TeamMemberRead, summary="Update member"
)
async def update_member(
    member_id: uuid.UUID,
    payload: TeamMemberUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> TeamMemberRead:
    member = await _require_member(session, member_id)
    updates = payload.model_dump(exclude_unset=True)
    if "email" in updates:
        updates["email"] = updates["email"] or ""
    try:
        member = await team_service.update_member(
            session, member=member, updates=updates
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return TeamMemberRead.model_validate(member)


@router.post(
    "/members/{member_id}/toggle",
    response_model=TeamMemberRead,
    summary="Toggle active status",
)
async def toggle_member(
    member_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> TeamMemberRead:
    member = await _require_member(session, member_id)
    member = await team_service.toggle_member(session, member=member)
    return TeamMemberRead.model_validate(member)


@router.delete(
    "/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove team member",
)
async def delete_member(
    member_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    if not await team_service.delete_member(session, member_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/shares", response_model=ShareCalculationRead, summary="Split project revenue"
)
async def calculate_shares(
    payload: ShareRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ShareCalculationRead:
    try:
        result = await team_service.calculate_shares(
            session, project_total=payload.project_total, currency=payload.currency
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return ShareCalculationRead(
        project_total=result.project_total,
        currency=result.currency,
        base_total=result.base_total,
        allocations=[
            ShareAllocationRead.model_validate(item) for item in result.allocations
        ],
        allocated=result.summary.allocated,
        drift=result.summary.drift,
    )


@router.post(
    "/projects/{project_id}/complete",
    response_model=list[TeamMemberRead],
    summary="Record project completion",
)
async def complete_project(
    project_id: str,
    payload: ProjectCompletionRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[TeamMemberRead]:
    members = await team_service.record_project_completion(
        session,
        project_id=project_id,
        contributions=[(item.member_id, item.amount) for item in payload.contributions],
    )
    return [TeamMemberRead.model_validate(member) for member in members]


@router.get("/skills", response_model=SkillsSummaryRead, summary="Team skill levels")
async def skills_summary(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> SkillsSummaryRead:
    members = await team_service.list_members(session)
    return SkillsSummaryRead(
        categories={
            category: team_service.format_skill_category(category)
            for category in team_service.SKILL_CATEGORIES
        },
        levels=list(team_service.SKILL_LEVELS),
        summary=team_service.skills_summary(members),
    )


@router.post(
    "/skills/match",
    response_model=list[TeamMemberRead],
    summary="Members meeting skill levels",
)
async def match_skills(
    payload: SkillMatchRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[TeamMemberRead]:
    try:
        requirements = team_service.validate_skills(payload.skills)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    members = await team_service.list_members(session, active_only=True)
    matches = team_service.find_members_with_skills(members, requirements)
    return [TeamMemberRead.model_validate(member) for member in matches]


@router.get("/timezones", response_model=TimezoneReport, summary="Team time zones")
async def timezones(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    target: str | None = None,
    range_hours: Annotated[float, Query(gt=0, le=12)] = team_service.DEFAULT_TIMEZONE_RANGE,
) -> TimezoneReport:
    """Distribution of active members' zones, plus those near ``target``."""
    members = await team_service.list_members(session)
    report = TimezoneReport(distribution=team_service.timezone_distribution(members))
    if target is None:
        return report
    target_hours = team_service.parse_timezone(target)
    if target_hours is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unrecognised time zone '{target}'",
        )
    nearby = team_service.members_in_timezone_range(members, target, range_hours)
    return report.model_copy(
        update={
            "target": target,
            "target_hours": target_hours,
            "range_hours": range_hours,
            "members": [TeamMemberRead.model_validate(member) for member in nearby],
        }
    )
