"""Capacity and dashboard API routes."""
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from app.deps import get_workspace
from app.engine.capacity import ThresholdMode, utilization_status
from app.engine.sprint_calendar import Sprint, current_sprint
from app.engine.workspace import PlanningWorkspace
from app.schemas.capacity import MemberLoad, ProjectRef, RoleGap, SprintOverview

router = APIRouter(prefix="/capacity", tags=["capacity"])


def _today() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_sprint(year: int | None, month: int | None, sprint: int | None) -> Sprint:
    if year is None and month is None and sprint is None:
        return current_sprint(_today())
    if year is None or month is None or sprint is None:
        raise HTTPException(status_code=422, detail="year, month and sprint must be given together")
    try:
        return Sprint(year, month, sprint)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/members", response_model=list[MemberLoad])
async def member_capacity(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    year: int | None = None,
    month: int | None = None,
    sprint: int | None = None,
    under: float | None = None,
    over: float | None = None,
    mode: ThresholdMode | None = None,
    include_inactive: Annotated[bool, Query(alias="includeInactive")] = False,
):
    """Per-member totals for one sprint (current sprint when omitted)."""
    target = _resolve_sprint(year, month, sprint)
    s = ws.settings
    return ws.capacity.member_load(
        target,
        s.under_capacity_threshold if under is None else under,
        s.over_capacity_threshold if over is None else over,
        mode or ws.threshold_mode,
        members=ws.members.all() if include_inactive else None,
    )


@router.get("/members/{member_id}/status")
async def member_status(
    member_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    year: int | None = None,
    month: int | None = None,
    sprint: int | None = None,
):
    ws.members.get(member_id)
    target = _resolve_sprint(year, month, sprint)
    total = ws.capacity.total_for_member(member_id, target)
    return {"memberId": member_id, "totalPercentage": total, "status": utilization_status(total)}


@router.get("/projects/{project_id}/gaps", response_model=list[RoleGap])
async def project_gaps(
    project_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    year: int | None = None,
    month: int | None = None,
    sprint: int | None = None,
):
    project = ws.projects.get(project_id)
    return ws.capacity.role_requirement_gap(project, _resolve_sprint(year, month, sprint))


@router.get("/overview", response_model=list[SprintOverview])
async def overview(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    count: Annotated[int | None, Query(ge=1, le=24)] = None,
    under: float | None = None,
    over: float | None = None,
    mode: ThresholdMode | None = None,
):
    s = ws.settings
    return ws.capacity.sprint_overview(
        _today(),
        count or s.dashboard_sprint_count,
        s.under_capacity_threshold if under is None else under,
        s.over_capacity_threshold if over is None else over,
        mode or ws.threshold_mode,
    )


@router.get("/alerts", response_model=list[ProjectRef])
async def unstaffed_alerts(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    count: Annotated[int | None, Query(ge=1, le=24)] = None,
):
    """Active projects with nobody allocated in the upcoming sprints."""
    return ws.capacity.unstaffed_projects(_today(), count or ws.settings.dashboard_sprint_count)
