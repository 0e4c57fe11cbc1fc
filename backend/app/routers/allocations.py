"""Sprint allocation API routes."""
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from app.auth.deps import get_writer
from app.deps import get_workspace
from app.engine.allocation_store import CapacityExceededWarning
from app.engine.errors import DuplicateAllocationError
from app.engine.export import allocation_matrix_csv
from app.engine.sprint_calendar import Sprint, current_sprint, days_from_percentage, sprints_from
from app.engine.workspace import PlanningWorkspace
from app.schemas.allocation import (
    Allocation,
    AllocationCreate,
    AllocationUpdate,
    CapacityWarningResponse,
)

router = APIRouter(prefix="/allocations", tags=["allocations"])


def _warning_response(warning: CapacityExceededWarning) -> HTTPException:
    body = CapacityWarningResponse(
        project_id=warning.project_id,
        year=warning.sprint.year,
        month=warning.sprint.month,
        sprint_index=warning.sprint.sprint_index,
        total_percentage=warning.total_percentage,
        max_capacity_percentage=warning.max_capacity_percentage,
        message=warning.message,
    )
    return HTTPException(status_code=409, detail=body.to_wire())


@router.get("", response_model=list[Allocation])
async def list_allocations(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    year: int | None = None,
    month: int | None = None,
    sprint: int | None = None,
    member_id: Annotated[str | None, Query(alias="memberId")] = None,
    project_id: Annotated[str | None, Query(alias="projectId")] = None,
):
    allocations = ws.allocations.all()
    if year is not None:
        allocations = [a for a in allocations if a.year == year]
    if month is not None:
        allocations = [a for a in allocations if a.month == month]
    if sprint is not None:
        allocations = [a for a in allocations if a.sprint_index == sprint]
    if member_id:
        allocations = [a for a in allocations if a.product_manager_id == member_id]
    if project_id:
        allocations = [a for a in allocations if a.project_id == project_id]
    return sorted(allocations, key=lambda a: (a.sprint, a.created_at))


@router.get("/export")
async def export_allocations(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    year: int | None = None,
    month: int | None = None,
    sprint: int | None = None,
    count: Annotated[int | None, Query(ge=1, le=24)] = None,
):
    """Allocation matrix as CSV, starting at the given sprint (current sprint when omitted)."""
    if year is None and month is None and sprint is None:
        start = current_sprint(datetime.now(timezone.utc))
    elif year is None or month is None or sprint is None:
        raise HTTPException(status_code=422, detail="year, month and sprint must be given together")
    else:
        try:
            start = Sprint(year, month, sprint)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    sprints = sprints_from(start, count or ws.settings.dashboard_sprint_count)
    content = allocation_matrix_csv(ws.allocations.all(), ws.members.all(), ws.projects.all(), sprints)
    filename = f"capacity-overview-{start.year}-{start.month:02d}-s{start.sprint_index}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{allocation_id}", response_model=Allocation)
async def get_allocation(
    allocation_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    return ws.allocations.get(allocation_id)


@router.post("", response_model=Allocation, status_code=201)
async def create_allocation(
    data: AllocationCreate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
    confirm_over_capacity: Annotated[bool, Query(alias="confirmOverCapacity")] = False,
):
    project = ws.projects.get(data.project_id)
    ws.members.get(data.product_manager_id)
    existing = ws.allocations.find_duplicate(data.project_id, data.product_manager_id, data.sprint)
    if existing is not None:
        raise DuplicateAllocationError(data.project_id, data.product_manager_id, data.sprint, existing.id)
    if not confirm_over_capacity:
        warning = ws.allocations.check_capacity_ceiling(project, data.sprint, data.allocation_percentage)
        if warning is not None:
            raise _warning_response(warning)
    return await ws.allocations.add_allocation(data, actor_id)


@router.patch("/{allocation_id}", response_model=Allocation)
async def update_allocation(
    allocation_id: str,
    data: AllocationUpdate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
    confirm_over_capacity: Annotated[bool, Query(alias="confirmOverCapacity")] = False,
):
    current = ws.allocations.get(allocation_id)
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in ("comment", "is_planned")
    }
    if not updates:
        return current

    project_id = updates.get("project_id") or current.project_id
    member_id = updates.get("product_manager_id") or current.product_manager_id
    sprint = Sprint(
        updates.get("year") or current.year,
        updates.get("month") or current.month,
        updates.get("sprint_index") or current.sprint_index,
    )
    if "project_id" in updates:
        ws.projects.get(project_id)
    if "product_manager_id" in updates:
        ws.members.get(member_id)

    existing = ws.allocations.find_duplicate(project_id, member_id, sprint, exclude_id=allocation_id)
    if existing is not None:
        raise DuplicateAllocationError(project_id, member_id, sprint, existing.id)

    percentage = updates.get("allocation_percentage", current.allocation_percentage)
    if "allocation_percentage" in updates and "allocation_days" not in updates:
        updates["allocation_days"] = days_from_percentage(percentage, ws.settings.days_per_sprint)

    if not confirm_over_capacity:
        project = ws.projects.get(project_id)
        warning = ws.allocations.check_capacity_ceiling(project, sprint, percentage, exclude_id=allocation_id)
        if warning is not None:
            raise _warning_response(warning)

    return await ws.allocations.update_allocation(allocation_id, updates, actor_id)


@router.delete("/{allocation_id}")
async def delete_allocation(
    allocation_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    removed = await ws.allocations.delete_allocation(allocation_id, actor_id)
    return {"ok": True, "deleted": removed is not None}
