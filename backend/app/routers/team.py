"""Team member API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.deps import get_writer
from app.deps import get_workspace
from app.engine.workspace import PlanningWorkspace
from app.schemas.team import ManagerAssignment, TeamMember, TeamMemberCreate, TeamMemberUpdate

router = APIRouter(prefix="/members", tags=["team"])


@router.get("", response_model=list[TeamMember])
async def list_members(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    active: bool | None = None,
    team: str | None = None,
    manager_id: Annotated[str | None, Query(alias="managerId")] = None,
):
    members = ws.members.all()
    if active is not None:
        members = [m for m in members if m.is_active == active]
    if team:
        members = [m for m in members if team in m.teams]
    if manager_id:
        members = [m for m in members if m.manager_id == manager_id]
    return sorted(members, key=lambda m: m.full_name.lower())


@router.get("/{member_id}", response_model=TeamMember)
async def get_member(
    member_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    return ws.members.get(member_id)


@router.post("", response_model=TeamMember, status_code=201)
async def add_member(
    data: TeamMemberCreate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    if "capacity" not in data.model_fields_set:
        data = data.model_copy(update={"capacity": ws.settings.default_member_capacity})
    return ws.members.add_member(data)


@router.patch("/{member_id}", response_model=TeamMember)
async def update_member(
    member_id: str,
    data: TeamMemberUpdate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in ("manager_id", "employee_number")
    }
    return ws.members.update_member(member_id, updates)


@router.put("/{member_id}/manager", response_model=TeamMember)
async def set_manager(
    member_id: str,
    data: ManagerAssignment,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    return ws.members.set_manager(member_id, data.manager_id)


@router.post("/{member_id}/deactivate", response_model=TeamMember)
async def deactivate_member(
    member_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    return ws.members.deactivate_member(member_id)
