"""Sprint plan API routes: the current sprint, pinned projects and role requirements."""
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.auth.deps import get_writer
from app.deps import get_workspace
from app.engine.capacity import sprint_ref
from app.engine.sprint_calendar import Sprint, SprintKey, current_sprint
from app.engine.workspace import PlanningWorkspace
from app.schemas.capacity import SprintRef
from app.schemas.sprint_plan import (
    RoleRequirementsSchema,
    RoleRequirementsUpdate,
    SprintProjectsSchema,
    SprintProjectsUpdate,
)

router = APIRouter(tags=["sprint-plan"])


def _sprint(year: int, month: int, sprint: int) -> Sprint:
    try:
        return Sprint(year, month, sprint)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/sprints/current", response_model=SprintRef)
async def get_current_sprint():
    now = datetime.now(timezone.utc)
    return sprint_ref(current_sprint(now), now)


@router.get("/sprints/{year}/{month}/{sprint}/projects", response_model=SprintProjectsSchema)
async def get_sprint_projects(
    year: int,
    month: int,
    sprint: int,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    target = _sprint(year, month, sprint)
    return SprintProjectsSchema(key=str(SprintKey.for_sprint(target)), project_ids=ws.metadata.projects_for(target))


@router.put("/sprints/{year}/{month}/{sprint}/projects", response_model=SprintProjectsSchema)
async def set_sprint_projects(
    year: int,
    month: int,
    sprint: int,
    data: SprintProjectsUpdate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    target = _sprint(year, month, sprint)
    for project_id in data.project_ids:
        ws.projects.get(project_id)
    project_ids = await ws.metadata.set_projects(target, data.project_ids)
    return SprintProjectsSchema(key=str(SprintKey.for_sprint(target)), project_ids=project_ids)


@router.get("/projects/{project_id}/requirements/{year}/{month}/{sprint}", response_model=RoleRequirementsSchema)
async def get_role_requirements(
    project_id: str,
    year: int,
    month: int,
    sprint: int,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    ws.projects.get(project_id)
    target = _sprint(year, month, sprint)
    return RoleRequirementsSchema(
        key=str(SprintKey.for_sprint(target, project_id)),
        requirements=ws.metadata.requirements_for(project_id, target),
    )


@router.put("/projects/{project_id}/requirements/{year}/{month}/{sprint}", response_model=RoleRequirementsSchema)
async def set_role_requirements(
    project_id: str,
    year: int,
    month: int,
    sprint: int,
    data: RoleRequirementsUpdate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    ws.projects.get(project_id)
    target = _sprint(year, month, sprint)
    if any(pct < 0 for pct in data.requirements.values()):
        raise HTTPException(status_code=422, detail="Role requirements must not be negative")
    requirements = await ws.metadata.set_requirements(project_id, target, data.requirements)
    return RoleRequirementsSchema(key=str(SprintKey.for_sprint(target, project_id)), requirements=requirements)
