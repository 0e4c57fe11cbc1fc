"""Project API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends

from app.auth.deps import get_writer
from app.deps import get_workspace
from app.engine.workspace import PlanningWorkspace
from app.schemas.project import Project, ProjectCreate, ProjectStatus, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    include_archived: bool = False,
    status: ProjectStatus | None = None,
):
    projects = ws.projects.all() if include_archived else ws.projects.active_projects()
    if status is not None:
        projects = [p for p in projects if p.status == status]
    return sorted(projects, key=lambda p: (p.customer_name.lower(), p.project_name.lower()))


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    return ws.projects.get(project_id)


@router.post("", response_model=Project, status_code=201)
async def create_project(
    data: ProjectCreate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    return ws.projects.add_project(data)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    required = {"customer_name", "project_name", "project_type", "status", "is_archived"}
    updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k not in required}
    return ws.projects.update_project(project_id, updates)


@router.post("/{project_id}/archive", response_model=Project)
async def archive_project(
    project_id: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    return ws.projects.archive_project(project_id)
