"""Backup listing and restore routes."""
from typing import Annotated

from fastapi import APIRouter, Depends

from app.auth.deps import get_writer
from app.deps import get_workspace
from app.engine.workspace import PlanningWorkspace

router = APIRouter(prefix="/backups", tags=["backups"])


@router.get("")
async def list_backups(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
):
    return {"backups": ws.backend.list_backups()}


@router.post("/{name}/restore")
async def restore_backup(
    name: str,
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    actor_id: Annotated[str, Depends(get_writer)],
):
    await ws.restore_backup(name)
    return {"success": True, "restored": name}
