"""Allocation history API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.deps import get_workspace
from app.engine.workspace import PlanningWorkspace
from app.schemas.history import ChangeType, HistoryEntry

router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=list[HistoryEntry])
async def list_history(
    ws: Annotated[PlanningWorkspace, Depends(get_workspace)],
    allocation_id: Annotated[str | None, Query(alias="allocationId")] = None,
    change_type: Annotated[ChangeType | None, Query(alias="changeType")] = None,
    changed_by: Annotated[str | None, Query(alias="changedBy")] = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
):
    """Newest first."""
    entries = ws.ledger.for_allocation(allocation_id) if allocation_id else ws.ledger.entries()
    if change_type is not None:
        entries = [e for e in entries if e.change_type == change_type]
    if changed_by:
        entries = [e for e in entries if e.changed_by == changed_by]
    return entries[:limit] if limit else entries
