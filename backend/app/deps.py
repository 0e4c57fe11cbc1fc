"""Shared FastAPI dependencies."""
from fastapi import Request

from app.engine.workspace import PlanningWorkspace


async def get_workspace(request: Request) -> PlanningWorkspace:
    return request.app.state.workspace
