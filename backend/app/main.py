"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.backends.base import PersistenceBackend
from app.config import Settings, get_settings
from app.deps import get_workspace
from app.engine.errors import (
    DuplicateAllocationError,
    DuplicateMemberError,
    DuplicateProjectError,
    ManagerCycleError,
    NotFoundError,
    PersistenceError,
    PlanningError,
)
from app.engine.workspace import PlanningWorkspace, backend_from_settings
from app.routers import allocations, backups, capacity, history, projects, sprint_plan, team
from app.schemas.sprint_plan import SaveStatus

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    DuplicateAllocationError: 409,
    DuplicateMemberError: 409,
    DuplicateProjectError: 409,
    NotFoundError: 404,
    ManagerCycleError: 400,
    PersistenceError: 502,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def planning_error_handler(request: Request, exc: PlanningError) -> JSONResponse:
    status_code = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    content = {"detail": str(exc)}
    if isinstance(exc, DuplicateAllocationError):
        content["existingId"] = exc.existing_id
    return JSONResponse(status_code=status_code, content=content)


def create_app(settings: Settings | None = None, backend: PersistenceBackend | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        workspace = await PlanningWorkspace.open(backend or backend_from_settings(settings), settings)
        app.state.workspace = workspace
        logger.info("Planner started (%s, %s storage)", settings.app_env, settings.storage_backend)
        yield
        await workspace.close()

    app = FastAPI(
        title="Sprint Capacity Planner",
        description="Sprint allocation, capacity tracking and change history for product teams",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PlanningError, planning_error_handler)

    app.include_router(team.router)
    app.include_router(projects.router)
    app.include_router(allocations.router)
    app.include_router(history.router)
    app.include_router(capacity.router)
    app.include_router(sprint_plan.router)
    app.include_router(backups.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/status", response_model=SaveStatus)
    async def save_status(request: Request):
        coordinator = (await get_workspace(request)).coordinator
        return SaveStatus(
            is_saving=coordinator.is_saving,
            has_pending_save=coordinator.has_pending,
            last_save_error=str(coordinator.last_error) if coordinator.last_error else None,
        )

    return app


configure_logging(get_settings().log_level)
app = create_app()
