"""Relational persistence backend on async SQLAlchemy."""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import delete, select

from app.backends.base import PersistenceBackend
from app.database import Base, build_engine, build_session_maker, init_db
from app.models import (
    AllocationHistoryRow,
    AllocationRow,
    ProjectRow,
    SprintProjectsRow,
    SprintRoleRequirementRow,
    TeamMemberRow,
)
from app.schemas.allocation import Allocation
from app.schemas.history import HistoryEntry
from app.schemas.project import Project
from app.schemas.snapshot import DatabaseSnapshot
from app.schemas.team import TeamMember

logger = logging.getLogger(__name__)


def _row_dict(row: Base) -> dict[str, Any]:
    data = {c.key: getattr(row, c.key) for c in row.__table__.columns}
    for key, value in data.items():
        # SQLite drops tzinfo; stored values are always UTC
        if isinstance(value, datetime) and value.tzinfo is None:
            data[key] = value.replace(tzinfo=timezone.utc)
    return data


def _column_values(record) -> dict[str, Any]:
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in record.model_dump().items()
    }


class SqlAlchemyBackend(PersistenceBackend):
    """Each collection save replaces the table contents in one transaction."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.engine = build_engine(database_url, echo=echo)
        self.session_maker = build_session_maker(self.engine)

    async def init(self) -> None:
        await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    async def fetch_all(self) -> DatabaseSnapshot:
        async with self.session_maker() as db:
            members = (await db.execute(select(TeamMemberRow))).scalars().all()
            projects = (await db.execute(select(ProjectRow))).scalars().all()
            allocations = (await db.execute(select(AllocationRow))).scalars().all()
            history = (
                await db.execute(select(AllocationHistoryRow).order_by(AllocationHistoryRow.changed_at))
            ).scalars().all()
            sprint_projects = (await db.execute(select(SprintProjectsRow))).scalars().all()
            requirements = (await db.execute(select(SprintRoleRequirementRow))).scalars().all()
        snapshot = DatabaseSnapshot(
            team_members=[TeamMember.model_validate(_row_dict(m)) for m in members],
            projects=[Project.model_validate(_row_dict(p)) for p in projects],
            allocations=[Allocation.model_validate(_row_dict(a)) for a in allocations],
            history=[HistoryEntry.model_validate(_row_dict(h)) for h in history],
            sprint_projects={r.sprint_key: list(r.project_ids or []) for r in sprint_projects},
            sprint_role_requirements={r.sprint_key: dict(r.requirements or {}) for r in requirements},
        )
        logger.info(
            "Loaded %d members, %d projects, %d allocations, %d history entries",
            len(snapshot.team_members),
            len(snapshot.projects),
            len(snapshot.allocations),
            len(snapshot.history),
        )
        return snapshot

    async def save_team_members(self, members: list[TeamMember]) -> None:
        await self._replace(TeamMemberRow, [TeamMemberRow(**_column_values(m)) for m in members])

    async def save_projects(self, projects: list[Project]) -> None:
        await self._replace(ProjectRow, [ProjectRow(**_column_values(p)) for p in projects])

    async def save_allocations(self, allocations: list[Allocation]) -> None:
        await self._replace(AllocationRow, [AllocationRow(**_column_values(a)) for a in allocations])

    async def save_history(self, history: list[HistoryEntry]) -> None:
        await self._replace(
            AllocationHistoryRow,
            [AllocationHistoryRow(**_column_values(h)) for h in history],
        )

    async def save_sprint_projects(self, sprint_projects: dict[str, list[str]]) -> None:
        await self._replace(
            SprintProjectsRow,
            [SprintProjectsRow(sprint_key=k, project_ids=list(v)) for k, v in sprint_projects.items()],
        )

    async def save_sprint_role_requirements(
        self, requirements: dict[str, dict[str, float]]
    ) -> None:
        await self._replace(
            SprintRoleRequirementRow,
            [SprintRoleRequirementRow(sprint_key=k, requirements=dict(v)) for k, v in requirements.items()],
        )

    async def _replace(self, model: type[Base], rows: list[Base]) -> None:
        async with self.session_maker() as db:
            async with db.begin():
                await db.execute(delete(model))
                db.add_all(rows)
