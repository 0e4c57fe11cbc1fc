"""Pytest configuration and shared fixtures."""
from datetime import datetime, timezone
from typing import Any

import pytest

from app.backends.base import PersistenceBackend
from app.config import Settings
from app.engine.workspace import PlanningWorkspace
from app.schemas.allocation import AllocationCreate
from app.schemas.project import Project, ProjectStatus
from app.schemas.snapshot import DatabaseSnapshot
from app.schemas.team import TeamMember


class RecordingBackend(PersistenceBackend):
    """In-memory backend that records every save call.

    Collections named in ``fail`` raise on save, to exercise error paths.
    """

    def __init__(self, snapshot: DatabaseSnapshot | None = None) -> None:
        self.snapshot = snapshot or DatabaseSnapshot()
        self.calls: list[str] = []
        self.saved: dict[str, Any] = {}
        self.fail: set[str] = set()
        self.closed = False

    def count(self, collection: str) -> int:
        return self.calls.count(collection)

    async def close(self) -> None:
        self.closed = True

    async def fetch_all(self) -> DatabaseSnapshot:
        return self.snapshot.model_copy(deep=True)

    async def _save(self, collection: str, data: Any) -> None:
        self.calls.append(collection)
        if collection in self.fail:
            raise RuntimeError(f"{collection} store unavailable")
        self.saved[collection] = data

    async def save_team_members(self, members):
        await self._save("teamMembers", members)

    async def save_projects(self, projects):
        await self._save("projects", projects)

    async def save_allocations(self, allocations):
        await self._save("allocations", allocations)

    async def save_history(self, history):
        await self._save("history", history)

    async def save_sprint_projects(self, sprint_projects):
        await self._save("sprintProjects", sprint_projects)

    async def save_sprint_role_requirements(self, requirements):
        await self._save("sprintRoleRequirements", requirements)


def make_member(name: str, role: str = "Product Manager", **kwargs) -> TeamMember:
    slug = name.lower().replace(" ", ".")
    return TeamMember(full_name=name, email=f"{slug}@example.com", role=role, **kwargs)


def make_project(customer: str, name: str, **kwargs) -> Project:
    kwargs.setdefault("status", ProjectStatus.ACTIVE)
    return Project(customer_name=customer, project_name=name, **kwargs)


def allocation_for(project: Project, member: TeamMember, pct: float, year=2025, month=3, sprint=1) -> AllocationCreate:
    return AllocationCreate(
        project_id=project.id,
        product_manager_id=member.id,
        year=year,
        month=month,
        sprint_index=sprint,
        allocation_percentage=pct,
    )


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, save_debounce_ms=200, storage_backend="json")


@pytest.fixture
def alice():
    return make_member("Alice Smith", role="Product Director")


@pytest.fixture
def bob():
    return make_member("Bob Jones")


@pytest.fixture
def apollo():
    return make_project("Acme", "Apollo", max_capacity_percentage=150)


@pytest.fixture
def zephyr():
    return make_project("Globex", "Zephyr")


@pytest.fixture
def backend(alice, bob, apollo, zephyr):
    """Recording backend preloaded with two members and two projects."""
    return RecordingBackend(DatabaseSnapshot(
        team_members=[alice, bob],
        projects=[apollo, zephyr],
    ))


@pytest.fixture
async def workspace(backend, settings):
    ws = await PlanningWorkspace.open(backend, settings)
    yield ws
    await ws.close()


@pytest.fixture
def march_2025():
    return datetime(2025, 3, 5, 9, 30, tzinfo=timezone.utc)
