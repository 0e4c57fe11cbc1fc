"""Persistence backend contract."""
from abc import ABC, abstractmethod

from app.engine.errors import NotFoundError
from app.schemas.allocation import Allocation
from app.schemas.history import HistoryEntry
from app.schemas.project import Project
from app.schemas.snapshot import DatabaseSnapshot
from app.schemas.team import TeamMember


class PersistenceBackend(ABC):
    """Key-value style store for the planner's collections.

    Every save replaces the whole named collection, and a collection save is
    atomic: a later ``fetch_all`` never observes a partially written collection.
    """

    async def init(self) -> None:
        """Prepare the underlying store (create files/tables)."""

    async def close(self) -> None:
        """Release connections and handles."""

    def list_backups(self) -> list[str]:
        """Names of restorable snapshots, newest first. Most stores keep none."""
        return []

    async def restore_backup(self, name: str) -> None:
        raise NotFoundError("Backup", name)

    @abstractmethod
    async def fetch_all(self) -> DatabaseSnapshot: ...

    @abstractmethod
    async def save_team_members(self, members: list[TeamMember]) -> None: ...

    @abstractmethod
    async def save_projects(self, projects: list[Project]) -> None: ...

    @abstractmethod
    async def save_allocations(self, allocations: list[Allocation]) -> None: ...

    @abstractmethod
    async def save_history(self, history: list[HistoryEntry]) -> None: ...

    @abstractmethod
    async def save_sprint_projects(self, sprint_projects: dict[str, list[str]]) -> None: ...

    @abstractmethod
    async def save_sprint_role_requirements(
        self, requirements: dict[str, dict[str, float]]
    ) -> None: ...
