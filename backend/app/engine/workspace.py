"""Planning workspace - owns the collections and the stores that write them."""
import logging
from typing import Any

from app.backends.base import PersistenceBackend
from app.config import Settings, get_settings
from app.engine.allocation_store import AllocationStore
from app.engine.capacity import CapacityAggregator, ThresholdMode
from app.engine.history import HistoryLedger
from app.engine.persistence import Collection, MutationKind, PersistenceCoordinator, SaveStrategy
from app.engine.roster import MemberDirectory, ProjectCatalog
from app.engine.sprint_metadata import SprintMetadata
from app.schemas.snapshot import DatabaseSnapshot

logger = logging.getLogger(__name__)


def backend_from_settings(settings: Settings) -> PersistenceBackend:
    if settings.storage_backend == "sql":
        from app.backends.sql import SqlAlchemyBackend

        return SqlAlchemyBackend(settings.database_url)
    from app.backends.json_file import JsonFileBackend

    return JsonFileBackend(settings.data_file, backup_keep=settings.backup_keep)


class PlanningWorkspace:
    """Constructed after the initial fetch, closed on shutdown.

    Consumers receive the workspace explicitly and mutate collections only
    through its stores.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        settings: Settings | None = None,
        save_policy: dict[MutationKind, SaveStrategy] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.backend = backend
        self._save_policy = save_policy
        self.coordinator = PersistenceCoordinator(
            backend,
            self._collection_snapshot,
            debounce_seconds=self.settings.save_debounce_seconds,
        )
        self._build(DatabaseSnapshot())

    @classmethod
    async def open(
        cls,
        backend: PersistenceBackend,
        settings: Settings | None = None,
        save_policy: dict[MutationKind, SaveStrategy] | None = None,
    ) -> "PlanningWorkspace":
        await backend.init()
        workspace = cls(backend, settings, save_policy)
        await workspace.load()
        return workspace

    def _build(self, snapshot: DatabaseSnapshot) -> None:
        self.ledger = HistoryLedger(snapshot.history)
        self.members = MemberDirectory(self.coordinator, snapshot.team_members)
        self.projects = ProjectCatalog(self.coordinator, snapshot.projects)
        self.allocations = AllocationStore(
            self.ledger,
            self.coordinator,
            snapshot.allocations,
            save_policy=self._save_policy,
            days_per_sprint=self.settings.days_per_sprint,
        )
        self.metadata = SprintMetadata(
            self.coordinator,
            snapshot.sprint_projects,
            snapshot.sprint_role_requirements,
        )
        self.capacity = CapacityAggregator(self.allocations, self.members, self.projects, self.metadata)

    async def load(self) -> None:
        snapshot = await self.backend.fetch_all()
        self._build(snapshot)
        self.coordinator.mark_loaded()
        logger.info(
            "Workspace loaded: %d members, %d projects, %d allocations, %d history entries",
            len(self.members), len(self.projects), len(self.allocations), len(self.ledger),
        )

    async def refresh(self) -> None:
        """Drop unsaved scheduled changes and reload from the backend."""
        self.coordinator.discard_pending()
        await self.load()

    async def restore_backup(self, name: str) -> None:
        """Replace stored data with a backup and reload; unsaved changes are dropped."""
        self.coordinator.discard_pending()
        await self.coordinator.flush()
        await self.backend.restore_backup(name)
        await self.load()

    async def close(self) -> None:
        await self.coordinator.close()
        await self.backend.close()

    @property
    def threshold_mode(self) -> ThresholdMode:
        return ThresholdMode(self.settings.threshold_mode)

    def _collection_snapshot(self, collection: Collection) -> Any:
        if collection is Collection.TEAM_MEMBERS:
            return self.members.all()
        if collection is Collection.PROJECTS:
            return self.projects.all()
        if collection is Collection.ALLOCATIONS:
            return self.allocations.all()
        if collection is Collection.HISTORY:
            return self.ledger.snapshot()
        if collection is Collection.SPRINT_PROJECTS:
            return self.metadata.sprint_projects()
        return self.metadata.role_requirements()
