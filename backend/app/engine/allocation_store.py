"""Allocation store - authoritative in-memory set of sprint allocations."""
import logging
from dataclasses import dataclass
from typing import Iterable

from app.engine.errors import DuplicateAllocationError, NotFoundError
from app.engine.history import HistoryLedger
from app.engine.persistence import (
    SAVE_POLICY,
    Collection,
    MutationKind,
    PersistenceCoordinator,
    SaveStrategy,
)
from app.engine.sprint_calendar import DAYS_PER_SPRINT, Sprint, days_from_percentage
from app.schemas.allocation import Allocation, AllocationCreate
from app.schemas.base import utcnow
from app.schemas.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapacityExceededWarning:
    """Advisory: the project's sprint total would exceed its max capacity."""

    project_id: str
    sprint: Sprint
    total_percentage: float
    max_capacity_percentage: float

    @property
    def message(self) -> str:
        return (
            f"Total allocation ({self.total_percentage:g}%) exceeds project max capacity "
            f"({self.max_capacity_percentage:g}%)"
        )


class AllocationStore:
    """Allocation CRUD with duplicate prevention and history coupling.

    Mutations change in-memory state before any await, then persist according
    to the save policy table.
    """

    def __init__(
        self,
        ledger: HistoryLedger,
        coordinator: PersistenceCoordinator,
        allocations: Iterable[Allocation] = (),
        save_policy: dict[MutationKind, SaveStrategy] | None = None,
        days_per_sprint: int = DAYS_PER_SPRINT,
    ) -> None:
        self._ledger = ledger
        self._coordinator = coordinator
        self._allocations: dict[str, Allocation] = {a.id: a for a in allocations}
        self._policy = dict(save_policy or SAVE_POLICY)
        self._days_per_sprint = days_per_sprint

    def __len__(self) -> int:
        return len(self._allocations)

    def __contains__(self, allocation_id: str) -> bool:
        return allocation_id in self._allocations

    def all(self) -> list[Allocation]:
        return list(self._allocations.values())

    def find(self, allocation_id: str) -> Allocation | None:
        return self._allocations.get(allocation_id)

    def get(self, allocation_id: str) -> Allocation:
        allocation = self._allocations.get(allocation_id)
        if allocation is None:
            raise NotFoundError("Allocation", allocation_id)
        return allocation

    def for_sprint(self, sprint: Sprint) -> list[Allocation]:
        return [a for a in self._allocations.values() if a.sprint == sprint]

    def for_member(self, member_id: str, sprint: Sprint | None = None) -> list[Allocation]:
        return [
            a for a in self._allocations.values()
            if a.product_manager_id == member_id and (sprint is None or a.sprint == sprint)
        ]

    def for_project(self, project_id: str, sprint: Sprint | None = None) -> list[Allocation]:
        return [
            a for a in self._allocations.values()
            if a.project_id == project_id and (sprint is None or a.sprint == sprint)
        ]

    def find_duplicate(
        self,
        project_id: str,
        member_id: str,
        sprint: Sprint,
        exclude_id: str | None = None,
    ) -> Allocation | None:
        """Existing allocation occupying the (project, member, sprint) slot."""
        key = (project_id, member_id, sprint.year, sprint.month, sprint.sprint_index)
        for allocation in self._allocations.values():
            if allocation.id != exclude_id and allocation.tuple_key() == key:
                return allocation
        return None

    def check_capacity_ceiling(
        self,
        project: Project,
        sprint: Sprint,
        new_percentage: float,
        exclude_id: str | None = None,
    ) -> CapacityExceededWarning | None:
        """Advisory check against ``project.max_capacity_percentage``."""
        if not project.max_capacity_percentage:
            return None
        existing = sum(
            a.allocation_percentage
            for a in self.for_project(project.id, sprint)
            if a.id != exclude_id
        )
        total = existing + new_percentage
        if total > project.max_capacity_percentage:
            return CapacityExceededWarning(
                project_id=project.id,
                sprint=sprint,
                total_percentage=total,
                max_capacity_percentage=project.max_capacity_percentage,
            )
        return None

    async def add_allocation(self, data: AllocationCreate, actor_id: str) -> Allocation:
        sprint = data.sprint
        existing = self.find_duplicate(data.project_id, data.product_manager_id, sprint)
        if existing is not None:
            raise DuplicateAllocationError(data.project_id, data.product_manager_id, sprint, existing.id)

        allocation = Allocation(
            **data.model_dump(),
            allocation_days=days_from_percentage(data.allocation_percentage, self._days_per_sprint),
            created_at=utcnow(),
            created_by=actor_id,
        )
        self._allocations[allocation.id] = allocation
        self._ledger.record_created(allocation, actor_id)
        logger.info(
            "Allocation %s created: member %s on project %s, %s, %g%%",
            allocation.id, allocation.product_manager_id, allocation.project_id,
            sprint, allocation.allocation_percentage,
        )
        await self._persist(MutationKind.CREATE)
        return allocation

    async def update_allocation(self, allocation_id: str, updates: dict, actor_id: str) -> Allocation | None:
        """Shallow-merge ``updates``; allocation_days is not re-derived here."""
        old = self._allocations.get(allocation_id)
        if old is None:
            logger.warning("Update ignored: allocation %s not found", allocation_id)
            return None
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at", "created_by")}
        new = Allocation.model_validate({**old.model_dump(), **updates})
        self._allocations[allocation_id] = new
        self._ledger.record_updated(old, new, actor_id)
        logger.info("Allocation %s updated by %s: %s", allocation_id, actor_id, sorted(updates))
        await self._persist(MutationKind.UPDATE)
        return new

    async def delete_allocation(self, allocation_id: str, actor_id: str) -> Allocation | None:
        old = self._allocations.get(allocation_id)
        if old is None:
            logger.warning("Delete ignored: allocation %s not found", allocation_id)
            return None
        self._ledger.record_deleted(old, actor_id)
        del self._allocations[allocation_id]
        logger.info("Allocation %s deleted by %s", allocation_id, actor_id)
        await self._persist(MutationKind.DELETE)
        return old

    async def _persist(self, kind: MutationKind) -> None:
        if self._policy[kind] is SaveStrategy.IMMEDIATE:
            await self._coordinator.save_now(Collection.ALLOCATIONS, Collection.HISTORY)
        else:
            self._coordinator.schedule(Collection.ALLOCATIONS, Collection.HISTORY)
