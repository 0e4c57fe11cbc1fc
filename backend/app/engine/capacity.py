"""Capacity aggregation and threshold classification.

Read-only: every figure is derived on demand from the current allocations.
"""
from datetime import date, datetime
from enum import Enum
from typing import Iterable

from app.engine.allocation_store import AllocationStore
from app.engine.roster import MemberDirectory, ProjectCatalog
from app.engine.sprint_calendar import Sprint, is_past, sprint_dates, sprint_label, upcoming_sprints
from app.engine.sprint_metadata import SprintMetadata
from app.schemas.capacity import (
    CapacityClass,
    MemberLoad,
    ProjectRef,
    RoleGap,
    SprintOverview,
    SprintRef,
    UtilizationStatus,
)
from app.schemas.project import Project, ProjectStatus
from app.schemas.team import TeamMember

FULL_CAPACITY = 100.0


class ThresholdMode(str, Enum):
    """How under/over thresholds are read.

    ABSOLUTE compares totals against the raw threshold percentages.
    RELATIVE_TO_CAPACITY treats thresholds as a percentage of the entity's own
    capacity (member ``capacity``, project ``max_capacity_percentage``).
    """

    ABSOLUTE = "absolute"
    RELATIVE_TO_CAPACITY = "relative"


def classify(
    total: float,
    capacity: float,
    under_pct: float,
    over_pct: float,
    mode: ThresholdMode = ThresholdMode.RELATIVE_TO_CAPACITY,
) -> CapacityClass:
    if mode is ThresholdMode.ABSOLUTE:
        under_limit, over_limit = under_pct, over_pct
    else:
        under_limit = capacity * under_pct / 100
        over_limit = capacity * over_pct / 100
    if total < under_limit:
        return "under"
    if total > over_limit:
        return "over"
    return "good"


def utilization_status(total: float) -> UtilizationStatus:
    # percentages carry one decimal; float sums drift below that
    total = round(total, 1)
    if total < FULL_CAPACITY:
        return "under"
    if total == FULL_CAPACITY:
        return "full"
    return "over"


def sprint_ref(sprint: Sprint, now: datetime | date) -> SprintRef:
    start, end = sprint_dates(sprint)
    return SprintRef(
        year=sprint.year,
        month=sprint.month,
        sprint_index=sprint.sprint_index,
        label=sprint_label(sprint),
        start_date=start,
        end_date=end,
        is_past=is_past(sprint, now),
    )


def _project_ref(project: Project) -> ProjectRef:
    return ProjectRef(
        project_id=project.id,
        customer_name=project.customer_name,
        project_name=project.project_name,
    )


class CapacityAggregator:
    def __init__(
        self,
        allocations: AllocationStore,
        members: MemberDirectory,
        projects: ProjectCatalog,
        metadata: SprintMetadata,
    ) -> None:
        self._allocations = allocations
        self._members = members
        self._projects = projects
        self._metadata = metadata

    def total_for_member(self, member_id: str, sprint: Sprint) -> float:
        return sum(a.allocation_percentage for a in self._allocations.for_member(member_id, sprint))

    def total_for_project(self, project_id: str, sprint: Sprint) -> float:
        return sum(a.allocation_percentage for a in self._allocations.for_project(project_id, sprint))

    @staticmethod
    def project_capacity(project: Project) -> float:
        return project.max_capacity_percentage or FULL_CAPACITY

    def member_load(
        self,
        sprint: Sprint,
        under_pct: float,
        over_pct: float,
        mode: ThresholdMode = ThresholdMode.RELATIVE_TO_CAPACITY,
        members: Iterable[TeamMember] | None = None,
    ) -> list[MemberLoad]:
        """Total and classification for each member (active members by default)."""
        loads = []
        for member in (self._members.active_members() if members is None else members):
            total = self.total_for_member(member.id, sprint)
            loads.append(MemberLoad(
                member_id=member.id,
                full_name=member.full_name,
                capacity=member.capacity,
                total_percentage=total,
                classification=classify(total, member.capacity, under_pct, over_pct, mode),
            ))
        return loads

    def project_classification(
        self,
        project: Project,
        sprint: Sprint,
        under_pct: float,
        over_pct: float,
        mode: ThresholdMode = ThresholdMode.RELATIVE_TO_CAPACITY,
    ) -> CapacityClass:
        total = self.total_for_project(project.id, sprint)
        return classify(total, self.project_capacity(project), under_pct, over_pct, mode)

    def role_requirement_gap(
        self,
        project: Project,
        sprint: Sprint,
        members: Iterable[TeamMember] | None = None,
    ) -> list[RoleGap]:
        """Roles whose allocated percentage falls short of the sprint requirement."""
        required = self._metadata.requirements_for(project.id, sprint)
        if not required:
            return []
        role_of = {m.id: m.role for m in (self._members.all() if members is None else members)}
        allocated: dict[str, float] = {}
        for allocation in self._allocations.for_project(project.id, sprint):
            role = role_of.get(allocation.product_manager_id)
            if role is not None:
                allocated[role] = allocated.get(role, 0.0) + allocation.allocation_percentage
        gaps = []
        for role, pct in required.items():
            have = allocated.get(role, 0.0)
            if have < pct:
                gaps.append(RoleGap(role=role, required=pct, allocated=have))
        return gaps

    def _staffable_projects(self) -> list[Project]:
        return self._projects.in_status(ProjectStatus.ACTIVE)

    def sprint_overview(
        self,
        now: datetime | date,
        count: int,
        under_pct: float,
        over_pct: float,
        mode: ThresholdMode = ThresholdMode.RELATIVE_TO_CAPACITY,
    ) -> list[SprintOverview]:
        """Dashboard summary for the current sprint and the ``count - 1`` after it."""
        overview = []
        projects = self._staffable_projects()
        for sprint in upcoming_sprints(now, count):
            loads = self.member_load(sprint, under_pct, over_pct, mode)
            overview.append(SprintOverview(
                sprint=sprint_ref(sprint, now),
                unallocated_projects=[
                    _project_ref(p) for p in projects if not self._allocations.for_project(p.id, sprint)
                ],
                under_capacity_members=[load for load in loads if load.classification == "under"],
                over_capacity_members=[load for load in loads if load.classification == "over"],
            ))
        return overview

    def unstaffed_projects(self, now: datetime | date, count: int = 3) -> list[ProjectRef]:
        """Active projects with no allocation in any of the next ``count`` sprints."""
        sprints = upcoming_sprints(now, count)
        return [
            _project_ref(p)
            for p in self._staffable_projects()
            if not any(self._allocations.for_project(p.id, s) for s in sprints)
        ]
