"""Pydantic schemas."""
from app.schemas.allocation import (
    Allocation,
    AllocationCreate,
    AllocationUpdate,
    CapacityWarningResponse,
)
from app.schemas.capacity import MemberLoad, ProjectRef, RoleGap, SprintOverview, SprintRef
from app.schemas.history import ChangeType, HistoryEntry
from app.schemas.project import Project, ProjectCreate, ProjectStatus, ProjectUpdate
from app.schemas.snapshot import DatabaseSnapshot
from app.schemas.team import TeamMember, TeamMemberCreate, TeamMemberUpdate

__all__ = [
    "Allocation",
    "AllocationCreate",
    "AllocationUpdate",
    "CapacityWarningResponse",
    "MemberLoad",
    "ProjectRef",
    "RoleGap",
    "SprintOverview",
    "SprintRef",
    "ChangeType",
    "HistoryEntry",
    "Project",
    "ProjectCreate",
    "ProjectStatus",
    "ProjectUpdate",
    "DatabaseSnapshot",
    "TeamMember",
    "TeamMemberCreate",
    "TeamMemberUpdate",
]
