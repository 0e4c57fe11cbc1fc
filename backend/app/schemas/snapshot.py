"""Full datastore snapshot schema."""
from pydantic import Field

from app.schemas.allocation import Allocation
from app.schemas.base import CamelModel
from app.schemas.history import HistoryEntry
from app.schemas.project import Project
from app.schemas.team import TeamMember


class DatabaseSnapshot(CamelModel):
    """Everything ``fetch_all`` returns from a persistence backend."""

    team_members: list[TeamMember] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    allocations: list[Allocation] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    # "{year}-{month}-{sprint}" -> project ids
    sprint_projects: dict[str, list[str]] = Field(default_factory=dict)
    # "{projectId}-{year}-{month}-{sprint}" -> {role: percentage}
    sprint_role_requirements: dict[str, dict[str, float]] = Field(default_factory=dict)
