"""SQLAlchemy models."""
from app.models.allocation import AllocationRow
from app.models.audit import AllocationHistoryRow
from app.models.project import ProjectRow
from app.models.sprint_plan import SprintProjectsRow, SprintRoleRequirementRow
from app.models.team import TeamMemberRow

__all__ = [
    "AllocationRow",
    "AllocationHistoryRow",
    "ProjectRow",
    "SprintProjectsRow",
    "SprintRoleRequirementRow",
    "TeamMemberRow",
]
