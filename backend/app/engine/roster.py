"""Team member directory and project catalog."""
import logging
from typing import Iterable

from app.engine.errors import (
    DuplicateMemberError,
    DuplicateProjectError,
    ManagerCycleError,
    NotFoundError,
)
from app.engine.persistence import Collection, PersistenceCoordinator
from app.schemas.base import utcnow
from app.schemas.project import Project, ProjectCreate, ProjectStatus
from app.schemas.team import TeamMember, TeamMemberCreate

logger = logging.getLogger(__name__)


class MemberDirectory:
    """Single writer for the team members collection. Members are never deleted."""

    def __init__(self, coordinator: PersistenceCoordinator, members: Iterable[TeamMember] = ()) -> None:
        self._coordinator = coordinator
        self._members: dict[str, TeamMember] = {m.id: m for m in members}

    def __len__(self) -> int:
        return len(self._members)

    def all(self) -> list[TeamMember]:
        return list(self._members.values())

    def find(self, member_id: str) -> TeamMember | None:
        return self._members.get(member_id)

    def get(self, member_id: str) -> TeamMember:
        member = self._members.get(member_id)
        if member is None:
            raise NotFoundError("Team member", member_id)
        return member

    def active_members(self) -> list[TeamMember]:
        return [m for m in self._members.values() if m.is_active]

    def in_team(self, team: str) -> list[TeamMember]:
        return [m for m in self._members.values() if team in m.teams]

    def reports_of(self, manager_id: str) -> list[TeamMember]:
        return [m for m in self._members.values() if m.manager_id == manager_id]

    def _check_email(self, email: str, exclude_id: str | None = None) -> None:
        wanted = email.strip().lower()
        for member in self._members.values():
            if member.id != exclude_id and member.email.strip().lower() == wanted:
                raise DuplicateMemberError(f"Email {email} is already used by {member.full_name}")

    def _check_manager(self, member_id: str, manager_id: str | None) -> None:
        """Reject a manager that is the member or one of the member's reports."""
        if manager_id is None:
            return
        if manager_id not in self._members:
            raise NotFoundError("Team member", manager_id)
        seen: set[str] = set()
        current: str | None = manager_id
        while current is not None and current not in seen:
            if current == member_id:
                raise ManagerCycleError(
                    f"Member {manager_id} reports to {member_id} and cannot be its manager"
                )
            seen.add(current)
            parent = self._members.get(current)
            current = parent.manager_id if parent else None

    def add_member(self, data: TeamMemberCreate) -> TeamMember:
        self._check_email(data.email)
        member = TeamMember(**data.model_dump(), created_at=utcnow())
        self._check_manager(member.id, member.manager_id)
        self._members[member.id] = member
        logger.info("Team member %s added (%s)", member.id, member.full_name)
        self._coordinator.schedule(Collection.TEAM_MEMBERS)
        return member

    def update_member(self, member_id: str, updates: dict) -> TeamMember:
        old = self.get(member_id)
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
        if updates.get("email"):
            self._check_email(updates["email"], exclude_id=member_id)
        if "manager_id" in updates:
            self._check_manager(member_id, updates["manager_id"])
        member = TeamMember.model_validate({**old.model_dump(), **updates})
        self._members[member_id] = member
        self._coordinator.schedule(Collection.TEAM_MEMBERS)
        return member

    def set_manager(self, member_id: str, manager_id: str | None) -> TeamMember:
        self.get(member_id)
        return self.update_member(member_id, {"manager_id": manager_id})

    def deactivate_member(self, member_id: str) -> TeamMember:
        return self.update_member(member_id, {"is_active": False})


class ProjectCatalog:
    """Single writer for the projects collection. Projects are archived, never deleted."""

    def __init__(self, coordinator: PersistenceCoordinator, projects: Iterable[Project] = ()) -> None:
        self._coordinator = coordinator
        self._projects: dict[str, Project] = {p.id: p for p in projects}

    def __len__(self) -> int:
        return len(self._projects)

    def all(self) -> list[Project]:
        return list(self._projects.values())

    def find(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def get(self, project_id: str) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def active_projects(self) -> list[Project]:
        """Projects not archived, regardless of status."""
        return [p for p in self._projects.values() if not p.is_archived]

    def in_status(self, status: ProjectStatus) -> list[Project]:
        return [p for p in self.active_projects() if p.status == status]

    def _check_unique(self, customer_name: str, project_name: str, exclude_id: str | None = None) -> None:
        wanted = (customer_name.strip().lower(), project_name.strip().lower())
        for project in self._projects.values():
            if project.id == exclude_id:
                continue
            if (project.customer_name.strip().lower(), project.project_name.strip().lower()) == wanted:
                raise DuplicateProjectError(
                    f"Project {project_name!r} already exists for customer {customer_name!r}"
                )

    def add_project(self, data: ProjectCreate) -> Project:
        self._check_unique(data.customer_name, data.project_name)
        project = Project(**data.model_dump(), created_at=utcnow())
        self._projects[project.id] = project
        logger.info("Project %s added (%s - %s)", project.id, project.customer_name, project.project_name)
        self._coordinator.schedule(Collection.PROJECTS)
        return project

    def update_project(self, project_id: str, updates: dict) -> Project:
        old = self.get(project_id)
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
        if "customer_name" in updates or "project_name" in updates:
            self._check_unique(
                updates.get("customer_name") or old.customer_name,
                updates.get("project_name") or old.project_name,
                exclude_id=project_id,
            )
        project = Project.model_validate({**old.model_dump(), **updates})
        self._projects[project_id] = project
        self._coordinator.schedule(Collection.PROJECTS)
        return project

    def archive_project(self, project_id: str) -> Project:
        return self.update_project(project_id, {"is_archived": True})
