"""Per-sprint planning metadata: pinned projects and role requirements."""
import logging
from typing import Mapping

from app.engine.persistence import Collection, PersistenceCoordinator
from app.engine.sprint_calendar import Sprint, SprintKey

logger = logging.getLogger(__name__)


def _canonical(raw: str) -> str:
    try:
        return str(SprintKey.parse(raw))
    except ValueError:
        logger.warning("Keeping malformed sprint key %r as-is", raw)
        return raw


class SprintMetadata:
    """Sprint-project pins and per-project role requirements.

    Persisted maps keep their canonical string keys; callers work with
    ``SprintKey`` values.
    """

    def __init__(
        self,
        coordinator: PersistenceCoordinator,
        sprint_projects: Mapping[str, list[str]] | None = None,
        role_requirements: Mapping[str, Mapping[str, float]] | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._sprint_projects: dict[str, list[str]] = {
            _canonical(k): list(v) for k, v in (sprint_projects or {}).items()
        }
        self._role_requirements: dict[str, dict[str, float]] = {
            _canonical(k): dict(v) for k, v in (role_requirements or {}).items()
        }

    def sprint_projects(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._sprint_projects.items()}

    def role_requirements(self) -> dict[str, dict[str, float]]:
        return {k: dict(v) for k, v in self._role_requirements.items()}

    def projects_for(self, sprint: Sprint) -> list[str]:
        return list(self._sprint_projects.get(str(SprintKey.for_sprint(sprint)), []))

    async def set_projects(self, sprint: Sprint, project_ids: list[str]) -> list[str]:
        key = str(SprintKey.for_sprint(sprint))
        unique = list(dict.fromkeys(project_ids))
        if unique:
            self._sprint_projects[key] = unique
        else:
            self._sprint_projects.pop(key, None)
        await self._coordinator.save_now(Collection.SPRINT_PROJECTS)
        return unique

    async def pin_project(self, sprint: Sprint, project_id: str) -> list[str]:
        current = self.projects_for(sprint)
        if project_id in current:
            return current
        return await self.set_projects(sprint, current + [project_id])

    async def unpin_project(self, sprint: Sprint, project_id: str) -> list[str]:
        current = self.projects_for(sprint)
        if project_id not in current:
            return current
        return await self.set_projects(sprint, [p for p in current if p != project_id])

    def requirements_for(self, project_id: str, sprint: Sprint) -> dict[str, float]:
        return dict(self._role_requirements.get(str(SprintKey.for_sprint(sprint, project_id)), {}))

    async def set_requirements(
        self, project_id: str, sprint: Sprint, requirements: Mapping[str, float]
    ) -> dict[str, float]:
        key = str(SprintKey.for_sprint(sprint, project_id))
        cleaned = {role: float(pct) for role, pct in requirements.items() if pct}
        if cleaned:
            self._role_requirements[key] = cleaned
        else:
            self._role_requirements.pop(key, None)
        logger.info("Role requirements for %s set to %s", key, cleaned)
        await self._coordinator.save_now(Collection.SPRINT_ROLE_REQUIREMENTS)
        return cleaned
