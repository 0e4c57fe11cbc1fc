"""Planning engine exceptions."""


class PlanningError(Exception):
    """Base class for planning engine errors."""


class DuplicateAllocationError(PlanningError):
    """An allocation already exists for the (project, member, sprint) tuple."""

    def __init__(self, project_id: str, member_id: str, sprint, existing_id: str) -> None:
        self.project_id = project_id
        self.member_id = member_id
        self.sprint = sprint
        self.existing_id = existing_id
        super().__init__(
            f"Allocation {existing_id} already exists for project {project_id}, "
            f"member {member_id} in sprint {sprint}"
        )


class DuplicateMemberError(PlanningError):
    """Another team member already uses this email."""


class DuplicateProjectError(PlanningError):
    """Another project already uses this customer/project name pair."""


class ManagerCycleError(PlanningError):
    """Assigning the manager would make the reporting hierarchy cyclic."""


class NotFoundError(PlanningError):
    """Referenced record does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class PersistenceError(PlanningError):
    """Saving a collection to the backend failed."""

    def __init__(self, collection: str, cause: BaseException | None = None) -> None:
        self.collection = collection
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to save {collection}{detail}")
