"""Sprint metadata schemas."""
from pydantic import Field

from app.schemas.base import CamelModel


class SprintProjectsSchema(CamelModel):
    key: str
    project_ids: list[str] = Field(default_factory=list)


class SprintProjectsUpdate(CamelModel):
    project_ids: list[str]


class RoleRequirementsSchema(CamelModel):
    key: str
    requirements: dict[str, float] = Field(default_factory=dict)


class RoleRequirementsUpdate(CamelModel):
    """Required percentage per role; an empty mapping clears the entry."""

    requirements: dict[str, float] = Field(default_factory=dict)


class SaveStatus(CamelModel):
    is_saving: bool
    has_pending_save: bool
    last_save_error: str | None = None
