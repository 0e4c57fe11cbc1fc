"""Per-sprint planning metadata models."""
from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class SprintProjectsRow(Base):
    """Projects pinned to a sprint, keyed by "{year}-{month}-{sprint}"."""

    __tablename__ = "sprint_projects"

    sprint_key: Mapped[str] = mapped_column(String(100), primary_key=True)
    project_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class SprintRoleRequirementRow(Base):
    """Required role percentages, keyed by "{projectId}-{year}-{month}-{sprint}"."""

    __tablename__ = "sprint_role_requirements"

    sprint_key: Mapped[str] = mapped_column(String(100), primary_key=True)
    requirements: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)  # {role: pct}
