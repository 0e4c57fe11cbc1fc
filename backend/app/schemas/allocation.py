"""Sprint allocation schemas."""
from datetime import datetime
from uuid import uuid4

from pydantic import Field

from app.engine.sprint_calendar import Sprint
from app.schemas.base import CamelModel, utcnow


class Allocation(CamelModel):
    """Percentage of one member's sprint assigned to one project.

    The sprint index is persisted under ``sprint`` to match existing data.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    project_id: str
    product_manager_id: str
    year: int
    month: int = Field(..., ge=1, le=12)
    sprint_index: int = Field(..., alias="sprint", ge=1, le=2)
    allocation_percentage: float = Field(..., ge=0, le=100)
    allocation_days: float = 0
    comment: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    created_by: str = ""
    is_planned: bool | None = None

    @property
    def sprint(self) -> Sprint:
        return Sprint(self.year, self.month, self.sprint_index)

    def tuple_key(self) -> tuple[str, str, int, int, int]:
        return (self.project_id, self.product_manager_id, self.year, self.month, self.sprint_index)


class AllocationCreate(CamelModel):
    project_id: str
    product_manager_id: str
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    sprint_index: int = Field(..., alias="sprint", ge=1, le=2)
    allocation_percentage: float = Field(..., ge=0, le=100)
    comment: str | None = None
    is_planned: bool | None = None

    @property
    def sprint(self) -> Sprint:
        return Sprint(self.year, self.month, self.sprint_index)


class AllocationUpdate(CamelModel):
    project_id: str | None = None
    product_manager_id: str | None = None
    year: int | None = Field(default=None, ge=2000, le=2100)
    month: int | None = Field(default=None, ge=1, le=12)
    sprint_index: int | None = Field(default=None, alias="sprint", ge=1, le=2)
    allocation_percentage: float | None = Field(default=None, ge=0, le=100)
    allocation_days: float | None = Field(default=None, ge=0)
    comment: str | None = None
    is_planned: bool | None = None


class CapacityWarningResponse(CamelModel):
    """Returned when a save would push a project past its max capacity."""

    project_id: str
    year: int
    month: int
    sprint_index: int = Field(..., alias="sprint")
    total_percentage: float
    max_capacity_percentage: float
    message: str
