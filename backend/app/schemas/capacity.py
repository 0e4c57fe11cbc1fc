"""Capacity aggregation result schemas."""
from datetime import date
from typing import Literal

from pydantic import Field

from app.schemas.base import CamelModel

CapacityClass = Literal["under", "good", "over"]
UtilizationStatus = Literal["under", "full", "over"]


class SprintRef(CamelModel):
    year: int
    month: int
    sprint_index: int = Field(..., alias="sprint")
    label: str
    start_date: date
    end_date: date
    is_past: bool = False


class MemberLoad(CamelModel):
    member_id: str
    full_name: str
    capacity: float
    total_percentage: float
    classification: CapacityClass


class RoleGap(CamelModel):
    role: str
    required: float
    allocated: float


class ProjectRef(CamelModel):
    project_id: str
    customer_name: str
    project_name: str


class SprintOverview(CamelModel):
    """Dashboard summary for one sprint."""

    sprint: SprintRef
    unallocated_projects: list[ProjectRef] = Field(default_factory=list)
    under_capacity_members: list[MemberLoad] = Field(default_factory=list)
    over_capacity_members: list[MemberLoad] = Field(default_factory=list)
