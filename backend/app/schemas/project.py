"""Project schemas."""
from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import Field

from app.schemas.base import CamelModel, utcnow


class ProjectType(str, Enum):
    AI = "AI"
    SOFTWARE = "Software"
    HYBRID = "Hybrid"


class ProjectStatus(str, Enum):
    PENDING = "Pending"
    NEW_SIGNED_OFF = "New Signed Off"
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"
    ON_HOLD = "On Hold"


class ProjectRegion(str, Enum):
    UK = "UK"
    US = "US"
    CANADA = "Canada"
    ISRAEL = "Israel"


class Project(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    customer_id: str | None = None
    customer_name: str
    project_name: str
    project_type: ProjectType = ProjectType.SOFTWARE
    status: ProjectStatus = ProjectStatus.PENDING
    max_capacity_percentage: float | None = Field(default=None, ge=0)
    max_capacity_days: float | None = Field(default=None, ge=0)
    pmo_contact: str | None = None
    latest_status: str | None = None
    activity_close_date: date | None = None
    region: ProjectRegion | None = None
    is_archived: bool = False
    comment: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class ProjectCreate(CamelModel):
    customer_id: str | None = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    project_name: str = Field(..., min_length=1, max_length=255)
    project_type: ProjectType = ProjectType.SOFTWARE
    status: ProjectStatus = ProjectStatus.PENDING
    max_capacity_percentage: float | None = Field(default=None, ge=0)
    max_capacity_days: float | None = Field(default=None, ge=0)
    pmo_contact: str | None = None
    latest_status: str | None = None
    activity_close_date: date | None = None
    region: ProjectRegion | None = None
    comment: str | None = None


class ProjectUpdate(CamelModel):
    customer_id: str | None = None
    customer_name: str | None = None
    project_name: str | None = None
    project_type: ProjectType | None = None
    status: ProjectStatus | None = None
    max_capacity_percentage: float | None = Field(default=None, ge=0)
    max_capacity_days: float | None = Field(default=None, ge=0)
    pmo_contact: str | None = None
    latest_status: str | None = None
    activity_close_date: date | None = None
    region: ProjectRegion | None = None
    is_archived: bool | None = None
    comment: str | None = None
