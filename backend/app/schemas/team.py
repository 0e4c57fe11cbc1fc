"""Team member schemas."""
from datetime import datetime
from uuid import uuid4

from pydantic import EmailStr, Field

from app.schemas.base import CamelModel, utcnow


class TeamMember(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    full_name: str
    email: str
    role: str
    teams: list[str] = Field(default_factory=list)
    manager_id: str | None = None
    capacity: float = Field(default=100, ge=0, le=100)
    is_active: bool = True
    employee_number: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class TeamMemberCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: str = Field(..., min_length=1, max_length=100)
    teams: list[str] = Field(default_factory=list)
    manager_id: str | None = None
    capacity: float = Field(default=100, ge=0, le=100)
    is_active: bool = True
    employee_number: str | None = None


class TeamMemberUpdate(CamelModel):
    full_name: str | None = None
    email: EmailStr | None = None
    role: str | None = None
    teams: list[str] | None = None
    manager_id: str | None = None
    capacity: float | None = Field(default=None, ge=0, le=100)
    is_active: bool | None = None
    employee_number: str | None = None


class ManagerAssignment(CamelModel):
    """Set or clear (null) a member's manager."""

    manager_id: str | None = None
