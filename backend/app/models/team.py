"""Team member model."""
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TeamMemberRow(Base):
    """Team member; deactivated rather than deleted."""

    __tablename__ = "team_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    teams: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    manager_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    capacity: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=100)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    employee_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
