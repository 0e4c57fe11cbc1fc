"""Sprint allocation model."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class AllocationRow(Base):
    """Percentage of a member's sprint on a project.

    Uniqueness of (project, member, sprint) is enforced by the allocation store,
    not by a constraint here.
    """

    __tablename__ = "allocations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    product_manager_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    sprint_index: Mapped[int] = mapped_column(Integer, nullable=False)
    allocation_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    allocation_days: Mapped[float] = mapped_column(Numeric(4, 1, asdecimal=False), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    is_planned: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
