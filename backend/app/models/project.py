"""Project model."""
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ProjectRow(Base):
    """Project entity; archived rather than deleted."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    customer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    project_name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    max_capacity_percentage: Mapped[float | None] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=True)
    max_capacity_days: Mapped[float | None] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=True)
    pmo_contact: Mapped[str | None] = mapped_column(String(36), nullable=True)
    latest_status: Mapped[str | None] = mapped_column(Text, nullable=True)
    activity_close_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    region: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
