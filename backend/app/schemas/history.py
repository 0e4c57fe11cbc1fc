"""Allocation history schemas."""
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.base import CamelModel, utcnow


class ChangeType(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class HistoryEntry(CamelModel):
    """Immutable audit record of one allocation mutation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: str = Field(default_factory=lambda: str(uuid4()))
    allocation_id: str
    changed_by: str
    changed_at: datetime = Field(default_factory=utcnow)
    change_type: ChangeType
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
