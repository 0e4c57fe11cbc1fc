"""Sprint calendar - two sprints per calendar month, 24 per year.

Sprint 1 covers days 1-15 of the month, sprint 2 covers day 16 through the
last day of the month. All functions here are pure.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

DAYS_PER_SPRINT = 10
FIRST_SPRINT_LAST_DAY = 15

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@dataclass(frozen=True, order=True)
class Sprint:
    """A (year, month, sprint_index) slot, ordered lexicographically."""

    year: int
    month: int
    sprint_index: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1..12, got {self.month}")
        if self.sprint_index not in (1, 2):
            raise ValueError(f"sprint_index must be 1 or 2, got {self.sprint_index}")

    def __str__(self) -> str:
        return f"{self.year}-{self.month}-{self.sprint_index}"


def current_sprint(now: datetime | date) -> Sprint:
    sprint_index = 1 if now.day <= FIRST_SPRINT_LAST_DAY else 2
    return Sprint(now.year, now.month, sprint_index)


def next_sprint(s: Sprint) -> Sprint:
    if s.sprint_index == 1:
        return Sprint(s.year, s.month, 2)
    if s.month == 12:
        return Sprint(s.year + 1, 1, 1)
    return Sprint(s.year, s.month + 1, 1)


def previous_sprint(s: Sprint) -> Sprint:
    if s.sprint_index == 2:
        return Sprint(s.year, s.month, 1)
    if s.month == 1:
        return Sprint(s.year - 1, 12, 2)
    return Sprint(s.year, s.month - 1, 2)


def sprints_from(start: Sprint, count: int) -> list[Sprint]:
    sprints: list[Sprint] = []
    s = start
    for _ in range(count):
        sprints.append(s)
        s = next_sprint(s)
    return sprints


def upcoming_sprints(now: datetime | date, count: int) -> list[Sprint]:
    """Current sprint followed by the next ``count - 1`` sprints."""
    return sprints_from(current_sprint(now), count)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def date_range(s: Sprint) -> tuple[int, int]:
    """(start_day, end_day) of the sprint within its month."""
    if s.sprint_index == 1:
        return (1, FIRST_SPRINT_LAST_DAY)
    return (FIRST_SPRINT_LAST_DAY + 1, last_day_of_month(s.year, s.month))


def sprint_dates(s: Sprint) -> tuple[date, date]:
    start_day, end_day = date_range(s)
    return date(s.year, s.month, start_day), date(s.year, s.month, end_day)


def is_past(s: Sprint, now: datetime | date) -> bool:
    return s < current_sprint(now)


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return f"Month {month}"


def sprint_label(s: Sprint) -> str:
    return f"{s.year} - {month_name(s.month)} - S{s.sprint_index}"


def _round_one_place(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def days_from_percentage(percentage: float, days_per_sprint: int = DAYS_PER_SPRINT) -> float:
    """Allocation days = percentage of the sprint's working days, 1 decimal."""
    return _round_one_place(Decimal(str(percentage)) / Decimal(100) * Decimal(days_per_sprint))


def percentage_from_days(days: float, days_per_sprint: int = DAYS_PER_SPRINT) -> float:
    return _round_one_place(Decimal(str(days)) / Decimal(days_per_sprint) * Decimal(100))


@dataclass(frozen=True)
class SprintKey:
    """Composite key for per-sprint metadata maps.

    Canonical string form is ``{entity_id}-{year}-{month}-{sprint_index}``, or
    ``{year}-{month}-{sprint_index}`` for keys that belong to the sprint itself.
    Entity ids may contain hyphens (UUIDs), so parsing splits from the right.
    """

    entity_id: str | None
    year: int
    month: int
    sprint_index: int

    @classmethod
    def for_sprint(cls, sprint: Sprint, entity_id: str | None = None) -> "SprintKey":
        return cls(entity_id, sprint.year, sprint.month, sprint.sprint_index)

    @classmethod
    def parse(cls, raw: str) -> "SprintKey":
        parts = raw.rsplit("-", 3)
        if len(parts) == 4:
            entity_id, year, month, sprint_index = parts
        elif len(parts) == 3:
            entity_id = None
            year, month, sprint_index = parts
        else:
            raise ValueError(f"Malformed sprint key: {raw!r}")
        sprint = Sprint(int(year), int(month), int(sprint_index))
        return cls.for_sprint(sprint, entity_id or None)

    @property
    def sprint(self) -> Sprint:
        return Sprint(self.year, self.month, self.sprint_index)

    def __str__(self) -> str:
        if self.entity_id is None:
            return f"{self.year}-{self.month}-{self.sprint_index}"
        return f"{self.entity_id}-{self.year}-{self.month}-{self.sprint_index}"
