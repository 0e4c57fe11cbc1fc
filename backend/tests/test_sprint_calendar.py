"""Tests for sprint arithmetic and sprint keys."""
from datetime import date, datetime

import pytest

from app.engine.sprint_calendar import (
    Sprint,
    SprintKey,
    current_sprint,
    date_range,
    days_from_percentage,
    is_past,
    next_sprint,
    percentage_from_days,
    previous_sprint,
    sprint_label,
    upcoming_sprints,
)


class TestCurrentSprint:
    """Day 15 closes sprint 1; day 16 opens sprint 2."""

    def test_day_15_is_first_sprint(self):
        assert current_sprint(date(2025, 3, 15)) == Sprint(2025, 3, 1)

    def test_day_16_is_second_sprint(self):
        assert current_sprint(datetime(2025, 3, 16, 0, 1)) == Sprint(2025, 3, 2)

    def test_first_of_month(self):
        assert current_sprint(date(2025, 1, 1)) == Sprint(2025, 1, 1)


class TestNavigation:
    def test_next_within_month(self):
        assert next_sprint(Sprint(2025, 6, 1)) == Sprint(2025, 6, 2)

    def test_next_rolls_over_year(self):
        assert next_sprint(Sprint(2024, 12, 2)) == Sprint(2025, 1, 1)

    def test_previous_rolls_back_year(self):
        assert previous_sprint(Sprint(2025, 1, 1)) == Sprint(2024, 12, 2)

    def test_next_then_previous_is_identity(self):
        s = Sprint(2025, 7, 2)
        assert previous_sprint(next_sprint(s)) == s

    def test_upcoming_sprints_crosses_year(self):
        assert upcoming_sprints(date(2025, 12, 20), 3) == [
            Sprint(2025, 12, 2),
            Sprint(2026, 1, 1),
            Sprint(2026, 1, 2),
        ]

    def test_ordering_is_chronological(self):
        assert Sprint(2024, 12, 2) < Sprint(2025, 1, 1) < Sprint(2025, 1, 2)

    def test_is_past(self):
        assert is_past(Sprint(2025, 2, 2), date(2025, 3, 1))
        assert not is_past(Sprint(2025, 3, 1), date(2025, 3, 1))


class TestDateRange:
    def test_second_sprint_of_february_leap_year(self):
        assert date_range(Sprint(2024, 2, 2)) == (16, 29)

    def test_second_sprint_of_february(self):
        assert date_range(Sprint(2025, 2, 2)) == (16, 28)

    def test_first_sprint(self):
        assert date_range(Sprint(2025, 4, 1)) == (1, 15)

    def test_label(self):
        assert sprint_label(Sprint(2025, 3, 1)) == "2025 - March - S1"


class TestSprintValidation:
    @pytest.mark.parametrize("month,index", [(0, 1), (13, 1), (5, 0), (5, 3)])
    def test_rejects_out_of_range(self, month, index):
        with pytest.raises(ValueError):
            Sprint(2025, month, index)


class TestDays:
    def test_half_sprint_is_five_days(self):
        assert days_from_percentage(50) == 5.0

    def test_rounds_to_one_decimal(self):
        assert days_from_percentage(33) == 3.3

    def test_rounds_half_up(self):
        assert days_from_percentage(12.5) == 1.3

    def test_custom_sprint_length(self):
        assert days_from_percentage(50, days_per_sprint=8) == 4.0

    def test_percentage_from_days(self):
        assert percentage_from_days(2.5) == 25.0


class TestSprintKey:
    def test_sprint_only_key(self):
        key = SprintKey.for_sprint(Sprint(2025, 3, 2))
        assert str(key) == "2025-3-2"
        assert SprintKey.parse("2025-3-2") == key

    def test_entity_with_hyphens_round_trips(self):
        project_id = "0b5c8a6e-3f1d-4c9a-9d2e-5f7a1b2c3d4e"
        key = SprintKey.for_sprint(Sprint(2025, 11, 1), project_id)
        parsed = SprintKey.parse(str(key))
        assert parsed.entity_id == project_id
        assert parsed.sprint == Sprint(2025, 11, 1)

    @pytest.mark.parametrize("raw", ["2025-3", "proj-2025-13-1", "x-y-z"])
    def test_malformed_keys_rejected(self, raw):
        with pytest.raises(ValueError):
            SprintKey.parse(raw)
