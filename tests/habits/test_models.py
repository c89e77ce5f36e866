"""Tests for habitflow.habits.models."""

from datetime import date, datetime

import pytest

from habitflow.core.exceptions import InvalidHabitError, InvalidLogError
from habitflow.habits.models import (
    DEFAULT_ICON,
    Habit,
    HabitCategory,
    HabitFrequency,
    HabitLog,
    HabitSnapshot,
    HabitUnit,
    HabitWithStats,
)


class TestEnums:
    def test_categories(self):
        assert [c.value for c in HabitCategory] == [
            "health",
            "fitness",
            "mindfulness",
            "productivity",
            "learning",
            "social",
        ]

    def test_units(self):
        assert {u.value for u in HabitUnit} == {"times", "minutes", "hours", "glasses", "steps", "pages", "custom"}

    def test_is_string_enum(self):
        assert isinstance(HabitFrequency.DAILY, str)
        assert HabitFrequency.WEEKLY == "weekly"


class TestHabit:
    def test_defaults(self):
        h = Habit(id="h1", name="Read")
        assert h.category == HabitCategory.HEALTH
        assert h.target == 1
        assert h.unit == HabitUnit.TIMES
        assert h.frequency == HabitFrequency.DAILY
        assert h.icon == DEFAULT_ICON
        assert h.description is None

    def test_coerces_strings(self):
        h = Habit(id="h1", name="Run", category="fitness", unit="minutes", frequency="weekly")
        assert h.category is HabitCategory.FITNESS
        assert h.unit is HabitUnit.MINUTES
        assert h.frequency is HabitFrequency.WEEKLY

    def test_strips_name(self):
        assert Habit(id="h1", name="  Read  ").name == "Read"

    def test_empty_name_raises(self):
        with pytest.raises(InvalidHabitError, match="non-empty"):
            Habit(id="h1", name="   ")

    def test_long_name_raises(self):
        with pytest.raises(InvalidHabitError, match="50"):
            Habit(id="h1", name="x" * 51)

    def test_long_description_raises(self):
        with pytest.raises(InvalidHabitError, match="200"):
            Habit(id="h1", name="Read", description="x" * 201)

    @pytest.mark.parametrize("target", [0, -1])
    def test_target_below_one_raises(self, target):
        with pytest.raises(InvalidHabitError, match="at least 1"):
            Habit(id="h1", name="Read", target=target)

    @pytest.mark.parametrize("target", [1.5, "3", True])
    def test_non_integer_target_raises(self, target):
        with pytest.raises(InvalidHabitError, match="integer"):
            Habit(id="h1", name="Read", target=target)

    def test_unknown_category_raises(self):
        with pytest.raises(InvalidHabitError, match="category"):
            Habit(id="h1", name="Read", category="hobbies")

    def test_invalid_habit_error_is_value_error(self):
        with pytest.raises(ValueError):
            Habit(id="h1", name="")

    def test_to_dict_uses_camel_case(self):
        h = Habit(id="h1", name="Read", created_at=datetime(2025, 1, 1, 8, 30))
        data = h.to_dict()
        assert data["createdAt"] == "2025-01-01T08:30:00"
        assert data["category"] == "health"
        assert set(data) == {
            "id",
            "name",
            "description",
            "category",
            "icon",
            "color",
            "target",
            "unit",
            "frequency",
            "createdAt",
        }

    def test_from_dict(self):
        h = Habit.from_dict(
            {
                "id": "1",
                "name": "Drink Water",
                "category": "health",
                "icon": "Droplets",
                "color": "#0EA5E9",
                "target": 8,
                "unit": "glasses",
                "frequency": "daily",
                "createdAt": "2024-01-01T00:00:00",
            }
        )
        assert h.target == 8
        assert h.unit is HabitUnit.GLASSES
        assert h.created_at == datetime(2024, 1, 1)

    def test_from_dict_utc_timestamp_becomes_naive(self):
        h = Habit.from_dict({"id": "1", "name": "Walk", "createdAt": "2024-01-01T12:00:00.000Z"})
        assert h.created_at.tzinfo is None

    def test_from_dict_missing_field(self):
        with pytest.raises(InvalidHabitError, match="missing"):
            Habit.from_dict({"id": "1"})


class TestHabitLog:
    def test_normalizes_datetime_to_day(self):
        log = HabitLog(id="l1", habit_id="h1", value=3, date=datetime(2025, 6, 15, 23, 59))
        assert log.date == date(2025, 6, 15)

    def test_parses_iso_string(self):
        log = HabitLog(id="l1", habit_id="h1", value=3, date="2025-06-15")
        assert log.date == date(2025, 6, 15)

    def test_negative_value_raises(self):
        with pytest.raises(InvalidLogError, match="negative"):
            HabitLog(id="l1", habit_id="h1", value=-1, date=date(2025, 6, 15))

    def test_non_numeric_value_raises(self):
        with pytest.raises(InvalidLogError, match="number"):
            HabitLog(id="l1", habit_id="h1", value="3", date=date(2025, 6, 15))

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_value_raises(self, value):
        with pytest.raises(InvalidLogError, match="finite"):
            HabitLog(id="l1", habit_id="h1", value=value, date=date(2025, 6, 15))

    def test_non_finite_value_in_record_raises(self):
        with pytest.raises(InvalidLogError):
            HabitLog.from_dict({"id": "l1", "habitId": "h1", "value": float("nan"), "date": "2025-06-15"})

    def test_blank_note_becomes_none(self):
        log = HabitLog(id="l1", habit_id="h1", value=1, date=date(2025, 6, 15), note="  ")
        assert log.note is None

    def test_dict_fields(self):
        log = HabitLog(id="l1", habit_id="h1", value=2, date=date(2025, 6, 15), note="ok")
        assert log.to_dict() == {"id": "l1", "habitId": "h1", "value": 2, "date": "2025-06-15", "note": "ok"}
        assert HabitLog.from_dict(log.to_dict()) == log


class TestSnapshot:
    def test_empty(self):
        snap = HabitSnapshot.from_dict({})
        assert snap.habits == ()
        assert snap.logs == ()

    def test_from_dict(self):
        snap = HabitSnapshot.from_dict(
            {
                "habits": [{"id": "h1", "name": "Read", "createdAt": "2025-01-01T00:00:00"}],
                "logs": [{"id": "l1", "habitId": "h1", "value": 1, "date": "2025-01-02"}],
            }
        )
        assert snap.habits[0].id == "h1"
        assert snap.logs[0].date == date(2025, 1, 2)


class TestHabitWithStats:
    def test_forwards_habit_fields(self):
        h = Habit(id="h1", name="Read", target=2)
        s = HabitWithStats(habit=h, today_value=2)
        assert s.id == "h1"
        assert s.name == "Read"
        assert s.is_complete_today

    def test_to_dict_merges_stats(self):
        s = HabitWithStats(habit=Habit(id="h1", name="Read"), current_streak=3)
        data = s.to_dict()
        assert data["name"] == "Read"
        assert data["currentStreak"] == 3
        assert data["completionRate"] == 0.0
