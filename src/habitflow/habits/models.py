"""
Habit data models.

``Habit`` and ``HabitLog`` are the persisted records.  ``HabitWithStats``,
``WeeklyTrend``, ``CategoryStats`` and ``StatsOverview`` are read-only views
derived by :mod:`habitflow.habits.stats` and never stored.

Serialized field names use camelCase (``habitId``, ``createdAt``) so files
written by earlier versions of the app load unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from habitflow.core.exceptions import InvalidHabitError, InvalidLogError

from .dates import parse_datetime, to_day

MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200

DEFAULT_ICON = "Target"
DEFAULT_COLOR = "#0EA5E9"

KNOWN_ICONS = (
    "Droplets",
    "Dumbbell",
    "Brain",
    "BookOpen",
    "Moon",
    "Heart",
    "Flame",
    "Target",
    "Coffee",
    "Apple",
    "Footprints",
    "Pencil",
    "Music",
    "Sun",
    "Zap",
)

PALETTE = (
    "#0EA5E9",
    "#10B981",
    "#8B5CF6",
    "#F59E0B",
    "#EF4444",
    "#EC4899",
    "#6366F1",
    "#14B8A6",
    "#F97316",
    "#06B6D4",
)


class HabitCategory(StrEnum):
    HEALTH = "health"
    FITNESS = "fitness"
    MINDFULNESS = "mindfulness"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    SOCIAL = "social"


class HabitUnit(StrEnum):
    TIMES = "times"
    MINUTES = "minutes"
    HOURS = "hours"
    GLASSES = "glasses"
    STEPS = "steps"
    PAGES = "pages"
    CUSTOM = "custom"


class HabitFrequency(StrEnum):
    """How often a habit is meant to be done.

    Only DAILY has its own statistics; WEEKLY habits are scored with daily
    semantics until a weekly cadence is implemented.
    """

    DAILY = "daily"
    WEEKLY = "weekly"


def _coerce_enum(enum_cls: type[StrEnum], value: Any, field_name: str) -> StrEnum:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidHabitError(f"Invalid {field_name} {value!r}. Allowed: {allowed}") from None


@dataclass
class Habit:
    """A tracked behavior with a daily numeric target."""

    id: str
    name: str
    category: HabitCategory = HabitCategory.HEALTH
    target: int = 1
    unit: HabitUnit = HabitUnit.TIMES
    frequency: HabitFrequency = HabitFrequency.DAILY
    description: str | None = None
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise InvalidHabitError("Habit id must be a non-empty string")
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidHabitError("Habit name must be a non-empty string")
        self.name = self.name.strip()
        if len(self.name) > MAX_NAME_LENGTH:
            raise InvalidHabitError(f"Habit name must be at most {MAX_NAME_LENGTH} characters")

        if self.description is not None:
            self.description = str(self.description).strip() or None
        if self.description and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidHabitError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")

        # bool is an int subclass; reject it explicitly
        if isinstance(self.target, bool) or not isinstance(self.target, int):
            raise InvalidHabitError(f"Target must be an integer, got {self.target!r}")
        if self.target < 1:
            raise InvalidHabitError(f"Target must be at least 1, got {self.target}")

        self.category = _coerce_enum(HabitCategory, self.category, "category")
        self.unit = _coerce_enum(HabitUnit, self.unit, "unit")
        self.frequency = _coerce_enum(HabitFrequency, self.frequency, "frequency")
        self.icon = self.icon or DEFAULT_ICON
        self.color = self.color or DEFAULT_COLOR
        self.created_at = parse_datetime(self.created_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "icon": self.icon,
            "color": self.color,
            "target": self.target,
            "unit": self.unit.value,
            "frequency": self.frequency.value,
            "createdAt": self.created_at.isoformat(timespec="seconds"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Habit:
        try:
            return cls(
                id=str(data["id"]),
                name=data["name"],
                description=data.get("description"),
                category=data.get("category", HabitCategory.HEALTH),
                icon=data.get("icon") or DEFAULT_ICON,
                color=data.get("color") or DEFAULT_COLOR,
                target=int(data.get("target", 1)),
                unit=data.get("unit", HabitUnit.TIMES),
                frequency=data.get("frequency", HabitFrequency.DAILY),
                created_at=data.get("createdAt") or datetime.now(),
            )
        except KeyError as e:
            raise InvalidHabitError(f"Habit record is missing field {e}") from None
        except (TypeError, ValueError) as e:
            if isinstance(e, InvalidHabitError):
                raise
            raise InvalidHabitError(f"Malformed habit record: {e}") from e


@dataclass
class HabitLog:
    """Progress recorded for one habit on one calendar day."""

    id: str
    habit_id: str
    value: float
    date: date
    note: str | None = None

    def __post_init__(self):
        if not self.id or not self.habit_id:
            raise InvalidLogError("Log id and habit id must be non-empty")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidLogError(f"Log value must be a number, got {self.value!r}")
        if not math.isfinite(self.value):
            raise InvalidLogError(f"Log value must be a finite number, got {self.value}")
        if self.value < 0:
            raise InvalidLogError(f"Log value must not be negative, got {self.value}")
        self.date = to_day(self.date)
        if self.note is not None:
            self.note = str(self.note).strip() or None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "habitId": self.habit_id,
            "value": self.value,
            "date": self.date.isoformat(),
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HabitLog:
        try:
            return cls(
                id=str(data["id"]),
                habit_id=str(data["habitId"]),
                value=data["value"],
                date=data["date"],
                note=data.get("note"),
            )
        except KeyError as e:
            raise InvalidLogError(f"Log record is missing field {e}") from None
        except (TypeError, ValueError) as e:
            if isinstance(e, InvalidLogError):
                raise
            raise InvalidLogError(f"Malformed log record: {e}") from e


@dataclass(frozen=True)
class HabitSnapshot:
    """An immutable, mutually consistent view of all habits and logs."""

    habits: tuple[Habit, ...] = ()
    logs: tuple[HabitLog, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "logs": [log.to_dict() for log in self.logs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HabitSnapshot:
        return cls(
            habits=tuple(Habit.from_dict(h) for h in data.get("habits") or []),
            logs=tuple(HabitLog.from_dict(log) for log in data.get("logs") or []),
        )


# ── Derived views ────────────────────────────────────────────────────


@dataclass(frozen=True)
class HabitWithStats:
    """A habit together with the statistics derived from its logs."""

    habit: Habit
    current_streak: int = 0
    longest_streak: int = 0
    today_value: float = 0
    weekly_progress: float = 0.0
    completion_rate: float = 0.0

    @property
    def id(self) -> str:
        return self.habit.id

    @property
    def name(self) -> str:
        return self.habit.name

    @property
    def target(self) -> int:
        return self.habit.target

    @property
    def is_complete_today(self) -> bool:
        return self.today_value >= self.habit.target

    def to_dict(self) -> dict[str, Any]:
        data = self.habit.to_dict()
        data.update(
            {
                "currentStreak": self.current_streak,
                "longestStreak": self.longest_streak,
                "todayValue": self.today_value,
                "weeklyProgress": self.weekly_progress,
                "completionRate": self.completion_rate,
            }
        )
        return data


@dataclass(frozen=True)
class WeeklyTrend:
    """Completion counts for one of the last seven days."""

    day: str
    date: date
    completed: int
    total: int
    rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "completed": self.completed,
            "total": self.total,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class CategoryStats:
    category: HabitCategory
    count: int
    avg_completion: float

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category.value, "count": self.count, "avgCompletion": self.avg_completion}


@dataclass(frozen=True)
class StatsOverview:
    """Everything a dashboard needs, computed from one snapshot."""

    today: date
    habits: list[HabitWithStats]
    weekly_trends: list[WeeklyTrend]
    categories: list[CategoryStats]
    total_streak: int
    overall_completion_rate: float
    completed_today: int
    total_habits: int
    total_logs: int
    longest_streak: int = 0
    average_weekly_progress: float = 0.0
    top_habits: list[HabitWithStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "today": self.today.isoformat(),
            "habits": [h.to_dict() for h in self.habits],
            "weeklyTrends": [t.to_dict() for t in self.weekly_trends],
            "categories": [c.to_dict() for c in self.categories],
            "totalStreak": self.total_streak,
            "overallCompletionRate": self.overall_completion_rate,
            "completedToday": self.completed_today,
            "totalHabits": self.total_habits,
            "totalLogs": self.total_logs,
            "longestStreak": self.longest_streak,
            "averageWeeklyProgress": self.average_weekly_progress,
            "topHabits": [h.to_dict() for h in self.top_habits],
        }
