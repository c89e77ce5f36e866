"""
Habit tracking: models, the statistics engine, and the store.

The engine in :mod:`habitflow.habits.stats` has no dependencies beyond the
models.  Install ``habitflow[insights]`` for LLM-generated analysis.
"""

from .backends import BackendRegistry, HabitBackend, JsonFileBackend, MemoryBackend, create_backend
from .models import (
    CategoryStats,
    Habit,
    HabitCategory,
    HabitFrequency,
    HabitLog,
    HabitSnapshot,
    HabitUnit,
    HabitWithStats,
    StatsOverview,
    WeeklyTrend,
)
from .stats import (
    compute_all_stats,
    compute_category_stats,
    compute_habit_stats,
    compute_overview,
    compute_weekly_trends,
    get_habit_stats,
    overall_completion_rate,
    total_streak,
)
from .store import HabitStore

__all__ = [
    "BackendRegistry",
    "CategoryStats",
    "Habit",
    "HabitBackend",
    "HabitCategory",
    "HabitFrequency",
    "HabitLog",
    "HabitSnapshot",
    "HabitStore",
    "HabitUnit",
    "HabitWithStats",
    "JsonFileBackend",
    "MemoryBackend",
    "StatsOverview",
    "WeeklyTrend",
    "compute_all_stats",
    "compute_category_stats",
    "compute_habit_stats",
    "compute_overview",
    "compute_weekly_trends",
    "create_backend",
    "get_habit_stats",
    "overall_completion_rate",
    "total_streak",
]
