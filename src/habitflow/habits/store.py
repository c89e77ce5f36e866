"""HabitStore — the authoritative collection of habits and logs.

The store owns the canonical ``HabitSnapshot``, enforces the rules the
statistics engine relies on (one log per habit per day, no orphaned logs,
valid targets and values) and persists every change through a
:class:`~habitflow.habits.backends.HabitBackend`.

Writers are serialized by a single lock and publish a fresh immutable
snapshot on every change; readers just grab the current snapshot, so a
statistics query never observes a half-applied mutation.
"""

from __future__ import annotations

import dataclasses
import threading
import uuid
from collections.abc import Callable, Iterable
from datetime import date, datetime

from loguru import logger

from habitflow.core.exceptions import HabitNotFoundError, InvalidHabitError

from . import stats
from .backends import HabitBackend, MemoryBackend
from .dates import local_today, to_day
from .models import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
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

_IMMUTABLE_FIELDS = {"id", "created_at"}
_MUTABLE_FIELDS = {f.name for f in dataclasses.fields(Habit)} - _IMMUTABLE_FIELDS

# Quick increments stop at this multiple of the target
OVERSHOOT_FACTOR = 2

_KEEP_NOTE = object()


def _new_id() -> str:
    return uuid.uuid4().hex


class HabitStore:
    """Thread-safe CRUD over habits and logs with statistics queries.

    Args:
        backend: Where snapshots are loaded from and saved to.
            Defaults to an in-memory backend.
        clock: Returns the current local calendar day.  Only the store reads
            the clock; the statistics engine always receives ``today``
            explicitly.
    """

    def __init__(self, backend: HabitBackend | None = None, clock: Callable[[], date] | None = None) -> None:
        self._backend = backend or MemoryBackend()
        self._clock = clock or local_today
        self._write_lock = threading.Lock()
        self._snapshot = self._backend.load()

    @property
    def backend(self) -> HabitBackend:
        return self._backend

    def today(self) -> date:
        return self._clock()

    def snapshot(self) -> HabitSnapshot:
        """The current consistent view of all habits and logs."""
        return self._snapshot

    def _commit(self, habits: Iterable[Habit], logs: Iterable[HabitLog]) -> HabitSnapshot:
        """Persist and publish a new snapshot. Caller must hold the write lock."""
        new = HabitSnapshot(habits=tuple(habits), logs=tuple(logs))
        self._backend.save(new)
        self._snapshot = new
        return new

    # -- Habits -------------------------------------------------------------

    def add_habit(
        self,
        name: str,
        *,
        category: HabitCategory | str = HabitCategory.HEALTH,
        target: int = 1,
        unit: HabitUnit | str = HabitUnit.TIMES,
        description: str | None = None,
        icon: str = DEFAULT_ICON,
        color: str = DEFAULT_COLOR,
        frequency: HabitFrequency | str = HabitFrequency.DAILY,
    ) -> Habit:
        """Create a habit with a fresh id and creation timestamp."""
        habit = Habit(
            id=_new_id(),
            name=name,
            category=category,
            target=target,
            unit=unit,
            frequency=frequency,
            description=description,
            icon=icon,
            color=color,
            created_at=datetime.now().replace(microsecond=0),
        )
        with self._write_lock:
            current = self._snapshot
            self._commit((*current.habits, habit), current.logs)
        logger.info(f"Added habit {habit.id} ({habit.name!r})")
        return habit

    def update_habit(self, habit_id: str, **changes: object) -> Habit:
        """Change any habit field except ``id`` and ``created_at``.

        Raises:
            HabitNotFoundError: No habit has ``habit_id``.
            InvalidHabitError: A field is unknown, immutable, or gets an invalid value.
        """
        for key in changes:
            if key in _IMMUTABLE_FIELDS:
                raise InvalidHabitError(f"Habit field '{key}' cannot be changed")
            if key not in _MUTABLE_FIELDS:
                raise InvalidHabitError(f"Unknown habit field: {key}")

        with self._write_lock:
            current = self._snapshot
            habits = list(current.habits)
            for index, habit in enumerate(habits):
                if habit.id == habit_id:
                    updated = dataclasses.replace(habit, **changes)
                    habits[index] = updated
                    break
            else:
                raise HabitNotFoundError(f"Habit not found: {habit_id}")
            self._commit(habits, current.logs)

        logger.debug(f"Updated habit {habit_id}: {sorted(changes)}")
        return updated

    def delete_habit(self, habit_id: str) -> bool:
        """Delete a habit and every log that references it. Returns True if deleted."""
        with self._write_lock:
            current = self._snapshot
            habits = [h for h in current.habits if h.id != habit_id]
            if len(habits) == len(current.habits):
                return False
            logs = [log for log in current.logs if log.habit_id != habit_id]
            self._commit(habits, logs)

        logger.info(f"Deleted habit {habit_id} and {len(current.logs) - len(logs)} log(s)")
        return True

    def get_habit(self, habit_id: str) -> Habit | None:
        return next((h for h in self._snapshot.habits if h.id == habit_id), None)

    def list_habits(self) -> list[Habit]:
        return list(self._snapshot.habits)

    def seed(self, habits: Iterable[dict]) -> list[Habit]:
        """Add starter habits (keyword dicts for ``add_habit``) to an empty store."""
        if self._snapshot.habits:
            logger.debug("Store already has habits; skipping seed")
            return []
        return [self.add_habit(**fields) for fields in habits]

    # -- Logs ---------------------------------------------------------------

    def _write_log(
        self,
        habit_id: str,
        day: date | datetime | str | None,
        next_value: Callable[[Habit, float], float],
        note: str | None | object = _KEEP_NOTE,
    ) -> HabitLog:
        """Read the day's value, compute the new one and upsert, all under the write lock."""
        log_day = to_day(day) if day is not None else self.today()

        with self._write_lock:
            current = self._snapshot
            habit = next((h for h in current.habits if h.id == habit_id), None)
            if habit is None:
                raise HabitNotFoundError(f"Habit not found: {habit_id}")

            logs = list(current.logs)
            index = next(
                (i for i, log in enumerate(logs) if log.habit_id == habit_id and log.date == log_day),
                None,
            )
            existing = logs[index] if index is not None else None
            value = next_value(habit, existing.value if existing else 0)

            if existing is not None:
                new_note = existing.note if note is _KEEP_NOTE else note
                if value == existing.value and new_note == existing.note:
                    return existing
                entry = dataclasses.replace(existing, value=value, note=new_note)
                logs[index] = entry
            else:
                new_note = None if note is _KEEP_NOTE else note
                entry = HabitLog(id=_new_id(), habit_id=habit_id, value=value, date=log_day, note=new_note)
                logs.append(entry)
            self._commit(current.habits, logs)

        logger.debug(f"Logged {entry.value} for habit {habit_id} on {log_day.isoformat()}")
        return entry

    def log_habit(
        self,
        habit_id: str,
        value: float,
        note: str | None = None,
        *,
        day: date | datetime | str | None = None,
    ) -> HabitLog:
        """Record progress for a habit on a day (today by default).

        A second call for the same habit and day replaces the value and note
        of the existing log instead of adding another one.

        Raises:
            HabitNotFoundError: No habit has ``habit_id``.
            InvalidLogError: ``value`` is negative or not a finite number.
        """
        return self._write_log(habit_id, day, lambda habit, old: value, note)

    def increment_habit(self, habit_id: str, *, day: date | datetime | str | None = None) -> HabitLog:
        """Add one to the day's value, capped at twice the target. The note is kept."""
        return self._write_log(habit_id, day, lambda habit, old: min(old + 1, habit.target * OVERSHOOT_FACTOR))

    def decrement_habit(self, habit_id: str, *, day: date | datetime | str | None = None) -> HabitLog:
        """Take one off the day's value, never going below 0. The note is kept."""
        return self._write_log(habit_id, day, lambda habit, old: max(old - 1, 0))

    def complete_habit(self, habit_id: str, *, day: date | datetime | str | None = None) -> HabitLog:
        """Log exactly the target, unless the day already meets it."""
        return self._write_log(habit_id, day, lambda habit, old: old if old >= habit.target else habit.target)

    def list_logs(self) -> list[HabitLog]:
        return list(self._snapshot.logs)

    def logs_for(self, habit_id: str) -> list[HabitLog]:
        return [log for log in self._snapshot.logs if log.habit_id == habit_id]

    # -- Statistics ---------------------------------------------------------

    def get_habit_stats(self, habit_id: str, today: date | None = None) -> HabitWithStats | None:
        """Stats for one habit, or None if it doesn't exist."""
        snap = self._snapshot
        return stats.get_habit_stats(habit_id, snap.habits, snap.logs, today or self.today())

    def all_stats(self, today: date | None = None) -> list[HabitWithStats]:
        snap = self._snapshot
        return stats.compute_all_stats(snap.habits, snap.logs, today or self.today())

    def weekly_trends(self, today: date | None = None) -> list[WeeklyTrend]:
        snap = self._snapshot
        return stats.compute_weekly_trends(snap.habits, snap.logs, today or self.today())

    def category_stats(self, today: date | None = None) -> list[CategoryStats]:
        snap = self._snapshot
        return stats.compute_category_stats(snap.habits, snap.logs, today or self.today())

    def total_streak(self, today: date | None = None) -> int:
        snap = self._snapshot
        return stats.total_streak(snap.habits, snap.logs, today or self.today())

    def overall_completion_rate(self, today: date | None = None) -> float:
        snap = self._snapshot
        return stats.overall_completion_rate(snap.habits, snap.logs, today or self.today())

    def overview(self, today: date | None = None) -> StatsOverview:
        snap = self._snapshot
        return stats.compute_overview(snap.habits, snap.logs, today or self.today())
