"""
Habit statistics engine.

Turns a flat history of per-day logs into streaks, completion rates, weekly
trends and category breakdowns.

Every function here is pure: it reads the ``(habits, logs)`` snapshot it is
given, never mutates it, and anchors all date arithmetic on the explicit
``today`` argument (a local calendar day).  Identical inputs always give
identical outputs, so callers may invoke these concurrently without locking.

Callers must supply at most one log per habit per day; nothing here
deduplicates.  Logs whose habit is not in ``habits`` are ignored by the
aggregate views.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from .dates import day_label, days_back, start_of_day
from .models import CategoryStats, Habit, HabitCategory, HabitLog, HabitWithStats, StatsOverview, WeeklyTrend

STREAK_WINDOW_DAYS = 365
WEEK_DAYS = 7
TOP_HABITS = 5


def group_logs(logs: Iterable[HabitLog]) -> dict[str, list[HabitLog]]:
    """Bucket logs by habit id."""
    grouped: dict[str, list[HabitLog]] = defaultdict(list)
    for log in logs:
        grouped[log.habit_id].append(log)
    return grouped


def _streaks(qualifying_days: set[date], today: date) -> tuple[int, int]:
    """Return (current, longest) runs of qualifying days within the lookback window."""
    current = 0
    longest = 0
    run = 0
    touching_today = True
    for offset in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=offset) in qualifying_days:
            run += 1
            longest = max(longest, run)
            if touching_today:
                current = run
        else:
            run = 0
            touching_today = False
    return current, longest


def weekly_progress(habit: Habit, logs: Iterable[HabitLog], today: date) -> float:
    """Percent of a week's target logged since ``today - 7 days``, capped at 100.

    The cutoff day itself is included, so up to eight calendar days contribute.
    """
    cutoff = today - timedelta(days=WEEK_DAYS)
    total = sum(log.value for log in logs if log.date >= cutoff)
    return min(total / (habit.target * WEEK_DAYS) * 100, 100)


def completion_rate(habit: Habit, logs: Iterable[HabitLog], today: date) -> float:
    """Percent of days since creation on which the target was met.

    Elapsed days are ``ceil((midnight today - created_at) / 1 day)``, floored
    at 1 so a habit created today never divides by zero.
    """
    completed_days = sum(1 for log in logs if log.value >= habit.target)
    elapsed = (start_of_day(today) - habit.created_at).total_seconds() / 86400
    total_days = max(math.ceil(elapsed), 1)
    return completed_days / total_days * 100


def compute_habit_stats(habit: Habit, logs: Iterable[HabitLog], today: date) -> HabitWithStats:
    """Derive streaks, today's value, weekly progress and completion rate for one habit.

    Args:
        habit: The habit to score.
        logs: Its logs; entries for other habits are skipped.
        today: Local calendar day the statistics are anchored on.
    """
    own_logs = [log for log in logs if log.habit_id == habit.id]
    if not own_logs:
        return HabitWithStats(habit=habit)

    today_value = next((log.value for log in own_logs if log.date == today), 0)
    qualifying_days = {log.date for log in own_logs if log.value >= habit.target}
    current, longest = _streaks(qualifying_days, today)

    return HabitWithStats(
        habit=habit,
        current_streak=current,
        longest_streak=longest,
        today_value=today_value,
        weekly_progress=weekly_progress(habit, own_logs, today),
        completion_rate=completion_rate(habit, own_logs, today),
    )


def compute_all_stats(habits: Sequence[Habit], logs: Iterable[HabitLog], today: date) -> list[HabitWithStats]:
    """Stats for every habit, in the order the habits were given."""
    grouped = group_logs(logs)
    return [compute_habit_stats(habit, grouped.get(habit.id, []), today) for habit in habits]


def get_habit_stats(
    habit_id: str, habits: Sequence[Habit], logs: Iterable[HabitLog], today: date
) -> HabitWithStats | None:
    """Stats for a single habit, or None when no habit has that id."""
    habit = next((h for h in habits if h.id == habit_id), None)
    if habit is None:
        return None
    return compute_habit_stats(habit, [log for log in logs if log.habit_id == habit_id], today)


def compute_weekly_trends(habits: Sequence[Habit], logs: Iterable[HabitLog], today: date) -> list[WeeklyTrend]:
    """Completion counts for the seven days ending at ``today``, oldest first.

    ``total`` is the current habit count for every day, including days before
    a habit existed.
    """
    targets = {habit.id: habit.target for habit in habits}
    completed_by_day: dict[date, set[str]] = defaultdict(set)
    for log in logs:
        target = targets.get(log.habit_id)
        if target is not None and log.value >= target:
            completed_by_day[log.date].add(log.habit_id)

    total = len(habits)
    trends = []
    for day in days_back(today, WEEK_DAYS):
        completed = len(completed_by_day.get(day, ()))
        trends.append(
            WeeklyTrend(
                day=day_label(day),
                date=day,
                completed=completed,
                total=total,
                rate=completed / total * 100 if total > 0 else 0.0,
            )
        )
    return trends


def _category_breakdown(all_stats: Sequence[HabitWithStats]) -> list[CategoryStats]:
    result = []
    for category in HabitCategory:
        rates = [s.completion_rate for s in all_stats if s.habit.category == category]
        if not rates:
            continue
        result.append(CategoryStats(category=category, count=len(rates), avg_completion=sum(rates) / len(rates)))
    return result


def compute_category_stats(habits: Sequence[Habit], logs: Iterable[HabitLog], today: date) -> list[CategoryStats]:
    """Habit count and mean completion rate per category; empty categories are left out."""
    return _category_breakdown(compute_all_stats(habits, logs, today))


def total_streak(habits: Sequence[Habit], logs: Iterable[HabitLog], today: date) -> int:
    """Longest current streak across all habits (0 with no habits)."""
    return max((s.current_streak for s in compute_all_stats(habits, logs, today)), default=0)


def overall_completion_rate(habits: Sequence[Habit], logs: Iterable[HabitLog], today: date) -> float:
    """Mean completion rate across all habits (0 with no habits)."""
    all_stats = compute_all_stats(habits, logs, today)
    if not all_stats:
        return 0.0
    return sum(s.completion_rate for s in all_stats) / len(all_stats)


def best_longest_streak(all_stats: Sequence[HabitWithStats]) -> int:
    """Highest ``longest_streak`` of any habit (0 with no habits)."""
    return max((s.longest_streak for s in all_stats), default=0)


def average_weekly_progress(all_stats: Sequence[HabitWithStats]) -> float:
    """Mean weekly progress across habits (0 with no habits)."""
    if not all_stats:
        return 0.0
    return sum(s.weekly_progress for s in all_stats) / len(all_stats)


def top_habits(all_stats: Sequence[HabitWithStats], limit: int = TOP_HABITS) -> list[HabitWithStats]:
    """The ``limit`` habits with the highest completion rate; ties keep input order."""
    return sorted(all_stats, key=lambda s: s.completion_rate, reverse=True)[:limit]


def compute_overview(habits: Sequence[Habit], logs: Sequence[HabitLog], today: date) -> StatsOverview:
    """Every derived view for one snapshot, scored once per habit."""
    all_stats = compute_all_stats(habits, logs, today)
    rates = [s.completion_rate for s in all_stats]

    return StatsOverview(
        today=today,
        habits=all_stats,
        weekly_trends=compute_weekly_trends(habits, logs, today),
        categories=_category_breakdown(all_stats),
        total_streak=max((s.current_streak for s in all_stats), default=0),
        overall_completion_rate=sum(rates) / len(rates) if rates else 0.0,
        completed_today=sum(1 for s in all_stats if s.is_complete_today),
        total_habits=len(habits),
        total_logs=len(logs),
        longest_streak=best_longest_streak(all_stats),
        average_weekly_progress=average_weekly_progress(all_stats),
        top_habits=top_habits(all_stats),
    )


# ── Display helpers ──────────────────────────────────────────────────


def progress_message(completed: int, total: int) -> str:
    """One-line summary of how today is going."""
    ratio = completed / total if total > 0 else 0
    if ratio == 1:
        return "Perfect day! All habits completed!"
    if ratio >= 0.7:
        return "Great progress! Almost there!"
    if ratio >= 0.3:
        return "You're doing well, keep going!"
    if completed > 0:
        return "Good start! Let's keep the momentum."
    return "Let's make today count!"


def streak_label(streak: int) -> str:
    if streak == 0:
        return "No streak"
    if streak >= 30:
        return "On fire!"
    if streak >= 7:
        return "Great streak!"
    return "Keep going!"
