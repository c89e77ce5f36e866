"""
habitflow exception hierarchy.

All habitflow exceptions inherit from HabitflowError, making it easy for callers
to catch library-level errors while still distinguishing specific failure modes.
"""


class HabitflowError(Exception):
    """Base exception class for all habitflow errors."""


class ConfigurationError(HabitflowError):
    """Raised for configuration errors (missing keys, invalid values)."""


class StoreError(HabitflowError):
    """Raised when a store backend cannot load or persist its data."""


class HabitNotFoundError(HabitflowError, KeyError):
    """Raised when a mutation references a habit id that doesn't exist."""


class InvalidHabitError(HabitflowError, ValueError):
    """Raised for habit definitions that break a model invariant."""


class InvalidLogError(HabitflowError, ValueError):
    """Raised for log records that break a model invariant."""


class InsightError(HabitflowError):
    """Raised when the insight service cannot produce an analysis."""
