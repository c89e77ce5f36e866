"""habitflow — personal habit tracking with streaks, completion rates and trends."""

__version__ = "0.1.0"
