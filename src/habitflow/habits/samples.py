"""Starter habits offered to new users (``habitflow init --samples``)."""

from .models import HabitCategory, HabitUnit

SAMPLE_HABITS: list[dict] = [
    {
        "name": "Drink Water",
        "description": "Stay hydrated throughout the day",
        "category": HabitCategory.HEALTH,
        "icon": "Droplets",
        "color": "#0EA5E9",
        "target": 8,
        "unit": HabitUnit.GLASSES,
    },
    {
        "name": "Morning Exercise",
        "description": "30 minutes of physical activity",
        "category": HabitCategory.FITNESS,
        "icon": "Dumbbell",
        "color": "#10B981",
        "target": 30,
        "unit": HabitUnit.MINUTES,
    },
    {
        "name": "Meditation",
        "description": "Mindfulness and calm",
        "category": HabitCategory.MINDFULNESS,
        "icon": "Brain",
        "color": "#8B5CF6",
        "target": 15,
        "unit": HabitUnit.MINUTES,
    },
    {
        "name": "Read",
        "description": "Read books or articles",
        "category": HabitCategory.LEARNING,
        "icon": "BookOpen",
        "color": "#F59E0B",
        "target": 20,
        "unit": HabitUnit.PAGES,
    },
    {
        "name": "Sleep 8 Hours",
        "description": "Get quality rest",
        "category": HabitCategory.HEALTH,
        "icon": "Moon",
        "color": "#6366F1",
        "target": 8,
        "unit": HabitUnit.HOURS,
    },
]
