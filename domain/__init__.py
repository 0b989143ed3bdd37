"""
Domain layer for the Workout Analytics API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    ExerciseEntry,
    SetEntry,
    WorkoutRecord,
)

__all__ = [
    "ExerciseEntry",
    "SetEntry",
    "WorkoutRecord",
]
