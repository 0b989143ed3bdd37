"""
Domain models for the Workout Analytics API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services):
- WorkoutRecord: A completed workout log with its exercises
- ExerciseEntry: One exercise performed during a workout
- SetEntry: A single logged set (reps x weight)

Usage:
    >>> from domain.models import WorkoutRecord, ExerciseEntry, SetEntry

    >>> record = WorkoutRecord(
    ...     id="w1",
    ...     user_id="user_1",
    ...     start_time="2024-01-15T18:00:00",
    ...     exercises=[
    ...         ExerciseEntry(
    ...             exercise_name="Squat",
    ...             sets=[SetEntry(reps=5, weight=100)],
    ...         )
    ...     ],
    ... )
"""

from domain.models.workout_record import ExerciseEntry, SetEntry, WorkoutRecord

__all__ = [
    "WorkoutRecord",
    "ExerciseEntry",
    "SetEntry",
]
