"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- Fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutRepository, create_workout_repo, make_workout

    # Direct instantiation
    repo = FakeWorkoutRepository()
    repo.seed([make_workout(start_time=datetime(2024, 1, 15, 18, 0))])

    # Factory function with pre-populated data
    repo = create_workout_repo(user_id="user1", num_workouts=5)
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid
from datetime import datetime, timedelta

from domain.models import ExerciseEntry, SetEntry, WorkoutRecord
from tests.fakes.workout_repository import FakeWorkoutRepository


# =============================================================================
# Builders
# =============================================================================


def make_exercise(
    name: str,
    sets: Sequence[Tuple[int, float]] = ((10, 100),),
    *,
    completed: bool = True,
) -> ExerciseEntry:
    """
    Build an ExerciseEntry from (reps, weight) pairs.

    Args:
        name: Exercise name
        sets: (reps, weight) per set
        completed: Completion flag applied to every set
    """
    return ExerciseEntry(
        exercise_name=name,
        sets=[
            SetEntry(reps=reps, weight=weight, completed=completed, set_number=i + 1)
            for i, (reps, weight) in enumerate(sets)
        ],
    )


def make_workout(
    start_time: datetime,
    exercises: Optional[List[ExerciseEntry]] = None,
    *,
    user_id: str = "test_user",
    end_time: Optional[datetime] = None,
    metrics: Any = None,
    completed: bool = True,
    workout_id: Optional[str] = None,
    workout_name: Optional[str] = None,
) -> WorkoutRecord:
    """Build a WorkoutRecord with sensible defaults for tests."""
    return WorkoutRecord(
        id=workout_id or str(uuid.uuid4()),
        user_id=user_id,
        start_time=start_time,
        end_time=end_time,
        completed=completed,
        workout_name=workout_name,
        exercises=exercises or [],
        metrics=metrics,
    )


# =============================================================================
# Factory Functions
# =============================================================================


def create_workout_repo(
    *,
    user_id: str = "test_user",
    num_workouts: int = 0,
    start: Optional[datetime] = None,
) -> FakeWorkoutRepository:
    """
    Create a FakeWorkoutRepository with optional pre-populated workouts.

    Generated workouts are one day apart, ending at ``start`` (default now),
    each with a single "Bench Press" exercise of 3 x 10 @ 100.

    Args:
        user_id: User ID for generated workouts
        num_workouts: Number of sample workouts to create
        start: Start time of the most recent generated workout

    Returns:
        Pre-populated FakeWorkoutRepository
    """
    repo = FakeWorkoutRepository()
    latest = start or datetime.now()

    workouts = [
        make_workout(
            latest - timedelta(days=num_workouts - 1 - i),
            [make_exercise("Bench Press", [(10, 100)] * 3)],
            user_id=user_id,
            end_time=latest - timedelta(days=num_workouts - 1 - i) + timedelta(minutes=60),
            workout_name=f"Test Workout {i + 1}",
        )
        for i in range(num_workouts)
    ]
    repo.seed(workouts)

    return repo


def workout_row(
    *,
    workout_id: str = "w1",
    user_id: str = "test_user",
    start_time: str = "2024-01-15T18:00:00+00:00",
    end_time: Optional[str] = "2024-01-15T19:00:00+00:00",
    metrics: Any = None,
    exercise_logs: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build a nested workout_logs row as returned by Supabase."""
    return {
        "id": workout_id,
        "user_id": user_id,
        "workout_name": "Push Day",
        "start_time": start_time,
        "end_time": end_time,
        "completed": True,
        "metrics": metrics,
        "program_id": None,
        "program_day_id": None,
        "exercise_logs": exercise_logs if exercise_logs is not None else [
            {
                "id": "e1",
                "exercise_id": None,
                "exercise_name": "Bench Press",
                "order_index": 0,
                "set_logs": [
                    {"set_number": 1, "reps": 10, "weight": 100, "completed": True},
                    {"set_number": 2, "reps": 8, "weight": 100, "completed": False},
                ],
            }
        ],
    }


__all__ = [
    "FakeWorkoutRepository",
    "make_exercise",
    "make_workout",
    "create_workout_repo",
    "workout_row",
]
