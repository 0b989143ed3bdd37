"""
Repository Interfaces (Ports) for the Workout Analytics API.

This package defines abstract interfaces that decouple the analytics engine
from infrastructure (database, external services). Implementations are
provided in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import WorkoutRepository

    class AnalyticsService:
        def __init__(self, workout_repo: WorkoutRepository):
            self.workout_repo = workout_repo

        def get_streak(self, user_id):
            workouts = self.workout_repo.list_completed(user_id)
            ...
"""

from application.ports.workout_repository import (
    WorkoutRepository,
    WorkoutRepositoryError,
)

__all__ = [
    "WorkoutRepository",
    "WorkoutRepositoryError",
]
