"""
Workout Repository Interface (Port).

This module defines the abstract interface the analytics engine uses to read
a user's completed workout logs. Implementations may use Supabase, in-memory
storage, or other backends.
"""
from datetime import datetime
from typing import List, Optional, Protocol

from domain.models import WorkoutRecord


class WorkoutRepositoryError(Exception):
    """Raised when workout logs cannot be loaded from storage."""


class WorkoutRepository(Protocol):
    """
    Abstract interface for reading completed workout logs.

    Implementations are responsible for:
    - Scoping results to a single user
    - Returning only workouts flagged as completed
    - Loading each workout's exercises and sets
    - Normalizing the precomputed metrics blob (see WorkoutRecord)

    Domain types are returned instead of database rows so the analytics
    engine never depends on the storage layout.
    """

    def list_completed(
        self,
        user_id: str,
        *,
        since: Optional[datetime] = None,
    ) -> List[WorkoutRecord]:
        """
        List a user's completed workouts, oldest first.

        Args:
            user_id: Owner of the workouts
            since: Only include workouts that started at or after this time

        Returns:
            List of WorkoutRecord ordered by start_time ascending

        Raises:
            WorkoutRepositoryError: If storage cannot be queried
        """
        ...
