"""
Supabase implementation of WorkoutRepository.

Reads completed workout logs together with their exercise and set logs in a
single nested PostgREST select, and maps the rows to domain WorkoutRecords.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from supabase import Client

from application.ports.workout_repository import WorkoutRepositoryError
from domain.models import ExerciseEntry, SetEntry, WorkoutRecord

logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_LOGS_TABLE = "workout_logs"

# Nested select: workout_logs -> exercise_logs -> set_logs
WORKOUT_LOG_COLUMNS = (
    "id, user_id, workout_name, start_time, end_time, completed, metrics, "
    "program_id, program_day_id, "
    "exercise_logs(id, exercise_id, exercise_name, order_index, "
    "set_logs(set_number, reps, weight, completed))"
)


class SupabaseWorkoutRepository:
    """
    Supabase implementation of WorkoutRepository protocol.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client, table: str = DEFAULT_WORKOUT_LOGS_TABLE):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            table: Name of the workout logs table
        """
        self._client = client
        self._table = table

    def list_completed(
        self,
        user_id: str,
        *,
        since: Optional[datetime] = None,
    ) -> List[WorkoutRecord]:
        """
        List a user's completed workouts, oldest first.

        Rows that cannot be mapped to a WorkoutRecord are skipped and logged.

        Raises:
            WorkoutRepositoryError: If the query fails
        """
        try:
            query = (
                self._client.table(self._table)
                .select(WORKOUT_LOG_COLUMNS)
                .eq("user_id", user_id)
                .eq("completed", True)
            )
            if since is not None:
                # Naive datetimes are local time
                query = query.gte("start_time", since.astimezone().isoformat())
            result = query.order("start_time").execute()
        except Exception as e:
            logger.exception(f"Failed to list completed workouts for user {user_id}")
            raise WorkoutRepositoryError(f"Failed to list completed workouts: {e}") from e

        records: List[WorkoutRecord] = []
        for row in result.data or []:
            record = self._row_to_record(row)
            if record is not None:
                records.append(record)

        logger.debug(f"Loaded {len(records)} completed workouts for user {user_id}")
        return records

    @staticmethod
    def _row_to_sets(set_rows: List[Dict[str, Any]]) -> List[SetEntry]:
        """Map set_logs rows to SetEntries, skipping any set that fails validation."""
        sets: List[SetEntry] = []
        for s in sorted(set_rows, key=lambda s: s.get("set_number") or 0):
            try:
                sets.append(
                    SetEntry(
                        set_number=s.get("set_number"),
                        reps=s.get("reps") or 0,
                        weight=s.get("weight") or 0,
                        completed=s.get("completed") is not False,
                    )
                )
            except ValidationError as e:
                logger.warning(f"Skipping malformed set log: {e}")
        return sets

    @staticmethod
    def _row_to_record(row: Dict[str, Any]) -> Optional[WorkoutRecord]:
        """Map a nested workout_logs row to a WorkoutRecord, or None if malformed."""
        try:
            exercise_rows = sorted(
                row.get("exercise_logs") or [],
                key=lambda e: e.get("order_index") or 0,
            )
            exercises = [
                ExerciseEntry(
                    exercise_name=ex["exercise_name"],
                    exercise_id=ex.get("exercise_id"),
                    sets=SupabaseWorkoutRepository._row_to_sets(ex.get("set_logs") or []),
                )
                for ex in exercise_rows
            ]

            return WorkoutRecord(
                id=str(row["id"]),
                user_id=row["user_id"],
                start_time=row["start_time"],
                end_time=row.get("end_time"),
                completed=row.get("completed") is not False,
                workout_name=row.get("workout_name"),
                exercises=exercises,
                metrics=row.get("metrics"),
                program_id=row.get("program_id"),
                program_day_id=row.get("program_day_id"),
            )
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Skipping malformed workout log: {e}")
            return None
