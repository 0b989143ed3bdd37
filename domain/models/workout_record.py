"""
Completed workout log models consumed by the analytics engine.

A WorkoutRecord is a read-only snapshot of one logged session: when it
started (and possibly ended), which exercises were performed and the sets
logged for each. Records are built by repository implementations and never
mutated afterwards.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class SetEntry(BaseModel):
    """
    A single logged set.

    Examples:
        >>> SetEntry(reps=5, weight=100).volume
        500.0
    """

    reps: int = Field(default=0, ge=0, description="Repetitions performed")
    weight: float = Field(default=0.0, ge=0, description="Load used for the set")
    completed: bool = Field(default=True, description="Whether the set was completed")
    set_number: Optional[int] = Field(default=None, description="Position within the exercise, used for ordering only")

    @property
    def volume(self) -> float:
        """reps * weight, regardless of completion."""
        return self.reps * self.weight

    model_config = {
        "frozen": True,
    }


class ExerciseEntry(BaseModel):
    """
    One exercise within a workout.

    The exercise name is the grouping key for analytics; exercise_id is
    carried along when the log references a catalog entry but is never
    resolved here.
    """

    exercise_name: str = Field(..., description="Exercise name used for grouping")
    exercise_id: Optional[str] = None
    sets: List[SetEntry] = Field(default_factory=list)

    model_config = {
        "frozen": True,
    }


class WorkoutRecord(BaseModel):
    """
    A logged workout session with its exercises and sets.

    ``metrics`` holds the precomputed metrics blob stored alongside the log.
    Storage returns it either as a JSON object or as a serialized string; the
    validator below normalizes both to a dict (or None when it cannot be
    parsed) so downstream code only ever deals with one shape.

    Examples:
        >>> record = WorkoutRecord(
        ...     id="w1",
        ...     user_id="user_1",
        ...     start_time=datetime(2024, 1, 15, 18, 0),
        ...     metrics='{"totalVolume": 1500}',
        ... )
        >>> record.metrics
        {'totalVolume': 1500}
    """

    id: str
    user_id: str
    start_time: datetime = Field(..., description="Temporal anchor for all date bucketing")
    end_time: Optional[datetime] = None
    completed: bool = True
    workout_name: Optional[str] = None
    exercises: List[ExerciseEntry] = Field(default_factory=list)
    metrics: Optional[Dict[str, Any]] = None
    program_id: Optional[str] = None
    program_day_id: Optional[str] = None

    @field_validator("metrics", mode="before")
    @classmethod
    def parse_metrics(cls, v: Any) -> Optional[Dict[str, Any]]:
        """Accept a dict or a JSON string; anything else becomes None."""
        if v is None or isinstance(v, dict):
            return v
        if isinstance(v, (str, bytes)):
            try:
                parsed = json.loads(v)
            except ValueError:
                return None
            return parsed if isinstance(parsed, dict) else None
        return None

    def __str__(self) -> str:
        name = self.workout_name or self.id
        return f"WorkoutRecord({name} @ {self.start_time.isoformat()}, {len(self.exercises)} exercises)"

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "0f8d7a1c-2a55-4b53-9c1e-0d2f6e0c9a11",
                    "user_id": "user_123",
                    "start_time": "2024-01-15T18:00:00Z",
                    "end_time": "2024-01-15T19:05:00Z",
                    "completed": True,
                    "workout_name": "Push Day",
                    "exercises": [
                        {
                            "exercise_name": "Bench Press",
                            "sets": [
                                {"reps": 8, "weight": 80, "completed": True},
                                {"reps": 6, "weight": 85, "completed": True},
                            ],
                        }
                    ],
                    "metrics": {"totalVolume": 1150},
                }
            ]
        },
    }
