"""
Analytics router for workout statistics.

This router provides endpoints for:
- The full analytics dashboard bundle
- Current/longest streak and weekly volume trend
- Weekly volume progression
- Headline stats summary

Every response is wrapped as {"success": true, "data": ...}.
"""
import logging
from dataclasses import asdict
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from api.deps import get_analytics_service, get_current_user
from backend.core.analytics_service import AnalyticsService, VOLUME_PROGRESSION_WEEKS

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
)


# =============================================================================
# Response Models
# =============================================================================


class WorkoutSummaryData(BaseModel):
    total_workouts: int
    total_volume: float
    average_volume_per_workout: float
    total_exercises: int
    total_sets: int
    average_workout_duration: int


class WeeklyProgressionItem(BaseModel):
    week: str
    date: str
    volume: float
    workouts: int
    intensity: float


class MuscleGroupItem(BaseModel):
    name: str
    count: int
    percentage: float


class TopExerciseItem(BaseModel):
    name: str
    count: int
    total_volume: float


class MonthlyFrequencyItem(BaseModel):
    month: str
    workouts: int
    days: int


class PersonalRecordItem(BaseModel):
    exercise: str
    weight: float
    reps: int
    date: datetime


class WorkoutAnalyticsData(BaseModel):
    """Full analytics bundle for the dashboard."""
    summary: WorkoutSummaryData
    weekly_progression: List[WeeklyProgressionItem] = Field(default_factory=list)
    muscle_group_distribution: List[MuscleGroupItem] = Field(default_factory=list)
    top_exercises: List[TopExerciseItem] = Field(default_factory=list)
    monthly_frequency: List[MonthlyFrequencyItem] = Field(default_factory=list)
    personal_records: List[PersonalRecordItem] = Field(default_factory=list)


class VolumeTrendData(BaseModel):
    current: float
    previous: float
    trend: str  # "up", "down", "same"
    percentage_change: int


class StreakData(BaseModel):
    current_streak: int
    longest_streak: int
    workouts_this_week: int
    weekly_volume_trend: VolumeTrendData


class WeeklyVolumeItem(BaseModel):
    week_start: date
    workouts: int
    volume: float
    exercises: int
    intensity: float


class StatsSummaryData(BaseModel):
    total_workouts: int
    total_volume: float
    average_workouts_per_week: float
    current_streak: int
    favorite_exercise: Optional[str] = None


class WorkoutAnalyticsApiResponse(BaseModel):
    """Response model for the analytics bundle endpoint."""
    success: bool = True
    data: WorkoutAnalyticsData


class StreakApiResponse(BaseModel):
    """Response model for the streak endpoint."""
    success: bool = True
    data: StreakData


class VolumeApiResponse(BaseModel):
    """Response model for the volume progression endpoint."""
    success: bool = True
    data: List[WeeklyVolumeItem]


class StatsSummaryApiResponse(BaseModel):
    """Response model for the stats summary endpoint."""
    success: bool = True
    data: StatsSummaryData


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/workouts", response_model=WorkoutAnalyticsApiResponse)
def get_workout_analytics(
    user_id: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> WorkoutAnalyticsApiResponse:
    """
    Get the full analytics bundle.

    Includes summary totals, 8-week progression, muscle group distribution,
    top 10 exercises, monthly frequency and personal records.
    """
    try:
        result = service.get_workout_analytics(user_id)
    except Exception as e:
        logger.error(f"Failed to fetch analytics for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch analytics")

    return WorkoutAnalyticsApiResponse(data=WorkoutAnalyticsData(**asdict(result)))


@router.get("/streak", response_model=StreakApiResponse)
def get_streak(
    user_id: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> StreakApiResponse:
    """Get current and longest streak, workouts this week and the weekly volume trend."""
    try:
        result = service.get_streak(user_id)
    except Exception as e:
        logger.error(f"Failed to fetch streak for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch streak information")

    return StreakApiResponse(data=StreakData(**asdict(result)))


@router.get("/volume", response_model=VolumeApiResponse)
def get_volume_progression(
    weeks: int = Query(
        VOLUME_PROGRESSION_WEEKS, ge=1, le=104, description="Number of weeks to include"
    ),
    user_id: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> VolumeApiResponse:
    """
    Get weekly volume progression.

    Workouts from the last ``weeks`` weeks grouped into Monday-start weeks,
    oldest first. Weeks without workouts are omitted.
    """
    try:
        buckets = service.get_volume_progression(user_id, weeks=weeks)
    except Exception as e:
        logger.error(f"Failed to fetch volume data for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch volume data")

    return VolumeApiResponse(data=[WeeklyVolumeItem(**asdict(b)) for b in buckets])


@router.get("/summary", response_model=StatsSummaryApiResponse)
def get_stats_summary(
    user_id: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> StatsSummaryApiResponse:
    """Get headline workout stats."""
    try:
        result = service.get_stats_summary(user_id)
    except Exception as e:
        logger.error(f"Failed to fetch statistics for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")

    return StatsSummaryApiResponse(data=StatsSummaryData(**asdict(result)))
