"""
Analytics Service for workout statistics.

This module provides the derived statistics behind the analytics dashboard:
- Workout summary (volume, exercises, sets, average duration)
- Weekly progression and week-by-week volume buckets
- Monthly frequency
- Muscle group distribution
- Top exercises and personal records
- Current/longest streak and weekly volume trend

All calculation functions are pure: they take an already-loaded list of
completed workouts (plus the caller's clock where calendar dates matter) and
return plain dataclasses. AnalyticsService wires them to a WorkoutRepository.

Dates are local calendar dates. Timezone-aware timestamps are converted to
local time before bucketing.
"""
import calendar
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Set

from application.ports.workout_repository import WorkoutRepository
from domain.models import ExerciseEntry, WorkoutRecord

logger = logging.getLogger(__name__)


# Placeholder used when no workout has an end time to derive a duration from
DEFAULT_WORKOUT_DURATION_MINUTES = 45

WEEKLY_PROGRESSION_WEEKS = 8
MONTHLY_FREQUENCY_MONTHS = 2
TOP_EXERCISES_LIMIT = 10
PERSONAL_RECORDS_LIMIT = 5
VOLUME_PROGRESSION_WEEKS = 12

# Checked in order, first keyword found in the exercise name wins
MUSCLE_GROUP_KEYWORDS = (
    ("bench", "chest"),
    ("squat", "legs"),
    ("pull", "back"),
    ("curl", "biceps"),
    ("press", "shoulders"),
)
DEFAULT_MUSCLE_GROUP = "other"


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class WorkoutSummary:
    """Totals and averages over a list of workouts."""
    total_workouts: int
    total_volume: float
    average_volume_per_workout: float
    total_exercises: int
    total_sets: int
    average_workout_duration: int  # minutes


@dataclass
class WeeklyProgressionPoint:
    """Volume for one of the trailing 7-day windows."""
    week: str  # "Week 1" (oldest) .. "Week 8" (current)
    date: str  # ISO date the window starts on
    volume: float
    workouts: int
    intensity: float


@dataclass
class MonthlyFrequencyPoint:
    """Workout count and active days for one calendar month."""
    month: str  # short month name, e.g. "Jan"
    workouts: int
    days: int


@dataclass
class MuscleGroupShare:
    """How often a muscle group was trained, relative to all exercises."""
    name: str
    count: int
    percentage: float


@dataclass
class TopExercise:
    """An exercise with how often it was performed and its total volume."""
    name: str
    count: int = 0
    total_volume: float = 0.0


@dataclass
class PersonalRecord:
    """Heaviest set ever logged for an exercise."""
    exercise: str
    weight: float
    reps: int
    date: datetime


@dataclass
class VolumeTrend:
    """Current week volume compared to the week before."""
    current: float
    previous: float
    trend: str  # "up", "down", "same"
    percentage_change: int


@dataclass
class WeeklyVolumeBucket:
    """Workouts grouped into a Monday-start calendar week."""
    week_start: date
    workouts: int = 0
    volume: float = 0.0
    exercises: int = 0
    intensity: float = 0.0


@dataclass
class StatsSummary:
    """Headline numbers for the workout log overview."""
    total_workouts: int
    total_volume: float
    average_workouts_per_week: float
    current_streak: int
    favorite_exercise: Optional[str] = None


@dataclass
class WorkoutAnalyticsResponse:
    """Response for the full analytics endpoint."""
    summary: WorkoutSummary
    weekly_progression: List[WeeklyProgressionPoint] = field(default_factory=list)
    muscle_group_distribution: List[MuscleGroupShare] = field(default_factory=list)
    top_exercises: List[TopExercise] = field(default_factory=list)
    monthly_frequency: List[MonthlyFrequencyPoint] = field(default_factory=list)
    personal_records: List[PersonalRecord] = field(default_factory=list)


@dataclass
class StreakResponse:
    """Response for the streak endpoint."""
    current_streak: int
    longest_streak: int
    workouts_this_week: int
    weekly_volume_trend: VolumeTrend


# =============================================================================
# Date helpers
# =============================================================================


def _to_local(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _local_date(value: datetime) -> date:
    return _to_local(value).date()


def _resolve_now(now: Optional[datetime]) -> datetime:
    return _to_local(now) if now is not None else datetime.now()


def _start_of_week(now: datetime) -> datetime:
    """Sunday 00:00 of the week containing ``now``."""
    days_since_sunday = (now.weekday() + 1) % 7
    return datetime.combine(now.date() - timedelta(days=days_since_sunday), time.min)


def _monday_of_week(day: date) -> date:
    """Monday of the week containing ``day`` (Sunday belongs to the week before)."""
    return day - timedelta(days=day.weekday())


def _shift_month(year: int, month: int, offset: int) -> tuple:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _workout_dates(workouts: Sequence[WorkoutRecord]) -> Set[date]:
    return {_local_date(w.start_time) for w in workouts}


# =============================================================================
# Volume
# =============================================================================


def exercise_volume(exercise: ExerciseEntry) -> float:
    """Sum of reps * weight over every set of an exercise, completed or not."""
    return float(sum(s.volume for s in exercise.sets))


def workout_total_volume(workout: WorkoutRecord) -> float:
    """
    Total volume of a single workout.

    Uses the precomputed ``totalVolume`` from the metrics blob when it is a
    number. Otherwise sums reps * weight over completed sets, which covers
    older logs saved without metrics.

    Args:
        workout: The workout to measure

    Returns:
        Total volume
    """
    metrics = workout.metrics
    if isinstance(metrics, dict):
        total = metrics.get("totalVolume")
        if isinstance(total, (int, float)) and not isinstance(total, bool):
            return float(total)

    return float(sum(
        s.volume
        for exercise in workout.exercises
        for s in exercise.sets
        if s.completed
    ))


# =============================================================================
# Summary and progression
# =============================================================================


def average_workout_duration(workouts: Sequence[WorkoutRecord]) -> int:
    """
    Average duration in whole minutes.

    Only workouts with an end time count. Falls back to
    DEFAULT_WORKOUT_DURATION_MINUTES when none has one, and to 0 when there
    are no workouts at all.
    """
    if not workouts:
        return 0

    durations = [
        (_to_local(w.end_time) - _to_local(w.start_time)).total_seconds() / 60
        for w in workouts
        if w.end_time is not None
    ]
    if not durations:
        return DEFAULT_WORKOUT_DURATION_MINUTES

    return _round_half_up(sum(durations) / len(durations))


def workout_summary(workouts: Sequence[WorkoutRecord]) -> WorkoutSummary:
    """Totals and averages over ``workouts``."""
    total_workouts = len(workouts)
    total_volume = sum(workout_total_volume(w) for w in workouts)

    return WorkoutSummary(
        total_workouts=total_workouts,
        total_volume=total_volume,
        average_volume_per_workout=total_volume / total_workouts if total_workouts else 0.0,
        total_exercises=sum(len(w.exercises) for w in workouts),
        total_sets=sum(len(e.sets) for w in workouts for e in w.exercises),
        average_workout_duration=average_workout_duration(workouts),
    )


def weekly_progression(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> List[WeeklyProgressionPoint]:
    """
    Volume for the last 8 weeks, oldest first.

    Week i (counting back from 0) covers the dates
    ``[today - 7i, today - 7i + 6]``, inclusive on both ends. Intensity is
    volume per workout, and equals the raw volume for a week without any.
    """
    today = _resolve_now(now).date()
    points: List[WeeklyProgressionPoint] = []

    for i in range(WEEKLY_PROGRESSION_WEEKS - 1, -1, -1):
        week_start = today - timedelta(days=i * 7)
        week_end = week_start + timedelta(days=6)

        week_workouts = [
            w for w in workouts
            if week_start <= _local_date(w.start_time) <= week_end
        ]
        volume = sum(workout_total_volume(w) for w in week_workouts)

        points.append(WeeklyProgressionPoint(
            week=f"Week {WEEKLY_PROGRESSION_WEEKS - i}",
            date=week_start.isoformat(),
            volume=volume,
            workouts=len(week_workouts),
            intensity=volume / (len(week_workouts) or 1),
        ))

    return points


def monthly_frequency(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> List[MonthlyFrequencyPoint]:
    """Workouts and distinct active days for last month and this month."""
    current = _resolve_now(now)
    points: List[MonthlyFrequencyPoint] = []

    for i in range(MONTHLY_FREQUENCY_MONTHS - 1, -1, -1):
        year, month = _shift_month(current.year, current.month, -i)
        month_dates = [
            d for d in (_local_date(w.start_time) for w in workouts)
            if d.year == year and d.month == month
        ]
        points.append(MonthlyFrequencyPoint(
            month=calendar.month_abbr[month],
            workouts=len(month_dates),
            days=len(set(month_dates)),
        ))

    return points


def group_workouts_by_week(workouts: Sequence[WorkoutRecord]) -> List[WeeklyVolumeBucket]:
    """
    Bucket workouts into Monday-start calendar weeks.

    Returns:
        One bucket per week that has at least one workout, sorted by
        week_start ascending
    """
    buckets: Dict[date, WeeklyVolumeBucket] = {}

    for workout in workouts:
        week_start = _monday_of_week(_local_date(workout.start_time))
        bucket = buckets.get(week_start)
        if bucket is None:
            bucket = buckets[week_start] = WeeklyVolumeBucket(week_start=week_start)

        bucket.workouts += 1
        bucket.volume += workout_total_volume(workout)
        bucket.exercises += len(workout.exercises)

    for bucket in buckets.values():
        bucket.intensity = bucket.volume / (bucket.workouts or 1)

    return sorted(buckets.values(), key=lambda b: b.week_start)


# =============================================================================
# Exercises
# =============================================================================


def classify_muscle_group(exercise_name: str) -> str:
    """Map an exercise name to a coarse muscle group by keyword."""
    name = exercise_name.lower()
    for keyword, group in MUSCLE_GROUP_KEYWORDS:
        if keyword in name:
            return group
    return DEFAULT_MUSCLE_GROUP


def muscle_group_distribution(workouts: Sequence[WorkoutRecord]) -> List[MuscleGroupShare]:
    """Share of exercise entries per muscle group, in first-seen order."""
    counts: Dict[str, int] = {}
    for workout in workouts:
        for exercise in workout.exercises:
            group = classify_muscle_group(exercise.exercise_name)
            counts[group] = counts.get(group, 0) + 1

    total = sum(counts.values())
    return [
        MuscleGroupShare(name=name, count=count, percentage=count / total * 100)
        for name, count in counts.items()
    ]


def top_exercises(
    workouts: Sequence[WorkoutRecord],
    limit: int = TOP_EXERCISES_LIMIT,
) -> List[TopExercise]:
    """
    Most frequently performed exercises.

    Volume here counts every set, completed or not. Exercises performed
    equally often keep the order they were first seen in.

    Args:
        workouts: Workouts to scan
        limit: Maximum exercises to return

    Returns:
        Exercises sorted by count descending
    """
    stats: Dict[str, TopExercise] = {}
    for workout in workouts:
        for exercise in workout.exercises:
            entry = stats.get(exercise.exercise_name)
            if entry is None:
                entry = stats[exercise.exercise_name] = TopExercise(name=exercise.exercise_name)
            entry.count += 1
            entry.total_volume += exercise_volume(exercise)

    # sorted() is stable, so ties stay in first-seen order
    return sorted(stats.values(), key=lambda e: -e.count)[:limit]


def personal_records(
    workouts: Sequence[WorkoutRecord],
    limit: int = PERSONAL_RECORDS_LIMIT,
) -> List[PersonalRecord]:
    """
    Heaviest set per exercise, heaviest exercises first.

    A later set only replaces the record when it is strictly heavier.
    """
    best: Dict[str, PersonalRecord] = {}
    for workout in workouts:
        for exercise in workout.exercises:
            name = exercise.exercise_name
            for s in exercise.sets:
                current = best.get(name)
                if current is None or s.weight > current.weight:
                    best[name] = PersonalRecord(
                        exercise=name,
                        weight=s.weight,
                        reps=s.reps,
                        date=workout.start_time,
                    )

    return sorted(best.values(), key=lambda r: -r.weight)[:limit]


def favorite_exercise(workouts: Sequence[WorkoutRecord]) -> Optional[str]:
    """Most frequently performed exercise name, first seen wins ties."""
    counts: Dict[str, int] = {}
    for workout in workouts:
        for exercise in workout.exercises:
            counts[exercise.exercise_name] = counts.get(exercise.exercise_name, 0) + 1

    favorite = None
    max_count = 0
    for name, count in counts.items():
        if count > max_count:
            favorite, max_count = name, count
    return favorite


# =============================================================================
# Streaks and weekly trend
# =============================================================================


def current_streak(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> int:
    """
    Consecutive workout days ending today or yesterday.

    The streak is anchored at today when there is a workout today, otherwise
    at yesterday, so a streak is not lost before the day is over. Without a
    workout on either day the streak is 0.
    """
    dates = _workout_dates(workouts)
    today = _resolve_now(now).date()
    yesterday = today - timedelta(days=1)

    if today in dates:
        day = today
    elif yesterday in dates:
        day = yesterday
    else:
        return 0

    streak = 1
    day -= timedelta(days=1)
    while day in dates:
        streak += 1
        day -= timedelta(days=1)

    return streak


def longest_streak(workouts: Sequence[WorkoutRecord]) -> int:
    """Longest run of consecutive workout days in the whole history."""
    dates = sorted(_workout_dates(workouts))
    if not dates:
        return 0

    longest = run = 1
    for previous, current in zip(dates, dates[1:]):
        run = run + 1 if (current - previous).days == 1 else 1
        longest = max(longest, run)

    return longest


def workouts_this_week(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> int:
    """Workouts started between Sunday 00:00 of the current week and now."""
    current = _resolve_now(now)
    week_start = _start_of_week(current)
    return sum(1 for w in workouts if week_start <= _to_local(w.start_time) <= current)


def weekly_volume_trend(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> VolumeTrend:
    """
    Compare this week's volume with the previous 7 days.

    This week runs from Sunday 00:00 to now; the previous week is the 7 days
    before that Sunday. When the previous week has no volume the change is
    reported as 100 (or 0 if this week has none either).
    """
    current_time = _resolve_now(now)
    week_start = _start_of_week(current_time)
    previous_start = week_start - timedelta(days=7)

    current_volume = 0.0
    previous_volume = 0.0
    for workout in workouts:
        started = _to_local(workout.start_time)
        if week_start <= started <= current_time:
            current_volume += workout_total_volume(workout)
        elif previous_start <= started < week_start:
            previous_volume += workout_total_volume(workout)

    if current_volume > previous_volume:
        trend = "up"
    elif current_volume < previous_volume:
        trend = "down"
    else:
        trend = "same"

    if previous_volume == 0:
        percentage_change = 100 if current_volume > 0 else 0
    else:
        percentage_change = _round_half_up(
            (current_volume - previous_volume) / previous_volume * 100
        )

    return VolumeTrend(
        current=current_volume,
        previous=previous_volume,
        trend=trend,
        percentage_change=percentage_change,
    )


def average_workouts_per_week(workouts: Sequence[WorkoutRecord]) -> float:
    """Workouts per week between the first and last workout (at least one week)."""
    if not workouts:
        return 0.0

    starts = [_to_local(w.start_time) for w in workouts]
    span_weeks = (max(starts) - min(starts)).total_seconds() / timedelta(weeks=1).total_seconds()
    weeks = max(1.0, span_weeks)

    return math.floor(len(workouts) / weeks * 10 + 0.5) / 10


def stats_summary(
    workouts: Sequence[WorkoutRecord],
    *,
    now: Optional[datetime] = None,
) -> StatsSummary:
    """Headline numbers for the workout log overview."""
    return StatsSummary(
        total_workouts=len(workouts),
        total_volume=sum(workout_total_volume(w) for w in workouts),
        average_workouts_per_week=average_workouts_per_week(workouts),
        current_streak=current_streak(workouts, now=now),
        favorite_exercise=favorite_exercise(workouts),
    )


# =============================================================================
# Analytics Service
# =============================================================================


class AnalyticsService:
    """
    Service computing workout analytics for a user.

    Loads completed workouts through the injected repository and runs the
    pure calculation functions above over them. The clock is injectable so
    calendar-based views can be tested against a fixed "now".
    """

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the analytics service.

        Args:
            workout_repo: Repository for completed workout logs
            clock: Returns the current time (default: datetime.now)
        """
        self._workout_repo = workout_repo
        self._clock = clock or datetime.now

    def get_workout_analytics(self, user_id: str) -> WorkoutAnalyticsResponse:
        """
        Get the full analytics bundle for the dashboard.

        Args:
            user_id: User ID

        Returns:
            WorkoutAnalyticsResponse with summary, progression, distribution,
            top exercises, monthly frequency and personal records
        """
        workouts = self._workout_repo.list_completed(user_id)
        now = self._clock()
        logger.debug(f"Computing analytics over {len(workouts)} workouts for user {user_id}")

        return WorkoutAnalyticsResponse(
            summary=workout_summary(workouts),
            weekly_progression=weekly_progression(workouts, now=now),
            muscle_group_distribution=muscle_group_distribution(workouts),
            top_exercises=top_exercises(workouts, TOP_EXERCISES_LIMIT),
            monthly_frequency=monthly_frequency(workouts, now=now),
            personal_records=personal_records(workouts),
        )

    def get_streak(self, user_id: str) -> StreakResponse:
        """Get current/longest streak and this week's activity."""
        workouts = self._workout_repo.list_completed(user_id)
        now = self._clock()

        return StreakResponse(
            current_streak=current_streak(workouts, now=now),
            longest_streak=longest_streak(workouts),
            workouts_this_week=workouts_this_week(workouts, now=now),
            weekly_volume_trend=weekly_volume_trend(workouts, now=now),
        )

    def get_volume_progression(
        self,
        user_id: str,
        *,
        weeks: int = VOLUME_PROGRESSION_WEEKS,
    ) -> List[WeeklyVolumeBucket]:
        """
        Get weekly volume buckets for the trailing ``weeks`` weeks.

        Args:
            user_id: User ID
            weeks: How many weeks back to include

        Returns:
            Monday-start weekly buckets, oldest first
        """
        since = self._clock() - timedelta(weeks=weeks)
        workouts = self._workout_repo.list_completed(user_id, since=since)
        return group_workouts_by_week(workouts)

    def get_stats_summary(self, user_id: str) -> StatsSummary:
        """Get headline numbers for the workout log overview."""
        workouts = self._workout_repo.list_completed(user_id)
        return stats_summary(workouts, now=self._clock())
