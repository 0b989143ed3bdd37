"""
Infrastructure Layer for the Workout Analytics API.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

from infrastructure.db import SupabaseWorkoutRepository

__all__ = [
    "SupabaseWorkoutRepository",
]
