"""
FastAPI Dependency Providers for the Workout Analytics API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_analytics_service, get_current_user
    from backend.core.analytics_service import AnalyticsService

    @router.get("/analytics/streak")
    def get_streak(
        user_id: str = Depends(get_current_user),
        service: AnalyticsService = Depends(get_analytics_service),
    ):
        return service.get_streak(user_id)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_workout_repo] = lambda: FakeWorkoutRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import WorkoutRepository

# Concrete implementations
from infrastructure import SupabaseWorkoutRepository

from backend.core.analytics_service import AnalyticsService
from backend.settings import Settings, get_settings as _get_settings

# Auth from existing module (wrap to maintain single source of truth)
from backend.auth import (
    get_current_user as _get_current_user,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_workout_repo(
    client: Client = Depends(get_supabase_client_required),
    settings: Settings = Depends(get_settings),
) -> WorkoutRepository:
    """
    Get WorkoutRepository implementation.

    Returns a SupabaseWorkoutRepository instance with injected client.
    The return type is the Protocol to enable easy faking.

    Args:
        client: Supabase client (injected)
        settings: Application settings (injected)

    Returns:
        WorkoutRepository: Repository for completed workout logs
    """
    return SupabaseWorkoutRepository(client, table=settings.workout_logs_table)


# =============================================================================
# Service Providers
# =============================================================================


def get_analytics_service(
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
) -> AnalyticsService:
    """Get AnalyticsService wired to the workout repository."""
    return AnalyticsService(workout_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.
    Supports Bearer access tokens (HS256) and API keys.

    Raises:
        HTTPException: 401/403 if authentication fails
    """
    return await _get_current_user(
        authorization=authorization,
        x_api_key=x_api_key,
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_workout_repo",
    # Services
    "get_analytics_service",
    # Authentication
    "get_current_user",
]
