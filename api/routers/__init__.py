"""
Router package for the Workout Analytics API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- analytics: Workout analytics, streaks, volume progression and stats summary
"""

from api.routers.health import router as health_router
from api.routers.analytics import router as analytics_router

__all__ = [
    "health_router",
    "analytics_router",
]
