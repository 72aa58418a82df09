# src/talent_connect/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    applications_router,
    blocks_router,
    comments_router,
    conversations_router,
    jobs_router,
    notifications_router,
    profiles_router,
    rate_limits_router,
    realtime_router,
)

__all__ = [
    "profiles_router",
    "comments_router",
    "conversations_router",
    "blocks_router",
    "notifications_router",
    "rate_limits_router",
    "jobs_router",
    "applications_router",
    "admin_router",
    "realtime_router",
]
