# src/talent_connect/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .blocks import router as blocks_router
from .comments import router as comments_router
from .conversations import router as conversations_router
from .jobs import applications_router
from .jobs import router as jobs_router
from .notifications import router as notifications_router
from .profiles import router as profiles_router
from .rate_limits import router as rate_limits_router
from .realtime import router as realtime_router

__all__ = [
    "admin_router",
    "applications_router",
    "blocks_router",
    "comments_router",
    "conversations_router",
    "jobs_router",
    "notifications_router",
    "profiles_router",
    "rate_limits_router",
    "realtime_router",
]
