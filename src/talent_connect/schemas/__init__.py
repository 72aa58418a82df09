# src/talent_connect/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .conversation import (
    BlockStatusResponse,
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from .job import ApplicationCreate, ApplicationResponse, JobCreate, JobResponse
from .moderation import (
    CommentCreate,
    CommentResponse,
    ModerationQueueResponse,
    ReportCreate,
    ReportResponse,
)
from .notification import MarkAllReadResponse, NotificationResponse
from .profile import CounterpartResponse, OwnProfileResponse, ProfileResponse, ProfileUpdate
from .rate_limit import RateLimitStatus

__all__ = [
    "BlockStatusResponse", "ConversationCreate", "ConversationResponse",
    "ConversationSummary", "MarkReadResponse", "MessageCreate", "MessageResponse",
    "UnreadCountResponse",
    "ApplicationCreate", "ApplicationResponse", "JobCreate", "JobResponse",
    "CommentCreate", "CommentResponse", "ModerationQueueResponse",
    "ReportCreate", "ReportResponse",
    "MarkAllReadResponse", "NotificationResponse",
    "CounterpartResponse", "OwnProfileResponse", "ProfileResponse", "ProfileUpdate",
    "RateLimitStatus",
]
