# src/talent_connect/services/__init__.py
"""Business logic services for the Talent Connect application."""

from .blocks import BlockList, BlockStatus
from .chat_session import ChatSession, InboxSession
from .conversations import ConversationOverview, ConversationRegistry
from .jobs import JobBoard
from .messages import MessageLog
from .moderation import ModerationService
from .notifications import NotificationFeed
from .rate_limit import RateLimiter, RateLimitInfo
from .realtime import ChangeEvent, ChangeFeed, RedisChangeRelay

__all__ = [
    "BlockList",
    "BlockStatus",
    "ChangeEvent",
    "ChangeFeed",
    "ChatSession",
    "ConversationOverview",
    "ConversationRegistry",
    "InboxSession",
    "JobBoard",
    "MessageLog",
    "ModerationService",
    "NotificationFeed",
    "RateLimitInfo",
    "RateLimiter",
    "RedisChangeRelay",
]
