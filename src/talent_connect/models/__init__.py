"""SQLAlchemy models for the Talent Connect application."""

from .block import UserBlock
from .conversation import Conversation, make_pair_key
from .job import Application, Job
from .message import Message
from .moderation import ProfileComment, Report
from .notification import Notification
from .profile import Profile
from .rate_limit import RateLimitCounter

__all__ = [
    "Application",
    "Conversation", "make_pair_key",
    "Job",
    "Message",
    "Notification",
    "Profile",
    "ProfileComment", "Report",
    "RateLimitCounter",
    "UserBlock",
]
