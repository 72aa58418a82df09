# src/talent_connect/api/v1/dependencies.py
"""Shared API dependencies for authentication and common functionality."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from talent_connect.core.errors import SuspendedUserError
from talent_connect.core.security import InvalidTokenError, decode_access_token
from talent_connect.db.session import SessionLocal, get_db
from talent_connect.models import Profile
from talent_connect.services import profiles
from talent_connect.services.conversations import ConversationRegistry
from talent_connect.services.messages import MessageLog
from talent_connect.services.notifications import NotificationFeed
from talent_connect.services.rate_limit import RateLimiter, get_rate_limiter
from talent_connect.services.realtime import ChangeFeed
from talent_connect.services.realtime import get_change_feed as _get_change_feed

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def authenticate_token(token: str, db: Session) -> Profile:
    """Resolve a bearer token to the caller's profile.

    Args:
        token: Encoded JWT issued by the auth provider
        db: Database session

    Returns:
        Profile of the authenticated user, provisioned on first sight

    Raises:
        HTTPException: If the token is invalid
    """
    try:
        claims = decode_access_token(token)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    return profiles.get_or_provision(db, claims)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile:
    """Get the current authenticated user from the bearer token."""
    return authenticate_token(credentials.credentials, db)


# Type alias for current user dependency
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]


def get_active_user(current_user: CurrentUserDep) -> Profile:
    """Reject suspended accounts."""
    if current_user.is_suspended:
        raise SuspendedUserError()
    return current_user


ActiveUserDep = Annotated[Profile, Depends(get_active_user)]


def get_admin_user(current_user: ActiveUserDep) -> Profile:
    """Require the admin flag on the caller's profile."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


AdminUserDep = Annotated[Profile, Depends(get_admin_user)]


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _get_change_feed()


ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed)]


def get_session_factory() -> Callable[[], AbstractContextManager[Session]]:
    """Return the session factory used by long-lived realtime sessions."""
    return SessionLocal


SessionFactoryDep = Annotated[
    Callable[[], AbstractContextManager[Session]],
    Depends(get_session_factory),
]


def get_rate_limiter_dep(db: SessionDep) -> RateLimiter:
    return get_rate_limiter(db)


RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter_dep)]


def get_notification_feed(db: SessionDep) -> NotificationFeed:
    return NotificationFeed(db)


NotificationFeedDep = Annotated[NotificationFeed, Depends(get_notification_feed)]


def get_conversation_registry(db: SessionDep, feed: ChangeFeedDep) -> ConversationRegistry:
    return ConversationRegistry(db, feed)


ConversationRegistryDep = Annotated[ConversationRegistry, Depends(get_conversation_registry)]


def get_message_log(
    db: SessionDep,
    feed: ChangeFeedDep,
    notifications: NotificationFeedDep,
) -> MessageLog:
    return MessageLog(db, feed, notifications)


MessageLogDep = Annotated[MessageLog, Depends(get_message_log)]
