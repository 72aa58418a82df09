"""Domain exceptions raised by the service layer.

Every exception carries an HTTP status and a user-facing ``detail`` so the
API layer can turn it into a response without knowing which service raised
it. Nothing here is process-fatal; each error is scoped to the single action
that triggered it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import status


class MarketplaceError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be completed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def payload(self) -> dict[str, Any]:
        """Return the JSON body for this error."""
        return {"detail": self.detail}


class ValidationError(MarketplaceError):
    """Input rejected before any storage access."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class BlockedPairError(MarketplaceError):
    """A block exists between the two users in either direction."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You cannot contact this user."


class PermissionDeniedError(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action"


class SuspendedUserError(PermissionDeniedError):
    default_detail = "Your account has been suspended"


class NotFoundError(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource is in a conflicting state"


class CreationConflictError(ConflictError):
    """Uniqueness violation during conversation creation.

    Recovered locally by re-reading the winning row; it only escapes the
    registry wrapped in :class:`CreationFailedError`.
    """

    default_detail = "Conversation already exists"


class CreationFailedError(MarketplaceError):
    """Conversation could be neither created nor found after a conflict."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Conversation could not be created"

    def __init__(self, detail: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(detail)
        self.cause = cause


class TransportError(MarketplaceError):
    """A storage or remote call failed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The service is temporarily unavailable, please try again"


class RateLimitExceeded(MarketplaceError):
    """The caller used up the allowance for an action in the current window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Rate limit exceeded"

    def __init__(
        self,
        action: str,
        *,
        remaining: int,
        limit: int,
        reset_at: datetime,
        detail: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.action = action
        self.remaining = remaining
        self.limit = limit
        self.reset_at = reset_at

    def payload(self) -> dict[str, Any]:
        return {
            "detail": self.detail,
            "action": self.action,
            "remaining": self.remaining,
            "limit": self.limit,
            "reset_at": self.reset_at.isoformat(),
        }
