# src/talent_connect/api/v1/endpoints/rate_limits.py
"""Rate-limit status endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from talent_connect.api.v1.dependencies import CurrentUserDep, RateLimiterDep
from talent_connect.schemas.rate_limit import RateLimitStatus
from talent_connect.services.rate_limit import action_label, describe_reset

router = APIRouter(prefix="/rate-limits", tags=["rate-limits"])


@router.get("/{action}", response_model=RateLimitStatus)
async def get_rate_limit_status(
    action: str,
    current_user: CurrentUserDep,
    rate_limiter: RateLimiterDep,
) -> RateLimitStatus:
    """Return the caller's remaining allowance without consuming it."""
    info = rate_limiter.peek(current_user.id, action)
    return RateLimitStatus(
        action=action,
        label=action_label(action),
        remaining=info.remaining,
        limit=info.limit,
        reset_at=info.reset_at,
        resets_in=describe_reset(info.reset_at),
    )
