# src/talent_connect/schemas/rate_limit.py
"""Rate-limit status schema."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RateLimitStatus(BaseModel):
    """Remaining allowance for one action in the current window."""

    action: str
    label: str
    remaining: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    reset_at: datetime
    resets_in: str = Field(..., description="Human-readable time until the window resets")

    model_config = ConfigDict(from_attributes=True)
