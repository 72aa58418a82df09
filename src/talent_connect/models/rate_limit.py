# models/rate_limit.py
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from talent_connect.db.session import Base


class RateLimitCounter(Base):
    """Fixed-window usage counter for one ``(user, action)`` pair."""

    __tablename__ = "rate_limits"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    action: Mapped[str] = mapped_column(String(64), primary_key=True)
    # The window ends window_hours after window_start; the row is reset lazily.
    window_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
