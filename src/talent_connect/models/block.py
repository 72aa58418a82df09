"""Directional block records between users."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from talent_connect.db.session import Base
from talent_connect.db.time import utcnow


class UserBlock(Base):
    """``blocker_id`` has blocked ``blocked_id``.

    Stored directionally but symmetric in effect: either orientation stops
    the pair from exchanging messages.
    """

    __tablename__ = "user_blocks"

    blocker_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    blocked_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
