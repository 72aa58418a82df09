"""Per-user notification feed."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from talent_connect.db.session import Base
from talent_connect.db.time import utcnow

NOTIFICATION_NEW_APPLICATION = "new_application"
NOTIFICATION_MESSAGE = "message"
NOTIFICATION_SYSTEM = "system"
NOTIFICATION_TYPES = (
    NOTIFICATION_NEW_APPLICATION,
    NOTIFICATION_MESSAGE,
    NOTIFICATION_SYSTEM,
)


class Notification(Base):
    """System-generated alert visible only to ``user_id``."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
