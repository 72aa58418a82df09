"""Per-user notification feed."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from talent_connect.core.errors import NotFoundError, ValidationError
from talent_connect.models import Notification
from talent_connect.models.notification import NOTIFICATION_TYPES

__all__ = ["NotificationFeed"]


class NotificationFeed:
    """Create and read notifications; every read is scoped to the owner."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(
        self,
        user_id: str,
        type_: str,
        title: str,
        message: str,
        link: str | None = None,
        *,
        commit: bool = True,
    ) -> Notification:
        """Queue a notification for ``user_id``.

        Pass ``commit=False`` to make the notification part of the caller's
        transaction.
        """
        if type_ not in NOTIFICATION_TYPES:
            raise ValidationError(f"Unknown notification type: {type_}")
        notification = Notification(
            user_id=user_id,
            type=type_,
            title=title,
            message=message,
            link=link,
            read=False,
        )
        self._db.add(notification)
        if commit:
            self._db.commit()
            self._db.refresh(notification)
        return notification

    def _owned(self, notification_id: int, user_id: str) -> Notification:
        notification = self._db.get(Notification, notification_id)
        # Other users' notifications are reported as missing, not forbidden.
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return notification

    def mark_read(self, notification_id: int, user_id: str) -> Notification:
        notification = self._owned(notification_id, user_id)
        if not notification.read:
            notification.read = True
            self._db.commit()
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of the user as read; returns the count."""
        result = self._db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
        )
        self._db.commit()
        return result.rowcount or 0

    def unread_count(self, user_id: str) -> int:
        return self._db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
        ) or 0

    def recent(self, user_id: str, limit: int = 10) -> Sequence[Notification]:
        """Return the newest notifications first."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return self._db.execute(stmt).scalars().all()

    def delete(self, notification_id: int, user_id: str) -> None:
        notification = self._owned(notification_id, user_id)
        self._db.delete(notification)
        self._db.commit()
