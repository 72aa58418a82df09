"""Block list between users."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from talent_connect.core.errors import ValidationError
from talent_connect.models import UserBlock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockStatus:
    """Block relation between a viewer and another user."""

    has_blocked: bool
    is_blocked_by: bool

    @property
    def blocked(self) -> bool:
        return self.has_blocked or self.is_blocked_by


def _either_direction(user_a: str, user_b: str):
    return or_(
        and_(UserBlock.blocker_id == user_a, UserBlock.blocked_id == user_b),
        and_(UserBlock.blocker_id == user_b, UserBlock.blocked_id == user_a),
    )


class BlockList:
    """Directional block rows checked in both orientations."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def block(self, blocker_id: str, target_id: str) -> UserBlock:
        """Record that ``blocker_id`` blocked ``target_id``.

        Blocking an already blocked user returns the existing row. History is
        left untouched; only future contact is prevented.
        """
        if not blocker_id or not target_id:
            raise ValidationError("Both users are required")
        if blocker_id == target_id:
            raise ValidationError("You cannot block yourself")

        existing = self._db.get(UserBlock, (blocker_id, target_id))
        if existing is not None:
            return existing

        block = UserBlock(blocker_id=blocker_id, blocked_id=target_id)
        self._db.add(block)
        self._db.commit()
        logger.info("User %s blocked %s", blocker_id, target_id)
        return block

    def unblock(self, blocker_id: str, target_id: str) -> bool:
        """Remove the caller's own block; returns True if a row was removed."""
        existing = self._db.get(UserBlock, (blocker_id, target_id))
        if existing is None:
            return False
        self._db.delete(existing)
        self._db.commit()
        logger.info("User %s unblocked %s", blocker_id, target_id)
        return True

    def is_blocked_either_direction(self, user_a: str, user_b: str) -> bool:
        stmt = select(UserBlock.blocker_id).where(_either_direction(user_a, user_b)).limit(1)
        return self._db.execute(stmt).first() is not None

    def status(self, viewer_id: str, other_id: str) -> BlockStatus:
        """Return which side of the pair, if any, has blocked the other."""
        rows = self._db.execute(
            select(UserBlock.blocker_id).where(_either_direction(viewer_id, other_id))
        ).scalars().all()
        return BlockStatus(
            has_blocked=viewer_id in rows,
            is_blocked_by=other_id in rows,
        )

    def blocked_by(self, blocker_id: str) -> list[str]:
        """Return the ids the user has blocked."""
        stmt = (
            select(UserBlock.blocked_id)
            .where(UserBlock.blocker_id == blocker_id)
            .order_by(UserBlock.created_at)
        )
        return list(self._db.execute(stmt).scalars().all())
