"""Models describing conversations between two users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from talent_connect.db.session import Base
from talent_connect.db.time import utcnow

PAIR_KEY_SEPARATOR = ":"


def make_pair_key(user_a: str, user_b: str) -> str:
    """Return the order-independent key for a pair of user ids."""
    low, high = sorted((user_a, user_b))
    return f"{low}{PAIR_KEY_SEPARATOR}{high}"


class Conversation(Base):
    """The single conversation between an unordered pair of users.

    ``participant_1``/``participant_2`` keep the order in which the pair was
    first seen; ``pair_key`` is the normalized pair and carries the unique
    constraint, so ``(A, B)`` and ``(B, A)`` can never both be stored.
    """

    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_1: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_2: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pair_key: Mapped[str] = mapped_column(String(140), unique=True, nullable=False)
    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant_1, self.participant_2)

    def other_participant(self, user_id: str) -> str:
        """Return the counterpart of ``user_id`` in this conversation."""
        return self.participant_2 if self.participant_1 == user_id else self.participant_1
