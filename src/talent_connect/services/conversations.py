"""Conversation registry: one conversation per unordered pair of users."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talent_connect.core.errors import (
    BlockedPairError,
    CreationConflictError,
    CreationFailedError,
    NotFoundError,
    ValidationError,
)
from talent_connect.models import Conversation, Message, Profile, make_pair_key
from talent_connect.services.blocks import BlockList
from talent_connect.services.realtime import EVENT_INSERT, ChangeFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Counterpart:
    """Profile summary of the other participant."""

    id: str
    full_name: str | None
    avatar_url: str | None


@dataclass(frozen=True)
class LastMessage:
    content: str
    sender_id: str


@dataclass(frozen=True)
class ConversationOverview:
    """Inbox entry for one conversation, as seen by one participant."""

    id: int
    participant_1: str
    participant_2: str
    last_message_at: datetime
    created_at: datetime
    other_user: Counterpart | None
    last_message: LastMessage | None
    unread_count: int


def _validate_pair(user_a: str | None, user_b: str | None) -> None:
    if not user_a or not user_b:
        raise ValidationError("Both participants are required")
    if user_a == user_b:
        raise ValidationError("You cannot start a conversation with yourself")


class ConversationRegistry:
    """Guarantees a single canonical conversation per user pair."""

    def __init__(self, db: Session, feed: ChangeFeed | None = None) -> None:
        self._db = db
        self._feed = feed
        self._blocks = BlockList(db)

    def find(self, user_a: str, user_b: str) -> Conversation | None:
        """Return the pair's conversation regardless of argument order."""
        stmt = select(Conversation).where(Conversation.pair_key == make_pair_key(user_a, user_b))
        return self._db.execute(stmt).scalar_one_or_none()

    def get_or_create(self, user_a: str, user_b: str) -> Conversation:
        """Return the conversation between two users, creating it if needed.

        Args:
            user_a: The requesting user; stored as ``participant_1`` on creation
            user_b: The other user

        Returns:
            The existing or newly created conversation

        Raises:
            ValidationError: If a participant is missing or both are the same user
            BlockedPairError: If either user has blocked the other
            CreationFailedError: If creation conflicted and no winner could be read back
        """
        _validate_pair(user_a, user_b)

        if self._blocks.is_blocked_either_direction(user_a, user_b):
            logger.info("Conversation between %s and %s refused: blocked", user_a, user_b)
            raise BlockedPairError()

        existing = self.find(user_a, user_b)
        if existing is not None:
            return existing

        try:
            conversation = self._insert(user_a, user_b)
        except CreationConflictError as conflict:
            # Another request created the pair first, possibly in the other order.
            winner = self.find(user_a, user_b)
            if winner is None:
                logger.error(
                    "Conversation between %s and %s conflicted but could not be read back",
                    user_a,
                    user_b,
                )
                raise CreationFailedError(cause=conflict.__cause__ or conflict) from conflict
            logger.info("Conversation %s created concurrently; reusing it", winner.id)
            return winner

        logger.info("Created conversation %s between %s and %s", conversation.id, user_a, user_b)
        if self._feed is not None:
            self._feed.publish_conversation(conversation, EVENT_INSERT)
        return conversation

    def _insert(self, user_a: str, user_b: str) -> Conversation:
        conversation = Conversation(
            participant_1=user_a,
            participant_2=user_b,
            pair_key=make_pair_key(user_a, user_b),
        )
        try:
            with self._db.begin_nested():
                self._db.add(conversation)
                self._db.flush()
        except IntegrityError as exc:
            raise CreationConflictError() from exc
        self._db.commit()
        self._db.refresh(conversation)
        return conversation

    def get_for_participant(self, conversation_id: int, user_id: str) -> Conversation:
        """Return a conversation the user takes part in.

        Non-participants get ``NotFoundError`` so conversation ids cannot be probed.
        """
        conversation = self._db.get(Conversation, conversation_id)
        if conversation is None or not conversation.has_participant(user_id):
            raise NotFoundError("Conversation not found")
        return conversation

    def _conversations_of(self, user_id: str):
        return select(Conversation).where(
            or_(Conversation.participant_1 == user_id, Conversation.participant_2 == user_id)
        )

    def list_for_user(self, user_id: str) -> list[ConversationOverview]:
        """Return the user's conversations, most recently active first."""
        stmt = self._conversations_of(user_id).order_by(
            Conversation.last_message_at.desc(),
            Conversation.id.desc(),
        )
        conversations = self._db.execute(stmt).scalars().all()
        return [self._overview(conversation, user_id) for conversation in conversations]

    def _overview(self, conversation: Conversation, user_id: str) -> ConversationOverview:
        other_id = conversation.other_participant(user_id)

        profile = self._db.get(Profile, other_id)
        other_user = (
            Counterpart(id=profile.id, full_name=profile.full_name, avatar_url=profile.avatar_url)
            if profile is not None
            else None
        )

        last = self._db.execute(
            select(Message.content, Message.sender_id)
            .where(Message.conversation_id == conversation.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        ).first()

        unread = self._db.scalar(
            select(func.count())
            .select_from(Message)
            .where(
                Message.conversation_id == conversation.id,
                Message.read.is_(False),
                Message.sender_id != user_id,
            )
        ) or 0

        return ConversationOverview(
            id=conversation.id,
            participant_1=conversation.participant_1,
            participant_2=conversation.participant_2,
            last_message_at=conversation.last_message_at,
            created_at=conversation.created_at,
            other_user=other_user,
            last_message=LastMessage(content=last.content, sender_id=last.sender_id) if last else None,
            unread_count=unread,
        )

    def total_unread(self, user_id: str) -> int:
        """Count unread messages from others across all of the user's conversations."""
        conversation_ids = self._conversations_of(user_id).with_only_columns(Conversation.id)
        return self._db.scalar(
            select(func.count())
            .select_from(Message)
            .where(
                Message.conversation_id.in_(conversation_ids),
                Message.read.is_(False),
                Message.sender_id != user_id,
            )
        ) or 0
