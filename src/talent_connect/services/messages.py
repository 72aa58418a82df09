"""Message log: append-only, ordered messages with per-message read state."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from talent_connect.core.errors import BlockedPairError, PermissionDeniedError
from talent_connect.core.settings import settings
from talent_connect.db.time import utcnow
from talent_connect.models import Conversation, Message, Profile
from talent_connect.models.notification import NOTIFICATION_MESSAGE
from talent_connect.services.blocks import BlockList
from talent_connect.services.notifications import NotificationFeed
from talent_connect.services.realtime import (
    EVENT_UPDATE,
    TABLE_MESSAGES,
    ChangeEvent,
    ChangeFeed,
)
from talent_connect.utils.text import clean_text, preview

logger = logging.getLogger(__name__)


class MessageLog:
    """Operations on the messages of a conversation."""

    def __init__(
        self,
        db: Session,
        feed: ChangeFeed | None = None,
        notifications: NotificationFeed | None = None,
    ) -> None:
        self._db = db
        self._feed = feed
        self._blocks = BlockList(db)
        self._notifications = notifications or NotificationFeed(db)

    def ensure_can_send(self, conversation: Conversation, sender_id: str) -> str:
        """Check that ``sender_id`` may write here and return the recipient id.

        Raises:
            PermissionDeniedError: If the sender is not a participant
            BlockedPairError: If either participant has blocked the other
        """
        if not conversation.has_participant(sender_id):
            raise PermissionDeniedError("Only participants can write in this conversation")

        recipient_id = conversation.other_participant(sender_id)
        if self._blocks.is_blocked_either_direction(sender_id, recipient_id):
            logger.info("Message from %s in conversation %s refused: blocked", sender_id, conversation.id)
            raise BlockedPairError()
        return recipient_id

    def append(self, conversation: Conversation, sender_id: str, content: str) -> Message:
        """Append a message and bump the conversation's ``last_message_at``.

        The block check runs on every send, since a block may have been added
        after the conversation was created.

        Raises:
            ValidationError: If the content is empty after trimming or too long
            PermissionDeniedError: If the sender is not a participant
            BlockedPairError: If either participant has blocked the other
        """
        text = validate_content(content)
        recipient_id = self.ensure_can_send(conversation, sender_id)

        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            content=text,
            read=False,
            created_at=utcnow(),
        )
        self._db.add(message)
        conversation.last_message_at = message.created_at

        sender = self._db.get(Profile, sender_id)
        sender_name = (sender.full_name if sender else None) or "Someone"
        self._notifications.create(
            recipient_id,
            NOTIFICATION_MESSAGE,
            f"New message from {sender_name}",
            preview(text),
            link=f"/messages/{conversation.id}",
            commit=False,
        )

        self._db.commit()
        self._db.refresh(message)

        if self._feed is not None:
            self._feed.publish_message(message)
            self._feed.publish_conversation(conversation)
        return message

    def list_since(
        self,
        conversation: Conversation,
        after_id: int | None = None,
        limit: int | None = None,
    ) -> Sequence[Message]:
        """Return messages in creation order.

        Without ``after_id`` this is the latest page of history; with it, only
        messages newer than that id (incremental sync).
        """
        page_size = limit or settings.message_page_size
        stmt = select(Message).where(Message.conversation_id == conversation.id)

        if after_id is not None:
            stmt = stmt.where(Message.id > after_id).order_by(
                Message.created_at, Message.id
            ).limit(page_size)
            return self._db.execute(stmt).scalars().all()

        stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc()).limit(page_size)
        latest = self._db.execute(stmt).scalars().all()
        return list(reversed(latest))

    def mark_read(self, conversation: Conversation, reader_id: str) -> int:
        """Mark every unread message not written by ``reader_id`` as read.

        Returns the number of messages flipped; a second call returns 0.
        """
        if not conversation.has_participant(reader_id):
            raise PermissionDeniedError("Only participants can read this conversation")

        result = self._db.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation.id,
                Message.read.is_(False),
                Message.sender_id != reader_id,
            )
            .values(read=True)
        )
        self._db.commit()
        flipped = result.rowcount or 0

        if flipped and self._feed is not None:
            self._feed.publish(
                ChangeEvent(
                    TABLE_MESSAGES,
                    EVENT_UPDATE,
                    {
                        "conversation_id": conversation.id,
                        "reader_id": reader_id,
                        "read_count": flipped,
                    },
                )
            )
            self._feed.publish_conversation(conversation)
        return flipped


def validate_content(content: str) -> str:
    """Clean message content, rejecting it before any storage access."""
    return clean_text(content, field="Message", max_length=settings.message_max_length)
