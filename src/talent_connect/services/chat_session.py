# src/talent_connect/services/chat_session.py
"""Server-side state of an open chat view and an open inbox view.

Both sessions own at most one :class:`Subscription` on the change feed.
Storage work goes through ``session_factory`` so a long-lived websocket does
not pin a database session between events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy.orm import Session

from talent_connect.db.session import SessionLocal
from talent_connect.services.conversations import ConversationOverview, ConversationRegistry
from talent_connect.services.messages import MessageLog
from talent_connect.services.realtime import (
    EVENT_INSERT,
    EVENT_UPDATE,
    ChangeEvent,
    ChangeFeed,
    Subscription,
    message_row,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


class ChatSession:
    """One viewer looking at one conversation at a time."""

    def __init__(
        self,
        viewer_id: str,
        feed: ChangeFeed,
        session_factory: SessionFactory = SessionLocal,
        page_size: int | None = None,
    ) -> None:
        self.viewer_id = viewer_id
        self.conversation_id: int | None = None
        self.other_user_id: str | None = None
        self.messages: list[dict[str, Any]] = []
        self._feed = feed
        self._session_factory = session_factory
        self._page_size = page_size
        self._seen: set[int] = set()
        self._subscription: Subscription | None = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def open(self, conversation_id: int) -> list[dict[str, Any]]:
        """Switch the view to ``conversation_id`` and return its history.

        Any previous subscription is torn down first. The new subscription is
        registered before history is loaded; messages seen in both are kept
        once.

        Raises:
            NotFoundError: If the viewer is not a participant
        """
        self._drop_subscription()
        self.conversation_id = None
        self.other_user_id = None
        self.messages = []
        self._seen = set()

        with self._session_factory() as db:
            registry = ConversationRegistry(db, self._feed)
            conversation = registry.get_for_participant(conversation_id, self.viewer_id)

            self._subscription = self._feed.subscribe_conversation(conversation.id)
            self.conversation_id = conversation.id
            self.other_user_id = conversation.other_participant(self.viewer_id)

            log = MessageLog(db, self._feed)
            for message in log.list_since(conversation, limit=self._page_size):
                self._remember(message_row(message))

            if log.mark_read(conversation, self.viewer_id):
                self._mark_incoming_read()

        logger.debug("User %s opened conversation %s", self.viewer_id, conversation_id)
        return list(self.messages)

    def _remember(self, row: dict[str, Any]) -> bool:
        message_id = row.get("id")
        if message_id in self._seen:
            return False
        self._seen.add(message_id)
        self.messages.append(dict(row))
        return True

    def _mark_incoming_read(self) -> None:
        for row in self.messages:
            if row.get("sender_id") != self.viewer_id:
                row["read"] = True

    def _mark_read_in_storage(self) -> None:
        with self._session_factory() as db:
            registry = ConversationRegistry(db, self._feed)
            conversation = registry.get_for_participant(self.conversation_id, self.viewer_id)
            MessageLog(db, self._feed).mark_read(conversation, self.viewer_id)
        self._mark_incoming_read()

    def handle_event(self, event: ChangeEvent) -> bool:
        """Apply a pushed change; returns True if the view changed."""
        if self._subscription is None or self.conversation_id is None:
            return False
        if event.row.get("conversation_id") != self.conversation_id:
            return False

        if event.kind == EVENT_INSERT:
            if not self._remember(event.row):
                return False
            if event.row.get("sender_id") != self.viewer_id:
                self._mark_read_in_storage()
            return True

        if event.kind == EVENT_UPDATE:
            reader_id = event.row.get("reader_id")
            if reader_id is None or reader_id == self.viewer_id:
                return False
            for row in self.messages:
                if row.get("sender_id") == self.viewer_id:
                    row["read"] = True
            return True

        return False

    async def next_event(self) -> ChangeEvent | None:
        """Wait for the next change that altered the view.

        Returns None once the session is closed.
        """
        while True:
            subscription = self._subscription
            if subscription is None:
                return None
            event = await subscription.get()
            if event is None:
                if self._subscription is not None and self._subscription is not subscription:
                    # Switched conversations while waiting.
                    continue
                return None
            if self.handle_event(event):
                return event

    def _drop_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def close(self) -> None:
        """Tear down the subscription; later events are ignored."""
        self._drop_subscription()
        self.conversation_id = None


class InboxSession:
    """The viewer's conversation list, recomputed on every relevant change."""

    def __init__(
        self,
        viewer_id: str,
        feed: ChangeFeed,
        session_factory: SessionFactory = SessionLocal,
    ) -> None:
        self.viewer_id = viewer_id
        self._feed = feed
        self._session_factory = session_factory
        self._subscription: Subscription | None = None

    def open(self) -> list[ConversationOverview]:
        if self._subscription is None:
            self._subscription = self._feed.subscribe_participant(self.viewer_id)
        return self.refresh()

    def refresh(self) -> list[ConversationOverview]:
        with self._session_factory() as db:
            return ConversationRegistry(db, self._feed).list_for_user(self.viewer_id)

    async def next_snapshot(self) -> list[ConversationOverview] | None:
        """Wait for a change and return the recomputed list.

        Events already queued are folded into the same snapshot. Returns None
        once the session is closed.
        """
        subscription = self._subscription
        if subscription is None:
            return None
        event = await subscription.get()
        if event is None:
            return None
        while subscription.get_nowait() is not None:
            pass
        if subscription.closed:
            return None
        return self.refresh()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
