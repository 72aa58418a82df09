"""Realtime delivery of row changes to interested subscribers.

The :class:`ChangeFeed` is the single place where change events are fanned
out. Subscribers register a table plus a row predicate and receive matching
events on their own queue, so filtering happens before delivery and nobody
sees rows they did not ask for.

With ``REALTIME_BACKEND=redis`` events are published to a Redis channel
instead and a :class:`RedisChangeRelay` re-dispatches them locally, which
lets several API processes share one stream.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final

import redis
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from talent_connect.core.settings import settings
from talent_connect.db.time import as_utc
from talent_connect.models import Conversation, Message

logger = logging.getLogger(__name__)

TABLE_MESSAGES: Final[str] = "messages"
TABLE_CONVERSATIONS: Final[str] = "conversations"

EVENT_INSERT: Final[str] = "INSERT"
EVENT_UPDATE: Final[str] = "UPDATE"

SUBSCRIPTION_QUEUE_SIZE: Final[int] = 256

RowPredicate = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class ChangeEvent:
    """A single row change pushed to subscribers."""

    table: str
    kind: str
    row: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {"table": self.table, "kind": self.kind, "row": self.row}

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> ChangeEvent:
        return cls(
            table=str(payload["table"]),
            kind=str(payload["kind"]),
            row=dict(payload.get("row") or {}),
        )


def _isoformat(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


def message_row(message: Message) -> dict[str, Any]:
    """Serialize a message into the row shape carried by change events."""
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "read": message.read,
        "created_at": _isoformat(message.created_at),
    }


def conversation_row(conversation: Conversation) -> dict[str, Any]:
    """Serialize a conversation into the row shape carried by change events."""
    return {
        "id": conversation.id,
        "participant_1": conversation.participant_1,
        "participant_2": conversation.participant_2,
        "last_message_at": _isoformat(conversation.last_message_at),
        "created_at": _isoformat(conversation.created_at),
    }


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Subscription:
    """Filtered stream of change events for one observer.

    ``get`` returns ``None`` once the subscription is closed, which lets a
    waiting consumer notice the teardown.
    """

    def __init__(self, feed: ChangeFeed, table: str, predicate: RowPredicate) -> None:
        self._feed = feed
        self.table = table
        self._predicate = predicate
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(SUBSCRIPTION_QUEUE_SIZE)
        self._loop = _running_loop()
        self.closed = False

    def matches(self, event: ChangeEvent) -> bool:
        return event.table == self.table and self._predicate(event.row)

    def deliver(self, event: ChangeEvent | None) -> None:
        """Queue an event for the consumer; safe to call from any thread."""
        if self.closed and event is not None:
            return
        loop = self._loop
        if loop is not None and loop is not _running_loop() and loop.is_running():
            loop.call_soon_threadsafe(self._put, event)
        else:
            self._put(event)

    def _put(self, event: ChangeEvent | None) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("Dropping %s event for slow subscriber on %s", event and event.kind, self.table)

    async def get(self) -> ChangeEvent | None:
        if self.closed and self._queue.empty():
            return None
        return await self._queue.get()

    def get_nowait(self) -> ChangeEvent | None:
        """Return the next queued event, or None if nothing is pending."""
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed.unsubscribe(self)
        # Wake a consumer blocked in get().
        self.deliver(None)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ChangeFeed:
    """In-process observer registry for message and conversation changes."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._relay: RedisChangeRelay | None = None

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, table: str, predicate: RowPredicate) -> Subscription:
        subscription = Subscription(self, table, predicate)
        self._subscriptions.append(subscription)
        return subscription

    def subscribe_conversation(self, conversation_id: int) -> Subscription:
        """Subscribe to message rows belonging to one conversation."""
        return self.subscribe(
            TABLE_MESSAGES,
            lambda row: row.get("conversation_id") == conversation_id,
        )

    def subscribe_participant(self, user_id: str) -> Subscription:
        """Subscribe to conversation rows where ``user_id`` is a participant."""
        return self.subscribe(
            TABLE_CONVERSATIONS,
            lambda row: user_id in (row.get("participant_1"), row.get("participant_2")),
        )

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def attach_relay(self, relay: RedisChangeRelay | None) -> None:
        self._relay = relay

    def publish(self, event: ChangeEvent) -> None:
        """Publish an event, through the relay when one is attached."""
        if self._relay is not None and self._relay.forward(event):
            return
        self.dispatch(event)

    def dispatch(self, event: ChangeEvent) -> None:
        """Deliver an event to every matching local subscriber."""
        for subscription in list(self._subscriptions):
            if subscription.matches(event):
                subscription.deliver(event)

    def publish_message(self, message: Message, kind: str = EVENT_INSERT) -> None:
        self.publish(ChangeEvent(TABLE_MESSAGES, kind, message_row(message)))

    def publish_conversation(self, conversation: Conversation, kind: str = EVENT_UPDATE) -> None:
        self.publish(ChangeEvent(TABLE_CONVERSATIONS, kind, conversation_row(conversation)))


class RedisChangeRelay:
    """Bridges a :class:`ChangeFeed` across processes through Redis pub/sub.

    The listener reconnects on its own with exponential backoff capped at
    ``REALTIME_RECONNECT_MAX_SECONDS``.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        *,
        url: str | None = None,
        channel: str | None = None,
        publisher: redis.Redis | None = None,
    ) -> None:
        self.feed = feed
        self.url = url or settings.redis_url
        self.channel = channel or settings.realtime_channel
        self._publisher = publisher or redis.Redis.from_url(self.url)
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self.reconnects = 0

    def forward(self, event: ChangeEvent) -> bool:
        """Publish an event to Redis; returns False if it must be delivered locally."""
        try:
            self._publisher.publish(self.channel, json.dumps(event.to_json()))
        except RedisError as exc:
            logger.warning("Realtime relay publish failed, delivering locally: %s", exc)
            return False
        return True

    def handle_payload(self, data: bytes | str) -> None:
        try:
            payload = json.loads(data)
            event = ChangeEvent.from_json(payload)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring malformed realtime payload: %s", exc)
            return
        self.feed.dispatch(event)

    async def start(self) -> None:
        """Start the background listener."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self.feed.attach_relay(self)
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background listener."""
        self.feed.attach_relay(None)
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        delay = 0.5
        max_delay = max(0.5, float(settings.realtime_reconnect_max_seconds))

        while not self._stopping.is_set():
            client = aioredis.from_url(self.url)
            pubsub = client.pubsub()
            try:
                await pubsub.subscribe(self.channel)
                delay = 0.5
                while not self._stopping.is_set():
                    message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                    if message and message.get("type") == "message":
                        self.handle_payload(message["data"])
            except (RedisError, OSError) as exc:
                self.reconnects += 1
                logger.warning(
                    "Realtime relay lost its Redis connection (%s); reconnecting in %.1fs",
                    exc,
                    delay,
                )
                try:
                    await asyncio.wait_for(self._stopping.wait(), timeout=delay)
                except TimeoutError:
                    pass
                delay = min(delay * 2, max_delay)
            finally:
                await pubsub.aclose()
                await client.aclose()


_change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _change_feed
