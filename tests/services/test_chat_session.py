# tests/services/test_chat_session.py
"""Tests for chat and inbox sessions driven by the change feed."""

import asyncio

import pytest

from talent_connect.core.errors import NotFoundError
from talent_connect.services.chat_session import ChatSession, InboxSession
from talent_connect.services.conversations import ConversationRegistry
from talent_connect.services.messages import MessageLog
from talent_connect.services.realtime import ChangeEvent, message_row


def test_open_loads_history_and_marks_incoming_read(db_session, feed, session_factory, conversation, alice, bob) -> None:
    log = MessageLog(db_session, feed)
    log.append(conversation, alice.id, "Merhaba")
    log.append(conversation, bob.id, "Selam")

    session = ChatSession(bob.id, feed, session_factory)
    history = session.open(conversation.id)

    assert [row["content"] for row in history] == ["Merhaba", "Selam"]
    assert history[0]["read"] is True
    assert history[1]["read"] is False
    assert session.other_user_id == alice.id
    assert ConversationRegistry(db_session).list_for_user(bob.id)[0].unread_count == 0


def test_open_rejects_non_participants(feed, session_factory, conversation, carol) -> None:
    session = ChatSession(carol.id, feed, session_factory)
    with pytest.raises(NotFoundError):
        session.open(conversation.id)
    assert not session.is_open
    assert feed.subscription_count == 0


def test_reopening_never_holds_two_subscriptions(db_session, feed, session_factory, alice, bob, carol) -> None:
    registry = ConversationRegistry(db_session, feed)
    with_bob = registry.get_or_create(alice.id, bob.id)
    with_carol = registry.get_or_create(alice.id, carol.id)

    session = ChatSession(alice.id, feed, session_factory)
    session.open(with_bob.id)
    session.open(with_carol.id)
    session.open(with_bob.id)

    assert feed.subscription_count == 1
    session.close()
    assert feed.subscription_count == 0


def test_failed_open_clears_previous_partner(db_session, feed, session_factory, conversation, alice, bob, carol) -> None:
    foreign = ConversationRegistry(db_session, feed).get_or_create(bob.id, carol.id)

    session = ChatSession(alice.id, feed, session_factory)
    session.open(conversation.id)
    assert session.other_user_id == bob.id

    with pytest.raises(NotFoundError):
        session.open(foreign.id)

    assert session.other_user_id is None
    assert not session.is_open
    assert feed.subscription_count == 0


async def test_pushed_message_is_appended_and_marked_read(db_session, feed, session_factory, conversation, alice, bob) -> None:
    session = ChatSession(bob.id, feed, session_factory)
    session.open(conversation.id)

    MessageLog(db_session, feed).append(conversation, alice.id, "Merhaba")
    event = await asyncio.wait_for(session.next_event(), timeout=1)

    assert event.kind == "INSERT"
    assert [row["content"] for row in session.messages] == ["Merhaba"]
    assert session.messages[0]["read"] is True
    assert ConversationRegistry(db_session).total_unread(bob.id) == 0


async def test_sender_sees_read_receipt(db_session, feed, session_factory, conversation, alice, bob) -> None:
    alice_view = ChatSession(alice.id, feed, session_factory)
    alice_view.open(conversation.id)
    MessageLog(db_session, feed).append(conversation, alice.id, "Are you there?")
    own = await asyncio.wait_for(alice_view.next_event(), timeout=1)
    assert own.kind == "INSERT"
    assert alice_view.messages[0]["read"] is False

    MessageLog(db_session, feed).mark_read(conversation, bob.id)
    receipt = await asyncio.wait_for(alice_view.next_event(), timeout=1)

    assert receipt.kind == "UPDATE"
    assert alice_view.messages[0]["read"] is True


def test_duplicate_and_foreign_events_are_ignored(db_session, feed, session_factory, conversation, alice, bob) -> None:
    log = MessageLog(db_session, feed)
    message = log.append(conversation, alice.id, "hello")
    session = ChatSession(bob.id, feed, session_factory)
    session.open(conversation.id)

    assert session.handle_event(ChangeEvent("messages", "INSERT", message_row(message))) is False
    foreign = dict(message_row(message), id=message.id + 100, conversation_id=conversation.id + 1)
    assert session.handle_event(ChangeEvent("messages", "INSERT", foreign)) is False
    assert len(session.messages) == 1


async def test_events_after_close_are_dropped(db_session, feed, session_factory, conversation, alice, bob) -> None:
    session = ChatSession(bob.id, feed, session_factory)
    session.open(conversation.id)
    session.close()

    MessageLog(db_session, feed).append(conversation, alice.id, "too late")

    assert await asyncio.wait_for(session.next_event(), timeout=1) is None
    assert session.messages == []
    # Nothing was marked read on the closed view's behalf.
    assert ConversationRegistry(db_session).total_unread(bob.id) == 1


async def test_inbox_recomputes_on_change(db_session, feed, session_factory, alice, bob) -> None:
    inbox = InboxSession(bob.id, feed, session_factory)
    assert inbox.open() == []

    conversation = ConversationRegistry(db_session, feed).get_or_create(alice.id, bob.id)
    MessageLog(db_session, feed).append(conversation, alice.id, "Merhaba")

    snapshot = await asyncio.wait_for(inbox.next_snapshot(), timeout=1)

    assert len(snapshot) == 1
    assert snapshot[0].last_message.content == "Merhaba"
    assert snapshot[0].unread_count == 1

    inbox.close()
    assert await inbox.next_snapshot() is None
    assert feed.subscription_count == 0
