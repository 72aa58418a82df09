# src/talent_connect/api/v1/endpoints/realtime.py
"""WebSocket endpoints driving open chat and inbox views.

Chat protocol (JSON frames):

* client ``{"type": "open", "conversation_id": 1}`` -> server ``history``
* client ``{"type": "close"}`` -> server ``closed``
* server pushes ``message`` for new rows and ``read`` when the other side
  has read the viewer's messages.

The inbox socket pushes a full ``conversations`` snapshot on connect and
after every change touching the viewer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from talent_connect.api.v1.dependencies import (
    ChangeFeedDep,
    SessionFactoryDep,
    authenticate_token,
)
from talent_connect.core.errors import MarketplaceError
from talent_connect.schemas.conversation import ConversationSummary
from talent_connect.services.chat_session import ChatSession, InboxSession
from talent_connect.services.conversations import ConversationOverview
from talent_connect.services.realtime import EVENT_INSERT, ChangeEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["realtime"])


async def _authenticate(websocket: WebSocket, token: str | None, session_factory) -> str | None:
    """Return the caller's id, or close the socket and return None."""
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Authentication required")
        return None
    try:
        with session_factory() as db:
            profile = authenticate_token(token, db)
            user_id, suspended = profile.id, profile.is_suspended
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid token")
        return None
    if suspended:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Account suspended")
        return None
    return user_id


def _event_payload(event: ChangeEvent) -> dict[str, Any]:
    if event.kind == EVENT_INSERT:
        return {"type": "message", "message": event.row}
    return {
        "type": "read",
        "conversation_id": event.row.get("conversation_id"),
        "reader_id": event.row.get("reader_id"),
    }


def _snapshot_payload(overviews: list[ConversationOverview]) -> dict[str, Any]:
    return {
        "type": "conversations",
        "conversations": [
            ConversationSummary.model_validate(overview).model_dump(mode="json")
            for overview in overviews
        ],
    }


async def _handle_chat_command(websocket: WebSocket, session: ChatSession, command: Any) -> None:
    if not isinstance(command, dict):
        await websocket.send_json({"type": "error", "detail": "Expected a JSON object"})
        return

    kind = command.get("type")
    if kind == "open":
        conversation_id = command.get("conversation_id")
        if not isinstance(conversation_id, int):
            await websocket.send_json({"type": "error", "detail": "conversation_id must be an integer"})
            return
        try:
            history = session.open(conversation_id)
        except MarketplaceError as exc:
            await websocket.send_json({"type": "error", **exc.payload()})
            return
        await websocket.send_json(
            {
                "type": "history",
                "conversation_id": session.conversation_id,
                "other_user_id": session.other_user_id,
                "messages": history,
            }
        )
    elif kind == "close":
        session.close()
        await websocket.send_json({"type": "closed"})
    else:
        await websocket.send_json({"type": "error", "detail": f"Unknown command: {kind}"})


async def _cancel(*tasks: asyncio.Task | None) -> None:
    for task in tasks:
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


@router.websocket("/chat")
async def chat_socket(
    websocket: WebSocket,
    feed: ChangeFeedDep,
    session_factory: SessionFactoryDep,
    token: str | None = Query(None),
) -> None:
    """Live view of one conversation at a time."""
    await websocket.accept()
    user_id = await _authenticate(websocket, token, session_factory)
    if user_id is None:
        return

    session = ChatSession(user_id, feed, session_factory)
    receive: asyncio.Task | None = asyncio.create_task(websocket.receive_json())
    pump: asyncio.Task | None = None
    try:
        while True:
            waiting = {task for task in (receive, pump) if task is not None}
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

            if pump is not None and pump in done:
                event = pump.result()
                pump = None
                if event is not None:
                    await websocket.send_json(_event_payload(event))

            if receive in done:
                try:
                    command = receive.result()
                except ValueError:
                    command = None
                receive = asyncio.create_task(websocket.receive_json())
                await _handle_chat_command(websocket, session, command)

            if pump is None and session.is_open:
                pump = asyncio.create_task(session.next_event())
    except WebSocketDisconnect:
        logger.debug("Chat socket for %s disconnected", user_id)
    finally:
        session.close()
        await _cancel(receive, pump)


@router.websocket("/inbox")
async def inbox_socket(
    websocket: WebSocket,
    feed: ChangeFeedDep,
    session_factory: SessionFactoryDep,
    token: str | None = Query(None),
) -> None:
    """Live conversation list for the caller."""
    await websocket.accept()
    user_id = await _authenticate(websocket, token, session_factory)
    if user_id is None:
        return

    session = InboxSession(user_id, feed, session_factory)
    receive: asyncio.Task | None = None
    pump: asyncio.Task | None = None
    try:
        await websocket.send_json(_snapshot_payload(session.open()))
        receive = asyncio.create_task(websocket.receive_text())
        pump = asyncio.create_task(session.next_snapshot())
        while True:
            done, _ = await asyncio.wait({receive, pump}, return_when=asyncio.FIRST_COMPLETED)
            if receive in done:
                # Incoming frames are only keep-alives; a disconnect raises here.
                receive.result()
                receive = asyncio.create_task(websocket.receive_text())
            if pump in done:
                snapshot = pump.result()
                if snapshot is None:
                    break
                await websocket.send_json(_snapshot_payload(snapshot))
                pump = asyncio.create_task(session.next_snapshot())
    except WebSocketDisconnect:
        logger.debug("Inbox socket for %s disconnected", user_id)
    finally:
        session.close()
        await _cancel(receive, pump)
