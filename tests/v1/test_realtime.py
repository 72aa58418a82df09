# tests/v1/test_realtime.py
"""WebSocket chat and inbox views."""

import pytest
from fastapi import WebSocketDisconnect, status

from talent_connect.core.security import create_access_token


def _chat_url(user_id: str) -> str:
    return f"/api/v1/ws/chat?token={create_access_token(user_id)}"


@pytest.mark.parametrize("query", ["", "?token=not-a-jwt"])
def test_unauthenticated_socket_is_closed(client, query) -> None:
    with client.websocket_connect(f"/api/v1/ws/chat{query}") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
    assert exc_info.value.code == status.WS_1008_POLICY_VIOLATION


def test_suspended_user_socket_is_closed(client, make_profile) -> None:
    make_profile("Suspended", id="suspended", is_suspended=True)
    with client.websocket_connect(_chat_url("suspended")) as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
    assert exc_info.value.code == status.WS_1008_POLICY_VIOLATION


def test_chat_receives_new_messages_and_marks_them_read(client, conversation, alice, bob, alice_headers, bob_headers) -> None:
    url = f"/api/v1/conversations/{conversation.id}/messages"
    client.post(url, json={"content": "Merhaba"}, headers=alice_headers)

    with client.websocket_connect(_chat_url(bob.id)) as ws:
        ws.send_json({"type": "open", "conversation_id": conversation.id})
        history = ws.receive_json()
        assert history["type"] == "history"
        assert history["other_user_id"] == alice.id
        assert [(m["content"], m["read"]) for m in history["messages"]] == [("Merhaba", True)]

        client.post(url, json={"content": "Nasılsın?"}, headers=alice_headers)
        pushed = ws.receive_json()
        assert pushed["type"] == "message"
        assert pushed["message"]["content"] == "Nasılsın?"

        ws.send_json({"type": "close"})
        assert ws.receive_json() == {"type": "closed"}

    unread = client.get("/api/v1/conversations/unread-count", headers=bob_headers).json()
    assert unread == {"unread_count": 0}


def test_sender_gets_read_receipt(client, conversation, alice, bob, alice_headers, bob_headers) -> None:
    with client.websocket_connect(_chat_url(alice.id)) as ws:
        ws.send_json({"type": "open", "conversation_id": conversation.id})
        assert ws.receive_json()["messages"] == []

        client.post(
            f"/api/v1/conversations/{conversation.id}/messages",
            json={"content": "Are you free tomorrow?"},
            headers=alice_headers,
        )
        own = ws.receive_json()
        assert own["type"] == "message"
        assert own["message"]["sender_id"] == alice.id

        client.post(f"/api/v1/conversations/{conversation.id}/read", headers=bob_headers)
        receipt = ws.receive_json()
        assert receipt == {"type": "read", "conversation_id": conversation.id, "reader_id": bob.id}


def test_chat_reports_errors_without_closing(client, conversation, carol) -> None:
    with client.websocket_connect(_chat_url(carol.id)) as ws:
        ws.send_json({"type": "open", "conversation_id": conversation.id})
        assert ws.receive_json() == {"type": "error", "detail": "Conversation not found"}

        ws.send_json({"type": "open", "conversation_id": "one"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "dance"})
        assert ws.receive_json() == {"type": "error", "detail": "Unknown command: dance"}


def test_inbox_pushes_snapshots(client, alice, bob, alice_headers) -> None:
    token = create_access_token(bob.id)
    with client.websocket_connect(f"/api/v1/ws/inbox?token={token}") as ws:
        initial = ws.receive_json()
        assert initial == {"type": "conversations", "conversations": []}

        conversation_id = client.post(
            "/api/v1/conversations", json={"other_user_id": bob.id}, headers=alice_headers
        ).json()["id"]
        created = ws.receive_json()
        assert [c["id"] for c in created["conversations"]] == [conversation_id]

        client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"content": "Merhaba"},
            headers=alice_headers,
        )

        snapshot = ws.receive_json()

        entry = snapshot["conversations"][0]
        assert entry["id"] == conversation_id
        assert entry["other_user"]["id"] == alice.id
        assert entry["last_message"]["content"] == "Merhaba"
        assert entry["unread_count"] == 1
