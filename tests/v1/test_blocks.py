# tests/v1/test_blocks.py
from fastapi import status


def test_block_status_from_both_sides(client, alice, bob, alice_headers, bob_headers) -> None:
    r = client.put(f"/api/v1/blocks/{bob.id}", headers=alice_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"user_id": bob.id, "has_blocked": True, "is_blocked_by": False}

    seen_by_bob = client.get(f"/api/v1/blocks/{alice.id}", headers=bob_headers).json()
    assert seen_by_bob == {"user_id": alice.id, "has_blocked": False, "is_blocked_by": True}


def test_blocking_twice_is_harmless(client, bob, alice_headers) -> None:
    client.put(f"/api/v1/blocks/{bob.id}", headers=alice_headers)
    r = client.put(f"/api/v1/blocks/{bob.id}", headers=alice_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["has_blocked"] is True


def test_unblock_only_removes_own_block(client, alice, bob, alice_headers, bob_headers) -> None:
    client.put(f"/api/v1/blocks/{bob.id}", headers=alice_headers)
    client.put(f"/api/v1/blocks/{alice.id}", headers=bob_headers)

    r = client.delete(f"/api/v1/blocks/{bob.id}", headers=alice_headers)
    assert r.json() == {"user_id": bob.id, "has_blocked": False, "is_blocked_by": True}


def test_block_validation(client, alice, alice_headers) -> None:
    assert client.put(f"/api/v1/blocks/{alice.id}", headers=alice_headers).status_code == status.HTTP_400_BAD_REQUEST
    assert client.put("/api/v1/blocks/ghost", headers=alice_headers).status_code == status.HTTP_404_NOT_FOUND
