# tests/v1/test_rate_limits.py
from fastapi import status

JOB = {"title": "Illustration", "description": "Children's book, 12 pages"}


def test_status_starts_at_full_allowance(client, alice_headers) -> None:
    r = client.get("/api/v1/rate-limits/send_message", headers=alice_headers)
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["label"] == "Messaging"
    assert data["remaining"] == data["limit"] == 100
    assert data["resets_in"] in {"24 hours 0 minutes", "23 hours 59 minutes"}


def test_unknown_action(client, alice_headers) -> None:
    r = client.get("/api/v1/rate-limits/launch_rockets", headers=alice_headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_job_posting_limit(client, alice_headers) -> None:
    for _ in range(5):
        assert client.post("/api/v1/jobs", json=JOB, headers=alice_headers).status_code == status.HTTP_201_CREATED

    r = client.post("/api/v1/jobs", json=JOB, headers=alice_headers)
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    body = r.json()
    assert body["action"] == "create_job"
    assert body["limit"] == 5
    assert body["detail"].startswith("Job posting limit reached.")

    remaining = client.get("/api/v1/rate-limits/create_job", headers=alice_headers).json()
    assert remaining["remaining"] == 0
