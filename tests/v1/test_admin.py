# tests/v1/test_admin.py
"""Moderation workflow through the admin API."""

from fastapi import status


def test_job_moderation_workflow(client, alice_headers, admin_headers) -> None:
    job_id = client.post(
        "/api/v1/jobs",
        json={"title": "Translation", "description": "EN to TR"},
        headers=alice_headers,
    ).json()["id"]

    queue = client.get("/api/v1/admin/queue", headers=admin_headers).json()
    assert [job["id"] for job in queue["jobs"]] == [job_id]

    r = client.post(f"/api/v1/admin/jobs/{job_id}/approve", headers=admin_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "approved"

    again = client.post(f"/api/v1/admin/jobs/{job_id}/reject", headers=admin_headers)
    assert again.status_code == status.HTTP_409_CONFLICT

    notifications = client.get("/api/v1/notifications", headers=alice_headers).json()
    assert notifications[0]["title"] == "Your job posting was approved"

    assert client.delete(f"/api/v1/admin/jobs/{job_id}", headers=admin_headers).status_code == 204
    assert client.get("/api/v1/jobs").json() == []


def test_unknown_decision_is_rejected(client, approved_job, admin_headers) -> None:
    r = client.post(f"/api/v1/admin/jobs/{approved_job.id}/maybe", headers=admin_headers)
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_comment_and_report_workflow(client, alice, bob_headers, admin_headers) -> None:
    comment = client.post(
        f"/api/v1/profiles/{alice.id}/comments",
        json={"content": "Clear brief, paid on time"},
        headers=bob_headers,
    ).json()
    assert comment["status"] == "pending"
    assert client.get(f"/api/v1/profiles/{alice.id}/comments", headers=bob_headers).json() == []

    client.post(f"/api/v1/admin/comments/{comment['id']}/approve", headers=admin_headers)
    visible = client.get(f"/api/v1/profiles/{alice.id}/comments", headers=bob_headers).json()
    assert [c["id"] for c in visible] == [comment["id"]]

    report = client.post(
        "/api/v1/reports",
        json={"target_type": "profile", "target_id": alice.id, "reason": "impersonation"},
        headers=bob_headers,
    )
    assert report.status_code == status.HTTP_201_CREATED
    report_id = report.json()["id"]

    pending = client.get("/api/v1/admin/reports", params={"status": "pending"}, headers=admin_headers).json()
    assert [r["id"] for r in pending] == [report_id]

    resolved = client.post(f"/api/v1/admin/reports/{report_id}/resolve", headers=admin_headers)
    assert resolved.json()["status"] == "resolved"


def test_user_administration(client, bob, bob_headers, admin_headers) -> None:
    r = client.post(f"/api/v1/admin/users/{bob.id}/badges/fast_responder", headers=admin_headers)
    assert r.json()["fast_responder"] is True

    r = client.post(f"/api/v1/admin/users/{bob.id}/suspend", headers=admin_headers)
    assert r.json()["is_suspended"] is True
    blocked = client.post("/api/v1/conversations", json={"other_user_id": "admin"}, headers=bob_headers)
    assert blocked.status_code == status.HTTP_403_FORBIDDEN

    client.post(f"/api/v1/admin/users/{bob.id}/activate", headers=admin_headers)
    assert client.delete(f"/api/v1/admin/users/{bob.id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/v1/profiles/{bob.id}", headers=admin_headers).status_code == 404
