# tests/services/test_jobs.py
"""Tests for the job board service."""

import pytest

from talent_connect.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from talent_connect.models.moderation import STATUS_PENDING
from talent_connect.models.notification import NOTIFICATION_NEW_APPLICATION
from talent_connect.schemas.job import JobCreate
from talent_connect.services.jobs import JobBoard
from talent_connect.services.notifications import NotificationFeed


def test_new_jobs_wait_for_moderation(db_session, alice, bob) -> None:
    board = JobBoard(db_session)
    job = board.create_job(
        alice.id,
        JobCreate(title="<b>Logo</b> design", description="Need a logo", category="design"),
    )

    assert job.status == STATUS_PENDING
    assert job.title == "Logo design"
    assert board.list_open_jobs() == []
    # Visible to its creator, hidden from everyone else.
    assert board.get_visible_job(job.id, alice.id).id == job.id
    with pytest.raises(NotFoundError):
        board.get_visible_job(job.id, bob.id)


def test_admin_can_see_pending_jobs(db_session, alice, admin) -> None:
    board = JobBoard(db_session)
    job = board.create_job(alice.id, JobCreate(title="API work", description="REST endpoints"))
    assert board.get_visible_job(job.id, admin.id).id == job.id


def test_apply_notifies_the_job_creator(db_session, approved_job, alice, bob) -> None:
    application = JobBoard(db_session).apply(approved_job.id, bob.id, "I have done this before.")

    assert application.applicant_id == bob.id
    notifications = NotificationFeed(db_session).recent(alice.id)
    assert len(notifications) == 1
    assert notifications[0].type == NOTIFICATION_NEW_APPLICATION
    assert notifications[0].message.startswith("Bob: ")
    assert notifications[0].link == f"/jobs/{approved_job.id}/applications"


def test_apply_twice_conflicts(db_session, approved_job, bob) -> None:
    board = JobBoard(db_session)
    board.apply(approved_job.id, bob.id, "First try")

    with pytest.raises(ConflictError, match="already applied"):
        board.apply(approved_job.id, bob.id, "Second try")
    assert len(board.applications_by(bob.id)) == 1


def test_apply_rules(db_session, approved_job, alice, bob) -> None:
    board = JobBoard(db_session)

    with pytest.raises(ValidationError):
        board.apply(approved_job.id, alice.id, "My own job")
    with pytest.raises(ValidationError):
        board.apply(approved_job.id, bob.id, "   ")
    with pytest.raises(NotFoundError):
        board.apply(approved_job.id + 1000, bob.id, "Missing job")

    board.toggle_filled(approved_job.id, alice.id)
    with pytest.raises(ConflictError, match="filled"):
        board.apply(approved_job.id, bob.id, "Too late")


def test_pending_jobs_do_not_accept_applications(db_session, alice, bob) -> None:
    board = JobBoard(db_session)
    job = board.create_job(alice.id, JobCreate(title="Copywriting", description="Blog posts"))
    with pytest.raises(NotFoundError):
        board.apply(job.id, bob.id, "Hello")


def test_only_the_creator_manages_a_job(db_session, approved_job, alice, bob, carol) -> None:
    board = JobBoard(db_session)
    board.apply(approved_job.id, bob.id, "Pick me")

    with pytest.raises(PermissionDeniedError):
        board.toggle_filled(approved_job.id, bob.id)
    with pytest.raises(PermissionDeniedError):
        board.applications_for_job(approved_job.id, carol.id)

    applications = board.applications_for_job(approved_job.id, alice.id)
    assert [application.applicant_id for application in applications] == [bob.id]
    assert board.toggle_filled(approved_job.id, alice.id).is_filled is True
    assert board.toggle_filled(approved_job.id, alice.id).is_filled is False
