# tests/services/test_moderation.py
"""Tests for moderation, reports and account administration."""

import pytest

from talent_connect.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from talent_connect.models import Job, Profile
from talent_connect.models.moderation import (
    REPORT_PENDING,
    REPORT_RESOLVED,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
)
from talent_connect.models.notification import NOTIFICATION_SYSTEM
from talent_connect.schemas.job import JobCreate
from talent_connect.services.jobs import JobBoard
from talent_connect.services.moderation import ModerationService
from talent_connect.services.notifications import NotificationFeed


@pytest.fixture()
def pending_job(db_session, alice) -> Job:
    return JobBoard(db_session).create_job(alice.id, JobCreate(title="Data entry", description="Spreadsheets"))


def test_admin_operations_require_admin(db_session, pending_job, bob) -> None:
    service = ModerationService(db_session)
    with pytest.raises(PermissionDeniedError):
        service.pending_queue(bob.id)
    with pytest.raises(PermissionDeniedError):
        service.review_job(bob.id, pending_job.id, "approve")
    with pytest.raises(PermissionDeniedError):
        service.apply_user_action(bob.id, "alice", "suspend")
    assert db_session.get(Job, pending_job.id).status == STATUS_PENDING


@pytest.mark.parametrize(
    ("decision", "expected", "title"),
    [
        ("approve", STATUS_APPROVED, "Your job posting was approved"),
        ("reject", STATUS_REJECTED, "Your job posting was rejected"),
    ],
)
def test_review_job_notifies_creator(db_session, pending_job, alice, admin, decision, expected, title) -> None:
    job = ModerationService(db_session).review_job(admin.id, pending_job.id, decision)

    assert job.status == expected
    notification = NotificationFeed(db_session).recent(alice.id)[0]
    assert notification.type == NOTIFICATION_SYSTEM
    assert notification.title == title


def test_jobs_leave_pending_only_once(db_session, pending_job, admin) -> None:
    service = ModerationService(db_session)
    service.review_job(admin.id, pending_job.id, "approve")

    with pytest.raises(ConflictError, match="already been approved"):
        service.review_job(admin.id, pending_job.id, "reject")


def test_unknown_decision(db_session, pending_job, admin) -> None:
    with pytest.raises(ValidationError):
        ModerationService(db_session).review_job(admin.id, pending_job.id, "maybe")


def test_queue_lists_pending_items(db_session, pending_job, approved_job, admin, alice, bob) -> None:
    service = ModerationService(db_session)
    comment = service.submit_comment(bob.id, alice.id, "Great to work with")
    report = service.submit_report(bob.id, "job", str(approved_job.id), "spam")

    queue = service.pending_queue(admin.id)

    assert [job.id for job in queue.jobs] == [pending_job.id]
    assert [item.id for item in queue.comments] == [comment.id]
    assert [item.id for item in queue.reports] == [report.id]


def test_comments_are_hidden_until_approved(db_session, alice, bob, admin) -> None:
    service = ModerationService(db_session)
    comment = service.submit_comment(bob.id, alice.id, "<i>Paid</i> on time")

    assert comment.content == "Paid on time"
    assert service.approved_comments(alice.id) == []

    service.review_comment(admin.id, comment.id, "approve")
    assert [item.id for item in service.approved_comments(alice.id)] == [comment.id]
    with pytest.raises(ConflictError):
        service.review_comment(admin.id, comment.id, "reject")


def test_comment_rules(db_session, alice) -> None:
    service = ModerationService(db_session)
    with pytest.raises(ValidationError):
        service.submit_comment(alice.id, alice.id, "I am great")
    with pytest.raises(NotFoundError):
        service.submit_comment(alice.id, "ghost", "Who?")


@pytest.mark.parametrize(
    ("target_type", "target_id", "error"),
    [
        ("message", "1", ValidationError),
        ("job", "not-a-number", NotFoundError),
        ("job", "999999", NotFoundError),
        ("profile", "ghost", NotFoundError),
    ],
)
def test_report_targets_are_checked(db_session, bob, target_type, target_id, error) -> None:
    with pytest.raises(error):
        ModerationService(db_session).submit_report(bob.id, target_type, target_id, "spam")


def test_reports_are_resolved_once(db_session, alice, bob, admin) -> None:
    service = ModerationService(db_session)
    report = service.submit_report(bob.id, "profile", alice.id, "fake profile", details="Stock photo")
    assert report.status == REPORT_PENDING

    resolved = service.resolve_report(admin.id, report.id)
    assert resolved.status == REPORT_RESOLVED
    assert service.list_reports(admin.id, status=REPORT_PENDING) == []
    assert [item.id for item in service.list_reports(admin.id)] == [report.id]
    with pytest.raises(ConflictError):
        service.resolve_report(admin.id, report.id)


@pytest.mark.parametrize(
    ("action", "field", "value"),
    [
        ("suspend", "is_suspended", True),
        ("make_admin", "is_admin", True),
    ],
)
def test_user_actions(db_session, bob, admin, action, field, value) -> None:
    user = ModerationService(db_session).apply_user_action(admin.id, bob.id, action)
    assert getattr(user, field) is value


def test_suspension_can_be_lifted(db_session, bob, admin) -> None:
    service = ModerationService(db_session)
    service.apply_user_action(admin.id, bob.id, "suspend")
    assert service.apply_user_action(admin.id, bob.id, "activate").is_suspended is False


def test_admins_cannot_act_on_themselves(db_session, admin) -> None:
    service = ModerationService(db_session)
    with pytest.raises(ValidationError):
        service.apply_user_action(admin.id, admin.id, "remove_admin")
    with pytest.raises(ValidationError):
        service.delete_user(admin.id, admin.id)


def test_badges_toggle(db_session, bob, admin) -> None:
    service = ModerationService(db_session)
    assert service.toggle_badge(admin.id, bob.id, "fast_responder").fast_responder is True
    assert service.toggle_badge(admin.id, bob.id, "fast_responder").fast_responder is False
    with pytest.raises(ValidationError):
        service.toggle_badge(admin.id, bob.id, "is_admin")


def test_delete_user(db_session, carol, admin) -> None:
    ModerationService(db_session).delete_user(admin.id, carol.id)
    assert db_session.get(Profile, carol.id) is None
