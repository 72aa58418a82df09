# src/talent_connect/services/moderation.py
"""Moderation queue, reports and account administration."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from sqlalchemy import select
from sqlalchemy.orm import Session

from talent_connect.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from talent_connect.models import Job, Profile, ProfileComment, Report
from talent_connect.models.moderation import (
    REPORT_PENDING,
    REPORT_RESOLVED,
    REPORT_TARGET_JOB,
    REPORT_TARGETS,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
)
from talent_connect.models.notification import NOTIFICATION_SYSTEM
from talent_connect.models.profile import BADGE_FIELDS
from talent_connect.services.notifications import NotificationFeed
from talent_connect.utils.text import clean_text, preview

logger = logging.getLogger(__name__)

DECISIONS: Final[dict[str, str]] = {
    "approve": STATUS_APPROVED,
    "reject": STATUS_REJECTED,
}

USER_ACTIONS: Final[dict[str, tuple[str, bool]]] = {
    "suspend": ("is_suspended", True),
    "activate": ("is_suspended", False),
    "make_admin": ("is_admin", True),
    "remove_admin": ("is_admin", False),
}

COMMENT_MAX_LENGTH = 2000


@dataclass(frozen=True)
class ModerationQueue:
    jobs: Sequence[Job]
    comments: Sequence[ProfileComment]
    reports: Sequence[Report]


def _decision_status(decision: str) -> str:
    try:
        return DECISIONS[decision]
    except KeyError as err:
        raise ValidationError(f"Unknown moderation decision: {decision}") from err


class ModerationService:
    """Service handling moderation logic and state transitions.

    Every admin operation takes the acting user's id and checks the admin
    flag itself; callers cannot skip the check.
    """

    def __init__(self, db: Session, notifications: NotificationFeed | None = None) -> None:
        self._db = db
        self._notifications = notifications or NotificationFeed(db)

    def _require_admin(self, actor_id: str) -> Profile:
        actor = self._db.get(Profile, actor_id)
        if actor is None or not actor.is_admin:
            raise PermissionDeniedError("Admin privileges required")
        return actor

    def pending_queue(self, admin_id: str) -> ModerationQueue:
        """Return jobs, comments and reports still waiting for a decision."""
        self._require_admin(admin_id)
        jobs = self._db.execute(
            select(Job).where(Job.status == STATUS_PENDING).order_by(Job.created_at, Job.id)
        ).scalars().all()
        comments = self._db.execute(
            select(ProfileComment)
            .where(ProfileComment.status == STATUS_PENDING)
            .order_by(ProfileComment.created_at, ProfileComment.id)
        ).scalars().all()
        reports = self._db.execute(
            select(Report).where(Report.status == REPORT_PENDING).order_by(Report.created_at, Report.id)
        ).scalars().all()
        return ModerationQueue(jobs=jobs, comments=comments, reports=reports)

    def review_job(self, admin_id: str, job_id: int, decision: str) -> Job:
        """Approve or reject a pending job and notify its creator.

        Raises:
            PermissionDeniedError: If the actor is not an admin
            NotFoundError: If the job does not exist
            ConflictError: If the job already left ``pending``
        """
        self._require_admin(admin_id)
        new_status = _decision_status(decision)
        job = self._db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if job.status != STATUS_PENDING:
            raise ConflictError(f"Job has already been {job.status}")

        job.status = new_status
        verdict = "approved" if new_status == STATUS_APPROVED else "rejected"
        self._notifications.create(
            job.creator_id,
            NOTIFICATION_SYSTEM,
            f"Your job posting was {verdict}",
            preview(job.title),
            link=f"/jobs/{job.id}",
            commit=False,
        )
        self._db.commit()
        self._db.refresh(job)
        logger.info("Admin %s %s job %s", admin_id, verdict, job.id)
        return job

    def delete_job(self, admin_id: str, job_id: int) -> None:
        self._require_admin(admin_id)
        job = self._db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        self._db.delete(job)
        self._db.commit()
        logger.info("Admin %s deleted job %s", admin_id, job_id)

    def review_comment(self, admin_id: str, comment_id: int, decision: str) -> ProfileComment:
        """Approve or reject a pending profile comment."""
        self._require_admin(admin_id)
        new_status = _decision_status(decision)
        comment = self._db.get(ProfileComment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.status != STATUS_PENDING:
            raise ConflictError(f"Comment has already been {comment.status}")

        comment.status = new_status
        self._db.commit()
        self._db.refresh(comment)
        logger.info("Admin %s set comment %s to %s", admin_id, comment.id, new_status)
        return comment

    def submit_comment(self, author_id: str, profile_id: str, content: str) -> ProfileComment:
        """Leave a comment on a profile; it is hidden until approved."""
        text = clean_text(content, field="Comment", max_length=COMMENT_MAX_LENGTH)
        if author_id == profile_id:
            raise ValidationError("You cannot comment on your own profile")
        if self._db.get(Profile, profile_id) is None:
            raise NotFoundError("Profile not found")

        comment = ProfileComment(
            profile_id=profile_id,
            author_id=author_id,
            content=text,
            status=STATUS_PENDING,
        )
        self._db.add(comment)
        self._db.commit()
        self._db.refresh(comment)
        return comment

    def approved_comments(self, profile_id: str) -> Sequence[ProfileComment]:
        stmt = (
            select(ProfileComment)
            .where(ProfileComment.profile_id == profile_id, ProfileComment.status == STATUS_APPROVED)
            .order_by(ProfileComment.created_at.desc(), ProfileComment.id.desc())
        )
        return self._db.execute(stmt).scalars().all()

    def submit_report(
        self,
        reporter_id: str,
        target_type: str,
        target_id: str,
        reason: str,
        details: str | None = None,
    ) -> Report:
        """File a report against a job or a profile."""
        if target_type not in REPORT_TARGETS:
            raise ValidationError(f"Unknown report target: {target_type}")
        if target_type == REPORT_TARGET_JOB:
            exists = target_id.isdigit() and self._db.get(Job, int(target_id)) is not None
        else:
            exists = self._db.get(Profile, target_id) is not None
        if not exists:
            raise NotFoundError("Reported item not found")

        report = Report(
            reporter_id=reporter_id,
            target_type=target_type,
            target_id=target_id,
            reason=clean_text(reason, field="Reason", max_length=100),
            details=clean_text(details, field="Details", max_length=2000, required=False) or None,
            status=REPORT_PENDING,
        )
        self._db.add(report)
        self._db.commit()
        self._db.refresh(report)
        logger.info("Report %s filed against %s %s", report.id, target_type, target_id)
        return report

    def list_reports(self, admin_id: str, status: str | None = None) -> Sequence[Report]:
        self._require_admin(admin_id)
        stmt = select(Report).order_by(Report.created_at.desc(), Report.id.desc())
        if status is not None:
            stmt = stmt.where(Report.status == status)
        return self._db.execute(stmt).scalars().all()

    def resolve_report(self, admin_id: str, report_id: int) -> Report:
        self._require_admin(admin_id)
        report = self._db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        if report.status == REPORT_RESOLVED:
            raise ConflictError("Report has already been resolved")
        report.status = REPORT_RESOLVED
        self._db.commit()
        self._db.refresh(report)
        return report

    def _target_user(self, admin_id: str, user_id: str) -> Profile:
        self._require_admin(admin_id)
        if admin_id == user_id:
            raise ValidationError("Admins cannot change their own account")
        user = self._db.get(Profile, user_id)
        if user is None:
            raise NotFoundError("Profile not found")
        return user

    def apply_user_action(self, admin_id: str, user_id: str, action: str) -> Profile:
        """Suspend, reactivate, promote or demote a user."""
        if action not in USER_ACTIONS:
            raise ValidationError(f"Unknown user action: {action}")
        user = self._target_user(admin_id, user_id)
        field, value = USER_ACTIONS[action]
        setattr(user, field, value)
        self._db.commit()
        self._db.refresh(user)
        logger.info("Admin %s applied %s to %s", admin_id, action, user_id)
        return user

    def toggle_badge(self, admin_id: str, user_id: str, badge: str) -> Profile:
        if badge not in BADGE_FIELDS:
            raise ValidationError(f"Unknown badge: {badge}")
        self._require_admin(admin_id)
        user = self._db.get(Profile, user_id)
        if user is None:
            raise NotFoundError("Profile not found")
        setattr(user, badge, not getattr(user, badge))
        self._db.commit()
        self._db.refresh(user)
        return user

    def delete_user(self, admin_id: str, user_id: str) -> None:
        user = self._target_user(admin_id, user_id)
        self._db.delete(user)
        self._db.commit()
        logger.info("Admin %s deleted profile %s", admin_id, user_id)
