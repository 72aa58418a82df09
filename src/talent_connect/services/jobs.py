# src/talent_connect/services/jobs.py
"""Job board: postings and applications."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talent_connect.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from talent_connect.models import Application, Job, Profile
from talent_connect.models.moderation import STATUS_APPROVED, STATUS_PENDING
from talent_connect.models.notification import NOTIFICATION_NEW_APPLICATION
from talent_connect.schemas.job import JobCreate
from talent_connect.services.notifications import NotificationFeed
from talent_connect.utils.text import clean_text, preview

logger = logging.getLogger(__name__)

APPLICATION_MAX_LENGTH = 4000


class JobBoard:
    """Create, browse and apply to jobs."""

    def __init__(self, db: Session, notifications: NotificationFeed | None = None) -> None:
        self._db = db
        self._notifications = notifications or NotificationFeed(db)

    def create_job(self, creator_id: str, data: JobCreate) -> Job:
        """Post a job; it stays ``pending`` until an admin approves it."""
        job = Job(
            creator_id=creator_id,
            title=clean_text(data.title, field="Title", max_length=200),
            description=clean_text(data.description, field="Description", max_length=10000),
            category=clean_text(data.category, required=False) or None,
            job_type=clean_text(data.job_type, required=False) or None,
            salary_range=clean_text(data.salary_range, required=False) or None,
            urgency=clean_text(data.urgency, required=False) or None,
            status=STATUS_PENDING,
            is_filled=False,
        )
        self._db.add(job)
        self._db.commit()
        self._db.refresh(job)
        logger.info("Job %s posted by %s, awaiting moderation", job.id, creator_id)
        return job

    def list_open_jobs(self, limit: int = 50, offset: int = 0) -> Sequence[Job]:
        """Return approved jobs, newest first."""
        stmt = (
            select(Job)
            .where(Job.status == STATUS_APPROVED)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._db.execute(stmt).scalars().all()

    def get_visible_job(self, job_id: int, viewer_id: str | None = None) -> Job:
        """Return a job the viewer may see: approved, or their own."""
        job = self._db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if job.status != STATUS_APPROVED and job.creator_id != viewer_id:
            viewer = self._db.get(Profile, viewer_id) if viewer_id else None
            if viewer is None or not viewer.is_admin:
                raise NotFoundError("Job not found")
        return job

    def _owned_job(self, job_id: int, user_id: str) -> Job:
        job = self._db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if job.creator_id != user_id:
            raise PermissionDeniedError("Only the job's creator can do this")
        return job

    def toggle_filled(self, job_id: int, user_id: str) -> Job:
        job = self._owned_job(job_id, user_id)
        job.is_filled = not job.is_filled
        self._db.commit()
        self._db.refresh(job)
        return job

    def apply(self, job_id: int, applicant_id: str, message: str) -> Application:
        """Apply to an open job and notify its creator.

        Raises:
            NotFoundError: If the job does not exist or is not approved
            ValidationError: If the cover note is empty or the job is the applicant's own
            ConflictError: If the job is filled or the user already applied
        """
        text = clean_text(message, field="Message", max_length=APPLICATION_MAX_LENGTH)
        job = self._db.get(Job, job_id)
        if job is None or job.status != STATUS_APPROVED:
            raise NotFoundError("Job not found")
        if job.creator_id == applicant_id:
            raise ValidationError("You cannot apply to your own job")
        if job.is_filled:
            raise ConflictError("This job has already been filled")

        application = Application(job_id=job.id, applicant_id=applicant_id, message=text)
        try:
            with self._db.begin_nested():
                self._db.add(application)
                self._db.flush()
        except IntegrityError as exc:
            raise ConflictError("You have already applied to this job") from exc

        applicant = self._db.get(Profile, applicant_id)
        applicant_name = (applicant.full_name if applicant else None) or "Someone"
        self._notifications.create(
            job.creator_id,
            NOTIFICATION_NEW_APPLICATION,
            f"New application for {preview(job.title, 60)}",
            f"{applicant_name}: {preview(text)}",
            link=f"/jobs/{job.id}/applications",
            commit=False,
        )
        self._db.commit()
        self._db.refresh(application)
        return application

    def applications_for_job(self, job_id: int, user_id: str) -> Sequence[Application]:
        """Return a job's applications; only its creator may list them."""
        job = self._owned_job(job_id, user_id)
        stmt = (
            select(Application)
            .where(Application.job_id == job.id)
            .order_by(Application.created_at.desc(), Application.id.desc())
        )
        return self._db.execute(stmt).scalars().all()

    def applications_by(self, applicant_id: str) -> Sequence[Application]:
        stmt = (
            select(Application)
            .where(Application.applicant_id == applicant_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
        )
        return self._db.execute(stmt).scalars().all()
