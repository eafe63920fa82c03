from __future__ import annotations

import logging
import time

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from jobboard.auth.identity import clean_external_id
from jobboard.core.database import is_unique_violation
from jobboard.models.job import Job
from jobboard.models.job_application import DEFAULT_APPLICATION_STATUS, JobApplication
from jobboard.services.errors import (
    AlreadyAppliedError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from jobboard.services.users import IdentityReconciler, get_user_by_external_id

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def find_application(db: Session, user_id: int, job_id: int) -> JobApplication | None:
    return (
        db.query(JobApplication)
        .filter(JobApplication.user_id == user_id, JobApplication.job_id == job_id)
        .first()
    )


class ApplicationService:
    """
    Creates job applications, at most one per (user, job).

    The existence check before the insert only gives the common case a friendly
    error. Two concurrent applies can both pass it; the unique constraint on
    (user_id, job_id) decides the winner and the loser gets AlreadyAppliedError.
    """

    def __init__(self, db: Session, reconciler: IdentityReconciler | None = None):
        self.db = db
        self.reconciler = reconciler or IdentityReconciler(db)

    def apply(
        self,
        external_id: str | None,
        email: str | None,
        first_name: str | None = None,
        last_name: str | None = None,
        job_id: int | None = None,
    ) -> JobApplication:
        if clean_external_id(external_id) is None:
            raise ValidationError("Missing or invalid external_id")
        if job_id is None:
            raise ValidationError("Missing job_id")

        user = self.reconciler.reconcile(external_id, email, first_name=first_name, last_name=last_name)

        try:
            existing = find_application(self.db, user.id, job_id)
            job = self.db.get(Job, job_id) if not existing else None
        except SQLAlchemyError as exc:
            logger.exception("Application lookup failed: user_id=%s, job_id=%s", user.id, job_id)
            raise InternalError() from exc

        if existing:
            logger.warning("User %s already applied for job %s", user.id, job_id)
            raise AlreadyAppliedError()

        if not job:
            logger.warning("Job not found: job_id=%s (user_id=%s)", job_id, user.id)
            raise NotFoundError("Job Not Found")

        application = JobApplication(
            user_id=user.id,
            company_id=job.company_id,
            job_id=job.id,
            status=DEFAULT_APPLICATION_STATUS,
            applied_at=now_ms(),
        )

        try:
            self.db.add(application)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                logger.warning(
                    "Concurrent apply lost the race: user_id=%s, job_id=%s",
                    user.id,
                    job_id,
                )
                raise AlreadyAppliedError() from exc
            logger.exception("Error saving application: user_id=%s, job_id=%s", user.id, job_id)
            raise InternalError() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving application: user_id=%s, job_id=%s", user.id, job_id)
            raise InternalError() from exc

        self.db.refresh(application)
        logger.info(
            "Job application saved: id=%s, user_id=%s, job_id=%s, company_id=%s",
            application.id,
            application.user_id,
            application.job_id,
            application.company_id,
        )
        return application


class ApplicationQueryService:
    """Read-only view of a user's applications with job and company summaries."""

    def __init__(self, db: Session):
        self.db = db

    def list_applications(self, external_id: str | None) -> list[JobApplication]:
        """
        Applications for the user, newest first.

        An unknown external_id raises NotFoundError; a known user with no
        applications gets an empty list.
        """
        cleaned_id = clean_external_id(external_id)
        if cleaned_id is None:
            raise ValidationError("Missing or invalid external_id")

        try:
            user = get_user_by_external_id(self.db, cleaned_id)
            if not user:
                raise NotFoundError("User not found")

            logger.debug("Fetching applications for user_id=%s", user.id)
            return (
                self.db.query(JobApplication)
                .options(joinedload(JobApplication.job), joinedload(JobApplication.company))
                .filter(JobApplication.user_id == user.id)
                .order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching applications: external_id=%s", cleaned_id)
            raise InternalError() from exc
