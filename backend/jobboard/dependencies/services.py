from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from jobboard.core.database import get_db
from jobboard.services.applications import ApplicationQueryService, ApplicationService
from jobboard.services.resumes import ResumeStorage, ResumeUpdateService
from jobboard.services.s3 import S3ResumeStorage
from jobboard.services.users import IdentityReconciler


@lru_cache
def get_resume_storage() -> ResumeStorage:
    # One storage collaborator per process; it holds no per-request state.
    return S3ResumeStorage()


def get_identity_reconciler(db: Session = Depends(get_db)) -> IdentityReconciler:
    return IdentityReconciler(db)


def get_application_service(
    db: Session = Depends(get_db),
    reconciler: IdentityReconciler = Depends(get_identity_reconciler),
) -> ApplicationService:
    return ApplicationService(db, reconciler=reconciler)


def get_application_query_service(db: Session = Depends(get_db)) -> ApplicationQueryService:
    return ApplicationQueryService(db)


def get_resume_update_service(
    db: Session = Depends(get_db),
    storage: ResumeStorage = Depends(get_resume_storage),
) -> ResumeUpdateService:
    return ResumeUpdateService(db, storage)
