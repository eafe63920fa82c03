from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from jobboard.dependencies.services import (
    get_application_query_service,
    get_application_service,
    get_identity_reconciler,
    get_resume_update_service,
)
from jobboard.schemas.job_application import (
    ApplicationListOut,
    ApplicationsQueryIn,
    ApplyForJobIn,
    ApplyForJobOut,
)
from jobboard.schemas.user import SyncUserIn, SyncUserOut, UpdateResumeOut
from jobboard.services.applications import ApplicationQueryService, ApplicationService
from jobboard.services.resumes import ResumeUpdateService, ResumeUpload
from jobboard.services.users import IdentityReconciler

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/sync", response_model=SyncUserOut)
def sync_user(
    payload: SyncUserIn,
    reconciler: IdentityReconciler = Depends(get_identity_reconciler),
):
    user = reconciler.reconcile(
        payload.external_id,
        payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        avatar_url=payload.avatar_url,
    )
    return {"success": True, "user": user}


@router.post("/apply", response_model=ApplyForJobOut)
def apply_for_job(
    payload: ApplyForJobIn,
    service: ApplicationService = Depends(get_application_service),
):
    application = service.apply(
        payload.external_id,
        payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        job_id=payload.job_id,
    )
    return {"success": True, "message": "Applied Successfully", "application": application}


@router.post("/applications", response_model=ApplicationListOut)
def list_user_applications(
    payload: ApplicationsQueryIn,
    service: ApplicationQueryService = Depends(get_application_query_service),
):
    # Known user with no applications is still a success (empty list).
    applications = service.list_applications(payload.external_id)
    return {"success": True, "applications": applications}


@router.post("/update-resume", response_model=UpdateResumeOut)
def update_resume(
    external_id: str | None = Form(None),
    resume: UploadFile | None = File(None),
    service: ResumeUpdateService = Depends(get_resume_update_service),
):
    upload = None
    if resume is not None and resume.filename:
        upload = ResumeUpload(
            filename=resume.filename,
            fileobj=resume.file,
            content_type=resume.content_type,
        )

    user = service.update_resume(external_id, upload)
    return {"success": True, "message": "Resume Updated", "resume_url": user.resume_url, "user": user}
