from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.auth.identity import clean_external_id
from jobboard.core.config import settings
from jobboard.models.user import User
from jobboard.services.errors import InternalError, NotFoundError, UploadTooLargeError, ValidationError
from jobboard.services.s3 import ResumeStorageError
from jobboard.services.users import get_user_by_external_id

logger = logging.getLogger(__name__)


class ResumeStorage(Protocol):
    def upload_resume(
        self,
        *,
        user_id: int,
        filename: str,
        fileobj: BinaryIO,
        content_type: str | None = None,
    ) -> str: ...


@dataclass(frozen=True)
class ResumeUpload:
    filename: str
    fileobj: BinaryIO
    content_type: str | None = None

    def size_bytes(self) -> int:
        pos = self.fileobj.tell()
        self.fileobj.seek(0, os.SEEK_END)
        size = self.fileobj.tell()
        self.fileobj.seek(pos)
        return size


def enforce_max_resume_bytes(size_bytes: int) -> None:
    if size_bytes > settings.MAX_RESUME_BYTES:
        max_mb = settings.MAX_RESUME_BYTES / (1024 * 1024)
        raise UploadTooLargeError(f"File too large. Max allowed size is {max_mb:.1f} MB.")


class ResumeUpdateService:
    """
    Attaches an uploaded resume to an existing user.

    Unlike sync/apply, this never provisions a user: a resume for an unknown
    account is a caller error.
    """

    def __init__(self, db: Session, storage: ResumeStorage):
        self.db = db
        self.storage = storage

    def update_resume(self, external_id: str | None, upload: ResumeUpload | None) -> User:
        if upload is None or not upload.filename:
            raise ValidationError("No resume file uploaded.")

        cleaned_id = clean_external_id(external_id)
        if cleaned_id is None:
            raise ValidationError("Missing or invalid external_id")

        enforce_max_resume_bytes(upload.size_bytes())

        try:
            user = get_user_by_external_id(self.db, cleaned_id)
        except SQLAlchemyError as exc:
            logger.exception("User lookup failed: external_id=%s", cleaned_id)
            raise InternalError() from exc
        if not user:
            raise NotFoundError("User not found")

        try:
            url = self.storage.upload_resume(
                user_id=user.id,
                filename=upload.filename,
                fileobj=upload.fileobj,
                content_type=upload.content_type,
            )
        except ResumeStorageError as exc:
            logger.error("Resume upload failed: user_id=%s, external_id=%s", user.id, cleaned_id)
            raise InternalError("Unable to upload resume") from exc

        user.resume_url = url
        try:
            self.db.add(user)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving resume url: user_id=%s", user.id)
            raise InternalError() from exc

        self.db.refresh(user)
        logger.info("Resume updated: user_id=%s, external_id=%s", user.id, cleaned_id)
        return user
