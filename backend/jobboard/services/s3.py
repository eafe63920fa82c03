from __future__ import annotations

import logging
import re
import uuid
from typing import BinaryIO
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from jobboard.core.config import settings

logger = logging.getLogger(__name__)

_SANITIZE_RE = re.compile(r"[^A-Za-z0-9_.-]")


class ResumeStorageError(Exception):
    """Raised when a resume cannot be stored."""


def _client():
    region = settings.AWS_REGION or None
    return boto3.client("s3", region_name=region)


def build_resume_key(user_id: int, filename: str) -> str:
    safe = _SANITIZE_RE.sub("_", filename or "resume")
    prefix = settings.S3_PREFIX.strip("/")
    key = f"users/{user_id}/resumes/{uuid.uuid4()}_{safe}"
    return f"{prefix}/{key}" if prefix else key


def public_url(key: str) -> str:
    quoted = quote(key, safe="/")
    if settings.RESUME_PUBLIC_BASE_URL:
        return f"{settings.RESUME_PUBLIC_BASE_URL}/{quoted}"
    bucket = settings.S3_BUCKET_NAME
    if settings.AWS_REGION:
        return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{quoted}"
    return f"https://{bucket}.s3.amazonaws.com/{quoted}"


class S3ResumeStorage:
    """Blob storage for resumes. Returns a durable URL for every stored file."""

    def upload_resume(
        self,
        *,
        user_id: int,
        filename: str,
        fileobj: BinaryIO,
        content_type: str | None = None,
    ) -> str:
        bucket = settings.S3_BUCKET_NAME
        if not bucket:
            raise ResumeStorageError("S3_BUCKET_NAME is not configured")

        key = build_resume_key(user_id, filename)
        extra_args = {"ContentType": content_type} if content_type else None

        try:
            s3 = _client()
            s3.upload_fileobj(fileobj, bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload failed: bucket=%s, key=%s, error=%s", bucket, key, exc)
            raise ResumeStorageError("Unable to upload resume") from exc

        return public_url(key)
