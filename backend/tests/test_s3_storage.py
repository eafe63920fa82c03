from __future__ import annotations

import io

import pytest
from botocore.exceptions import ClientError

from jobboard.core import config as app_config
from jobboard.services.s3 import ResumeStorageError, S3ResumeStorage, build_resume_key, public_url


def test_build_resume_key_sanitizes_filename(monkeypatch):
    monkeypatch.setattr(app_config.settings, "S3_PREFIX", "/resumes/")

    key = build_resume_key(42, "my cv (final).pdf")

    assert key.startswith("resumes/users/42/resumes/")
    assert key.endswith("_my_cv__final_.pdf")


def test_build_resume_key_without_prefix():
    key = build_resume_key(7, "cv.pdf")

    assert key.startswith("users/7/resumes/")


def test_upload_resume_returns_s3_object_url(fake_s3):
    url = S3ResumeStorage().upload_resume(
        user_id=1, filename="cv.pdf", fileobj=io.BytesIO(b"%PDF"), content_type="application/pdf"
    )

    assert len(fake_s3.uploads) == 1
    upload = fake_s3.uploads[0]
    assert upload["bucket"] == "test-bucket"
    assert upload["extra_args"] == {"ContentType": "application/pdf"}
    assert upload["body"] == b"%PDF"
    assert url == f"https://test-bucket.s3.us-east-1.amazonaws.com/{upload['key']}"


def test_upload_resume_uses_public_base_url(fake_s3, monkeypatch):
    monkeypatch.setattr(app_config.settings, "RESUME_PUBLIC_BASE_URL", "https://cdn.example.test")

    url = S3ResumeStorage().upload_resume(user_id=1, filename="cv.pdf", fileobj=io.BytesIO(b"x"))

    assert fake_s3.uploads[0]["extra_args"] is None
    assert url == f"https://cdn.example.test/{fake_s3.uploads[0]['key']}"


def test_public_url_without_region(monkeypatch):
    monkeypatch.setattr(app_config.settings, "AWS_REGION", "")

    assert public_url("users/1/resumes/a b.pdf") == "https://test-bucket.s3.amazonaws.com/users/1/resumes/a%20b.pdf"


def test_upload_resume_requires_bucket(fake_s3, monkeypatch):
    monkeypatch.setattr(app_config.settings, "S3_BUCKET_NAME", "")

    with pytest.raises(ResumeStorageError):
        S3ResumeStorage().upload_resume(user_id=1, filename="cv.pdf", fileobj=io.BytesIO(b"x"))

    assert fake_s3.uploads == []


def test_upload_resume_wraps_client_errors(fake_s3):
    fake_s3.error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")

    with pytest.raises(ResumeStorageError):
        S3ResumeStorage().upload_resume(user_id=1, filename="cv.pdf", fileobj=io.BytesIO(b"x"))
