import os

# Point the module-level engine at SQLite before importing jobboard.* (it is created at import time).
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import io

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.core.base import Base
from jobboard.core import config as app_config

# Import models so they register with SQLAlchemy metadata.
from jobboard.models.user import User  # noqa: F401
from jobboard.models.company import Company
from jobboard.models.job import Job
from jobboard.models.job_application import JobApplication  # noqa: F401

from jobboard.core.database import get_db
from jobboard.dependencies.services import get_resume_storage
from jobboard.services.s3 import ResumeStorageError


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeS3Client:
    def __init__(self):
        self.uploads: list[dict] = []
        self.error: Exception | None = None

    def upload_fileobj(self, Fileobj, Bucket, Key, ExtraArgs=None):  # noqa: N803
        if self.error is not None:
            raise self.error
        self.uploads.append(
            {"bucket": Bucket, "key": Key, "extra_args": ExtraArgs, "body": Fileobj.read()}
        )


@pytest.fixture()
def fake_s3():
    return FakeS3Client()


@pytest.fixture(autouse=True)
def _stub_s3(monkeypatch, fake_s3):
    """
    Stub the S3 client used by jobboard.services.s3 so tests never require AWS creds/network.
    """
    from jobboard.services import s3 as s3_service

    monkeypatch.setattr(s3_service, "_client", lambda: fake_s3)
    monkeypatch.setattr(app_config.settings, "S3_BUCKET_NAME", "test-bucket")
    monkeypatch.setattr(app_config.settings, "AWS_REGION", "us-east-1")
    monkeypatch.setattr(app_config.settings, "S3_PREFIX", "")
    monkeypatch.setattr(app_config.settings, "RESUME_PUBLIC_BASE_URL", "")


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = ["MAX_RESUME_BYTES"]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


class FakeResumeStorage:
    """In-memory stand-in for the blob storage collaborator."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[dict] = []

    def upload_resume(self, *, user_id, filename, fileobj, content_type=None):
        if self.fail:
            raise ResumeStorageError("storage unavailable")
        body = fileobj.read()
        self.calls.append(
            {"user_id": user_id, "filename": filename, "content_type": content_type, "size": len(body)}
        )
        return f"https://files.example.test/resumes/{user_id}/{len(self.calls)}/{filename}"


@pytest.fixture()
def resume_storage():
    return FakeResumeStorage()


@pytest.fixture()
def failing_resume_storage():
    return FakeResumeStorage(fail=True)


@pytest.fixture()
def app(db_session, resume_storage):
    import jobboard.main as main

    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_resume_storage] = lambda: resume_storage
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def jobs(db_session):
    """
    Two companies with one open job each.
    """
    acme = Company(name="Acme", email="jobs@acme.test", image_url="https://cdn.test/acme.png")
    globex = Company(name="Globex", email="talent@globex.test", image_url="")
    db_session.add_all([acme, globex])
    db_session.flush()

    engineer = Job(
        company_id=acme.id,
        title="Backend Engineer",
        description="Build APIs",
        location="Remote",
        category="Programming",
        level="Senior Level",
        salary=150000,
    )
    analyst = Job(
        company_id=globex.id,
        title="Data Analyst",
        description="Crunch numbers",
        location="Chicago",
        category="Data Science",
        level="Intermediate Level",
        salary=90000,
    )
    db_session.add_all([engineer, analyst])
    db_session.commit()
    db_session.refresh(engineer)
    db_session.refresh(analyst)
    return engineer, analyst


@pytest.fixture()
def pdf_bytes():
    return b"%PDF-1.4\n% test resume\n"


@pytest.fixture()
def pdf_file(pdf_bytes):
    return io.BytesIO(pdf_bytes)
