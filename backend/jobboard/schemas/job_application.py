from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ApplyForJobIn(BaseModel):
    external_id: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    job_id: int | None = None


class ApplicationsQueryIn(BaseModel):
    external_id: str | None = Field(default=None, max_length=255)


class CompanySummaryOut(BaseModel):
    id: int
    name: str
    email: str
    avatar_url: str

    model_config = ConfigDict(from_attributes=True)


class JobSummaryOut(BaseModel):
    id: int
    title: str
    description: str
    location: str
    category: str
    level: str
    salary: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationOut(BaseModel):
    id: int
    user_id: int
    company_id: int
    job_id: int
    status: str
    applied_at: int

    model_config = ConfigDict(from_attributes=True)


class ApplicationWithJoinsOut(ApplicationOut):
    company: CompanySummaryOut
    job: JobSummaryOut


class ApplyForJobOut(BaseModel):
    success: bool = True
    message: str
    application: ApplicationOut


class ApplicationListOut(BaseModel):
    success: bool = True
    applications: list[ApplicationWithJoinsOut]
