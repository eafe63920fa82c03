from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SyncUserIn(BaseModel):
    # Identity fields stay optional here so the service reports a 400 for missing values.
    external_id: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)


class UserOut(BaseModel):
    id: int
    external_id: str
    email: str
    first_name: str
    last_name: str
    display_name: str
    avatar_url: str
    resume_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SyncUserOut(BaseModel):
    success: bool = True
    user: UserOut


class UpdateResumeOut(BaseModel):
    success: bool = True
    message: str
    resume_url: str
    user: UserOut
