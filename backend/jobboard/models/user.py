# jobboard/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from jobboard.core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Identity-provider subject id. Hard unique constraint: reconciliation relies on it.
    external_id = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    first_name = Column(String(100), nullable=False, default="", server_default="")
    last_name = Column(String(100), nullable=False, default="", server_default="")
    # Computed once at creation; not refreshed on later syncs.
    display_name = Column(String(201), nullable=False, default="", server_default="")
    avatar_url = Column(String(500), nullable=False, default="", server_default="")

    # Set only by the resume update flow.
    resume_url = Column(String(1000), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # ✅ user → job applications
    job_applications = relationship(
        "JobApplication",
        back_populates="user",
        cascade="all, delete-orphan",
    )
