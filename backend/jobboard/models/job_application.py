from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobboard.core.base import Base

DEFAULT_APPLICATION_STATUS = "Pending"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)

    # ✅ ownership
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Copied from the job at creation time.
    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # No transitions yet; reserved for a review workflow.
    status = Column(
        String(50),
        nullable=False,
        default=DEFAULT_APPLICATION_STATUS,
        server_default=DEFAULT_APPLICATION_STATUS,
    )
    # Epoch milliseconds, server clock.
    applied_at = Column(BigInteger, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="job_applications")
    company = relationship("Company")
    job = relationship("Job")

    __table_args__ = (
        # The real guard against duplicate applications; the service pre-check is advisory.
        UniqueConstraint("user_id", "job_id", name="uq_job_applications_user_id_job_id"),
        Index("ix_job_applications_user_id_applied_at", "user_id", "applied_at"),
    )
