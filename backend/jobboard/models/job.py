from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from jobboard.core.base import Base


class Job(Base):
    """Job posting. Owned by the job listing service; read-only here."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)

    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    level = Column(String(100), nullable=False, default="")
    salary = Column(Integer, nullable=True)

    visible = Column(Boolean, nullable=False, default=True, server_default="true")
    # Epoch milliseconds, same clock as job_applications.applied_at.
    posted_at = Column(BigInteger, nullable=True)

    company = relationship("Company", back_populates="jobs")
