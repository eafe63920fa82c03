from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from jobboard.core.base import Base


class Company(Base):
    """Employer account. Owned by the company service; read-only here."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    image_url = Column(String(500), nullable=False, default="", server_default="")

    jobs = relationship("Job", back_populates="company")

    @property
    def avatar_url(self) -> str:
        return self.image_url or ""
