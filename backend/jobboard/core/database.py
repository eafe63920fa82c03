from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from typing import Generator
from sqlalchemy.orm import Session
from jobboard.core.config import settings

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,   # checks stale connections
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Postgres SQLSTATE for unique_violation.
UNIQUE_VIOLATION_PGCODE = "23505"


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when an IntegrityError came from a unique constraint (Postgres or SQLite)."""
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode == UNIQUE_VIOLATION_PGCODE:
        return True
    message = str(orig or exc)
    return "UNIQUE constraint failed" in message or "duplicate key value violates unique constraint" in message
