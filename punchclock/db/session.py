"""
Database Session Management
"""
from sqlalchemy import create_engine
from sqlalchemy.schema import CreateSchema
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from atams.db import Base
from atams.db.session import normalize_database_url
from punchclock.core.config import settings

# Create engine
engine = create_engine(
    normalize_database_url(settings.DATABASE_URL),
    pool_pre_ping=settings.DB_POOL_PRE_PING,
    echo=settings.DEBUG
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency

    One session per request; services receive it explicitly and never
    keep it between calls.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create the timeclock schema and tables if missing"""
    import punchclock.models  # noqa: F401  (registers tables on Base.metadata)

    with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            conn.execute(CreateSchema("timeclock", if_not_exists=True))
        Base.metadata.create_all(bind=conn)
