"""Database engine, session factory and initialization."""

from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from distributor_search.utils.config import settings

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Yield a session and close it afterwards (FastAPI dependency)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, session_factory=None) -> None:
    """Create all tables and seed the default suppliers."""
    # Register models on Base.metadata
    from distributor_search.database import models  # noqa: F401
    from distributor_search.database.seed import seed_suppliers

    Base.metadata.create_all(bind=bind or engine)

    db = (session_factory or SessionLocal)()
    try:
        seed_suppliers(db)
    finally:
        db.close()
