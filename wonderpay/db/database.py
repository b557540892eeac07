"""
Database engine and per-request session handling for capital applications.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from wonderpay.config import get_settings
from wonderpay.db.models import Base

logger = logging.getLogger(__name__)
settings = get_settings()


def build_engine(database_url: str):
    """Create an engine suited to the configured backend."""
    if database_url.startswith("postgresql"):
        # Pooling is left to the hosted Postgres proxy
        return create_engine(database_url, poolclass=NullPool)
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},  # SQLite across threads
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create the capital tables if they do not exist."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session for one request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Session scope for scripts; commits on success, rolls back on error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
