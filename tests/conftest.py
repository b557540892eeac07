"""
Shared fixtures: an in-memory capital applications store wired into the app.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wonderpay.main import app
from wonderpay.db.database import get_db
from wonderpay.db.models import Base


@pytest.fixture(scope="session")
def db_engine():
    """One in-memory SQLite database shared by every connection in the run."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(scope="session")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(autouse=True)
def applications_store(db_engine, session_factory):
    """Fresh tables per test, served to the API in place of the real database."""
    Base.metadata.create_all(bind=db_engine)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)
    Base.metadata.drop_all(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Session for arranging rows before a request."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """API client that returns 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)
