"""Pytest configuration and shared fixtures."""

import os

# Must be set before opsdesk.db.session builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from opsdesk.api.deps import get_db
from opsdesk.api.main import app
from opsdesk.core.rbac import Principal, UserRole
from opsdesk.core.security import create_access_token
from opsdesk.db.base import Base

from tests.factories import create_department


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """TestClient whose routes use the test's own session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Departments and principals
# ---------------------------------------------------------------------------


@pytest.fixture
def department(db_session):
    return create_department(db_session, name="Mining", code="MIN")


@pytest.fixture
def other_department(db_session):
    return create_department(db_session, name="Processing Plant", code="PLT")


@pytest.fixture
def admin():
    return Principal(id=1, role=UserRole.ADMIN)


@pytest.fixture
def planner(department):
    return Principal(
        id=2,
        role=UserRole.PLANNER,
        department_id=department.id,
        department_name=department.name,
    )


@pytest.fixture
def inputter():
    return Principal(id=3, role=UserRole.INPUTTER)


@pytest.fixture
def viewer():
    return Principal(id=4, role=UserRole.VIEWER)


@pytest.fixture
def auth_headers():
    """Build a bearer header for a principal."""

    def _headers(principal: Principal) -> dict:
        return {"Authorization": f"Bearer {create_access_token(principal)}"}

    return _headers
