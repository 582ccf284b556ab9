"""
Pytest configuration and fixtures

Every test gets a fresh in-memory SQLite database. API tests run against
the FastAPI app with the database session and the authenticated user
overridden.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from goaltracker.database import get_db
from goaltracker.main import app
from goaltracker.models import Base, Sport
from goaltracker.services.auth_service import get_current_user_id

from tests.factories import USER_ID


@pytest.fixture(scope="function")
def engine():
    """In-memory database shared across connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Database session bound to the per-test engine."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """Test client authenticated as USER_ID."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db_session):
    """Test client using real token verification."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sports(db_session):
    """Small sport catalogue."""
    catalogue = {
        "run": Sport(code="run", name="Running"),
        "ride": Sport(code="ride", name="Cycling"),
        "swim": Sport(code="swim", name="Swimming"),
    }
    db_session.add_all(catalogue.values())
    db_session.commit()
    return catalogue

