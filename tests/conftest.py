"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once per process; set them before any app import.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="userhub-test-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402, F401
from app.services.user_store import get_user_store  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Seed a regular user and return its credentials."""
    user = get_user_store().create(db_session, name="Test User", email="a@x.com", password="p1")
    return {"id": user.id, "name": user.name, "email": user.email, "password": "p1"}


@pytest.fixture(name="admin_user")
def admin_user_fixture(db_session: Session):
    """Seed an admin user and return its credentials."""
    user = get_user_store().create(
        db_session, name="Admin", email="admin@x.com", password="admin-pass", role=UserRole.ADMIN
    )
    return {"id": user.id, "name": user.name, "email": user.email, "password": "admin-pass"}


@pytest.fixture(name="login")
def login_fixture(client: TestClient):
    """Return a helper that logs in through the API and returns the token pair."""

    def _login(email: str, password: str) -> dict:
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(login):
    """Return a helper that logs in and builds the Authorization header."""

    def _headers(credentials: dict) -> dict:
        tokens = login(credentials["email"], credentials["password"])
        return {"Authorization": f"Bearer {tokens['accessToken']}"}

    return _headers
