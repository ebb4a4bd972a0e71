"""Pytest configuration and fixtures."""

import os

# Cheap password hashing for the test run; must be set before src is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.database import Base, engine_options, get_db  # noqa: E402
from src.main import app  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/winelog", "/winelog_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str, name: str = "Test User", password: str = "testpass123"):
    """Register a user and return auth headers for them."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return register(client, "other@example.com", name="Other User")


@pytest.fixture
def tasting(client, auth_headers):
    """A tasting session with two ad-hoc wines."""
    response = client.post(
        "/api/v1/tastings",
        headers=auth_headers,
        json={"name": "Friday Reds", "venue": "Home"},
    )
    assert response.status_code == 201
    session = response.json()

    entries = []
    for name in ("Rioja Reserva", "Barolo"):
        entry = client.post(
            f"/api/v1/tastings/{session['id']}/entries",
            headers=auth_headers,
            json={"ad_hoc_name": name},
        )
        assert entry.status_code == 201
        entries.append(entry.json())

    session["entries"] = entries
    return session


@pytest.fixture
def social_tasting(client, auth_headers, tasting):
    """The tasting session with social mode enabled."""
    response = client.patch(
        f"/api/v1/tastings/{tasting['id']}/social-mode",
        headers=auth_headers,
        json={"enabled": True},
    )
    assert response.status_code == 200
    tasting.update(response.json())
    return tasting


@pytest.fixture
def join_guest(client):
    """Join a social session as a guest; returns (guest_id, headers)."""

    def _join(code: str, name: str):
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": code, "guest_name": name},
        )
        assert response.status_code == 200, response.text
        data = response.json()
        return data["guest_id"], {"Authorization": f"Bearer {data['token']}"}

    return _join
