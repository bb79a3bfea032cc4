"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cars_api.api.dependencies import get_car_service, get_user_service
from cars_api.database import Base, engine_options, get_db
from cars_api.main import app
from cars_api.schemas.car import CarCreate
from cars_api.schemas.user import UserCreate
from cars_api.services.car_service import CarService
from cars_api.services.photo_storage import PhotoStorage
from cars_api.services.user_service import UserService

DEFAULT_PASSWORD = "secret123"


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and login."""

    def __init__(self, *args, user_id: int | None = None, login: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.login = login


# PostgreSQL when TEST_DATABASE_URL is set (Docker), SQLite otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

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


@pytest.fixture
def photo_storage(tmp_path):
    """Photo storage rooted in a temporary directory."""
    return PhotoStorage(tmp_path / "uploads")


@pytest.fixture
def user_service(db, photo_storage):
    return UserService(db, photo_storage)


@pytest.fixture
def car_service(db, photo_storage):
    return CarService(db, photo_storage)


@pytest.fixture
def user_payload():
    """Factory for valid registration payloads."""

    def make(login: str = "alice", email: str | None = None, cars=None, **overrides):
        data = {
            "first_name": login.capitalize(),
            "last_name": "Tester",
            "birthday": "1990-05-01",
            "login": login,
            "password": DEFAULT_PASSWORD,
            "email": email or f"{login}@example.com",
            "phone": "555-0100",
            "cars": [CarCreate(**car) for car in cars] if cars else None,
        }
        data.update(overrides)
        return UserCreate(**data)

    return make


@pytest.fixture
def make_user(user_service, user_payload):
    """Factory that registers a user through the service."""

    def make(login: str = "alice", **kwargs):
        return user_service.create_user(user_payload(login, **kwargs))

    return make


@pytest.fixture(scope="function")
def client(db, photo_storage):
    """Create a test client with database and storage overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_user_service] = lambda: UserService(db, photo_storage)
    app.dependency_overrides[get_car_service] = lambda: CarService(db, photo_storage)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_sign_in(client, login: str) -> AuthHeaders:
    """Register a user over HTTP and return bearer headers for it."""
    response = client.post(
        "/api/users",
        json={
            "first_name": login.capitalize(),
            "last_name": "Tester",
            "birthday": "1990-05-01",
            "login": login,
            "password": DEFAULT_PASSWORD,
            "email": f"{login}@example.com",
            "phone": "555-0100",
        },
    )
    assert response.status_code == 201
    user_id = response.json()["id"]

    response = client.post("/api/signin", json={"login": login, "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, login=login)


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register_and_sign_in(client, "tester")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated signed-in user."""
    return register_and_sign_in(client, "stranger")
