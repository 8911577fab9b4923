import os
import sys
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

DEFAULT_SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or DEFAULT_SQLALCHEMY_DATABASE_URL

# Ensure the application itself uses the test database instead of the production default.
os.environ.setdefault("DATABASE_URL", SQLALCHEMY_DATABASE_URL)
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from HomeCareAPI.main import app
from HomeCareAPI.database import Base, get_db


def _create_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = _create_engine(SQLALCHEMY_DATABASE_URL)


class _TestingSession(Session):
    pass


TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, class_=_TestingSession
)

try:
    with engine.begin() as connection:
        Base.metadata.drop_all(bind=connection)
        Base.metadata.create_all(bind=connection)
except OperationalError as exc:
    raise RuntimeError(
        "Unable to initialize the database schema for tests. "
        "Set TEST_DATABASE_URL to a reachable database URL or ensure SQLite is available."
    ) from exc


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="module")
def test_client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


PROPERTY_PAYLOAD = {
    "name": "Lake House",
    "address": "Rantatie 1, Espoo",
    "type": "Single Family Home",
    "year_built": 1987,
    "area": 142.5,
    "heating_type": "Heat Pump",
    "floors": 2,
}


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client, email: str = None, name: str = "Test User", password: str = "SecurePass1"):
    """Register an account and return `(user_id, headers)`."""
    response = client.post(
        "/auth/register",
        json={"name": name, "email": email or unique_email(), "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["id"], auth_headers(body["token"])


def create_property(client, headers: dict, **overrides) -> dict:
    payload = {**PROPERTY_PAYLOAD, **overrides}
    response = client.post("/properties/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def share_property(client, headers: dict, property_id: int, email: str, role: str):
    return client.post(f"/properties/{property_id}/share", json={"email": email, "role": role}, headers=headers)


@pytest.fixture
def owner(test_client):
    return register_user(test_client, name="Owner")


@pytest.fixture
def owned_property(test_client, owner):
    _, headers = owner
    return create_property(test_client, headers)


@pytest.fixture
def member_factory(test_client, owner, owned_property):
    """Register a new user and grant them `role` on `owned_property`."""

    def _member(role: str):
        email = unique_email(role)
        user_id, headers = register_user(test_client, email=email, name=f"{role.title()} Member")
        response = share_property(test_client, owner[1], owned_property["id"], email, role)
        assert response.status_code == 201, response.text
        return user_id, headers

    return _member
