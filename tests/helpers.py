"""Shared builders for API tests: in-memory database, app, and common requests."""

from collections.abc import Generator
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from users_api.core.config import Settings
from users_api.core.database import build_engine, get_db
from users_api.main import create_app
from users_api.models import Base, User

TEST_SIGNING_KEY = "unit-test-signing-key-0123456789-abcdefghij"
API = "/api/v1"


def make_settings(**overrides: Any) -> Settings:
    """Settings for tests, independent of any .env file."""
    values: dict[str, Any] = {
        "APP_ENV": "test",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET_KEY": TEST_SIGNING_KEY,
        "BCRYPT_ROUNDS": 4,
        "GATEWAY_SECRET": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(**settings_overrides: Any) -> tuple[TestClient, sessionmaker]:
    """App wired to a fresh in-memory SQLite database with all tables created."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db() -> Generator[Session, None, None]:
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app = create_app(make_settings(**settings_overrides))
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app), testing_session_local


def register(
    client: TestClient,
    email: str = "alice@example.com",
    nickname: str = "alice",
    password: str = "s3cret!",
    **fields: str,
):
    body = {
        "email": email,
        "nickname": nickname,
        "password": password,
        "name": fields.get("name", "Alice"),
        "lastname": fields.get("lastname", "Liddell"),
    }
    return client.post(f"{API}/auth/register", json=body)


def login(
    client: TestClient,
    email: str = "alice@example.com",
    password: str = "s3cret!",
    token_type: str = "jwt",
):
    return client.post(
        f"{API}/auth/login",
        json={"email": email, "password": password, "token_type": token_type},
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def gateway_headers(user_id: int, role: str = "user", email: str = "", name: str = "") -> dict[str, str]:
    """X-User-* headers as the gateway would propagate them."""
    return {
        "X-User-Id": str(user_id),
        "X-User-Role": role,
        "X-User-Email": email,
        "X-User-Name": name,
    }


ADMIN_HEADERS = gateway_headers(9999, role="admin", email="ops@example.com", name="Ops")


def set_user_field(session_local: sessionmaker, user_id: int, **values: Any) -> None:
    """Write columns straight to the store (e.g. block a user) without going through the API."""
    db = session_local()
    try:
        user = db.query(User).filter(User.id == user_id).one()
        for name, value in values.items():
            setattr(user, name, value)
        db.commit()
    finally:
        db.close()
