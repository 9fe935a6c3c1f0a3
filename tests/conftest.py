from __future__ import annotations

import os
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"
    os.environ["ENVIRONMENT"] = "test"
    os.environ.setdefault("JWT_SECRET", "test-secret")


@pytest.fixture()
def db() -> Iterator[Any]:
    from app.database import Base, SessionLocal, engine
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db) -> Iterator[TestClient]:
    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db) -> Callable[..., tuple[Any, dict[str, str]]]:
    from app.models.user import User
    from app.utils.jwt_handler import create_user_token

    def _make(email: str = "pro@example.com", name: str | None = None) -> tuple[Any, dict[str, str]]:
        user = User(email=email, name=name)
        db.add(user)
        db.commit()
        db.refresh(user)
        headers = {"Authorization": f"Bearer {create_user_token(user.id)}"}
        return user, headers

    return _make


@pytest.fixture()
def profession_payload() -> dict[str, Any]:
    return {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "mobileNo": "9876543210",
        "state": "Maharashtra",
        "district": "Pune",
        "city": "Pune",
        "serviceCategory": "Home Repair",
        "serviceName": "Plumber",
        "experience": "5 years",
        "servicePrice": "350",
        "needSupport": False,
        "professionDescription": "Leak repair and fittings.",
    }
