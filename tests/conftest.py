# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from chatline.db.session import Base
from chatline.db.session import get_db as app_get_session
from chatline.main import app as fastapi_app
from chatline.models import Profile
from chatline.services.delivery import DeliveryBus
from chatline.services.images import ImageStorage
from chatline.services.profile_store import ProfileStore

TEST_DB_URL = "sqlite://"
MESSAGE_TIME = datetime(2026, 10, 19, 12, 30, tzinfo=UTC)


class RecordingSession:
    """Stand-in live session that keeps every envelope it receives."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        self.sent.append(data)


class BrokenSession:
    """Live session whose transport has gone away."""

    async def send_json(self, data: Any) -> None:
        raise ConnectionError("socket closed")


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture()
def client(app: FastAPI, upload_dir: Path) -> Iterator[TestClient]:
    app.state.image_storage = ImageStorage(upload_dir)
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.state.image_storage = None


@pytest.fixture()
def store(db_session: Session) -> ProfileStore:
    return ProfileStore(db_session)


@pytest.fixture()
def bus() -> DeliveryBus:
    return DeliveryBus()


@pytest.fixture()
def recorder(bus: DeliveryBus) -> RecordingSession:
    """A live session already registered on ``bus``."""
    session = RecordingSession()
    bus.register(session)
    return session


@pytest.fixture()
def alice(store: ProfileStore) -> Profile:
    return store.create(nickname="alice", image="/uploads/alice.png", email="a@x.com")


@pytest.fixture()
def bob(store: ProfileStore) -> Profile:
    return store.create(nickname="bob", image="/uploads/bob.png", email="b@x.com")


def message_body(
    message_id: str = "m1",
    *,
    user: str = "bob",
    to_user: str = "alice",
    content: str = "hi",
) -> dict[str, Any]:
    """Build the JSON body of an append-message request."""
    return {
        "user": user,
        "content": content,
        "toUser": to_user,
        "_id": message_id,
        "timestamp": MESSAGE_TIME.isoformat(),
    }
