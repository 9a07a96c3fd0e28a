"""Pytest fixtures for API and service tests."""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_optional_llm_service
from app.core.achievements import DEFAULT_CATALOG
from app.db import models  # noqa: F401  # Imported for side effects
from app.db.base import Base
from app.db.models import User
from app.core.security import get_password_hash
from app.main import create_app
from app.services.achievement_service import AchievementService
from app.services.llm_service import LLMResult, LLMService
from app.utils.exceptions import AIGatewayError

TEST_PASSWORD = "securepass123"


class ScriptedProvider:
    """Gateway stand-in that answers from a queue of scripted replies."""

    name = "scripted"

    def __init__(self, default: str = '{"events": []}') -> None:
        self.default = default
        self.replies: list[str | Exception] = []
        self.calls: list[dict[str, Any]] = []
        self.speech_calls: list[dict[str, str]] = []

    def queue(self, *replies: str | Exception) -> None:
        self.replies.extend(replies)

    def generate(self, messages, **kwargs) -> LLMResult:
        self.calls.append({"messages": list(messages), **kwargs})
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return LLMResult(
            provider=self.name,
            model=kwargs.get("model") or "stub-model",
            content=reply,
            prompt_tokens=10,
            completion_tokens=5,
            total_tokens=15,
            raw_response={},
        )

    def synthesize_speech(self, text: str, *, voice: str) -> bytes:
        self.speech_calls.append({"text": text, "voice": voice})
        if self.replies and isinstance(self.replies[0], AIGatewayError):
            raise self.replies.pop(0)
        return b"ID3-fake-mp3"


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture()
def llm_provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture()
def llm_service(llm_provider: ScriptedProvider) -> LLMService:
    return LLMService(providers=[llm_provider])


@pytest.fixture()
def client(db_session: Session, llm_service: LLMService) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_optional_llm_service] = lambda: llm_service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def catalog(db_session: Session):
    """Seed the default achievement catalog."""

    service = AchievementService(db_session)
    service.seed_catalog(DEFAULT_CATALOG)
    return service.fetch_catalog()


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def create(**overrides: Any) -> User:
        counter["n"] += 1
        values = {
            "email": f"diarist{counter['n']}@example.com",
            "hashed_password": get_password_hash(TEST_PASSWORD),
            "display_name": f"Diarist {counter['n']}",
            "notifications_enabled": True,
            "subscription_tier": "free",
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return create


@pytest.fixture()
def user(user_factory) -> User:
    return user_factory()


def login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client: TestClient, user: User) -> dict[str, str]:
    return login(client, user.email)


@pytest.fixture()
def login_as(client: TestClient) -> Callable[[User], dict[str, str]]:
    return lambda target: login(client, target.email)


@pytest_asyncio.fixture()
async def async_client(
    db_session: Session, llm_service: LLMService
) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app()

    async def override_get_db() -> AsyncGenerator[Session, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_optional_llm_service] = lambda: llm_service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
