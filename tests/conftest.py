"""
Conftest
"""

import os
import tempfile
from typing import AsyncGenerator

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-chars")
os.environ["LLM_PROVIDER"] = "MOCK"
os.environ["ENABLE_VECTOR_SEARCH"] = "false"
os.environ["ALLOWED_EMAIL_DOMAIN"] = "halogen.no"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="knowledge-hub-uploads-")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.deps import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import Base
from app.services.llm_service import LLMService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_USER_ID = "google-user-1"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token({"sub": TEST_USER_ID, "email": "tester@halogen.no"})
    return {"Authorization": f"Bearer {token}"}


def headers_for(user_id: str) -> dict:
    token = create_access_token({"sub": user_id, "email": f"{user_id}@halogen.no"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    # One session per request, like the real get_db
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


class ScriptedLLM(LLMService):
    """LLM stand-in that replays canned answers and records the prompts"""

    def __init__(self, *answers: str):
        super().__init__(provider="MOCK")
        self.answers = list(answers)
        self.calls = []

    async def complete(self, system, user, json_mode=False, max_tokens=None):
        self.calls.append({"system": system, "user": user, "json_mode": json_mode})
        if self.answers:
            return self.answers.pop(0)
        return "{}" if json_mode else ""


@pytest.fixture
def scripted_llm():
    """Install a ScriptedLLM for the app's LLM dependency"""
    from app.services.llm_service import get_llm_service

    def install(*answers: str) -> ScriptedLLM:
        llm = ScriptedLLM(*answers)
        app.dependency_overrides[get_llm_service] = lambda: llm
        return llm

    return install


async def create_entry(client: AsyncClient, headers: dict, /, **fields) -> dict:
    response = await client.post("/api/v1/knowledge", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
