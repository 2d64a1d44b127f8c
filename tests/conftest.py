"""Pytest configuration and shared fixtures."""

import asyncio
import os
from typing import Callable, List, Tuple, Union

# Settings are read at import time; keep tests off real services.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("OPENROUTER_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("PIPELINE_MAX_GENERATION_ATTEMPTS", "1")
os.environ.setdefault("PIPELINE_RETRY_DELAY_SECONDS", "0")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from docforge.core.config import Settings, get_settings
from docforge.core.database import DatabaseClient
from docforge.core.gateway import LLMGateway
from docforge.repositories.artifact_store import ArtifactStore
from docforge.schemas.artifacts import UPLOADED_FILE_TYPE
from docforge.services.storage_service import StorageService

Reply = Union[str, Exception, Callable[[str, str], str]]


class FakeProvider:
    """In-memory LLM provider.

    Replies are consumed in order; the last one repeats. A reply may be a
    string, an exception to raise, or a callable of (system, user).
    """

    def __init__(self, name: str, *replies: Reply, delay: float = 0.0):
        self.name = name
        self.replies: List[Reply] = list(replies) or [""]
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    async def invoke(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        index = min(len(self.calls) - 1, len(self.replies) - 1)
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(system_prompt, user_prompt)
        return reply


def build_gateway(*replies: Reply, timeout: float = 5.0, delay: float = 0.0) -> Tuple[LLMGateway, FakeProvider]:
    """Gateway whose every configured provider name routes to one fake."""
    provider = FakeProvider("fake", *replies, delay=delay)
    gateway = LLMGateway(timeout=timeout)
    for name in ("gemini", "openrouter"):
        gateway.providers[name] = provider
    return gateway, provider


@pytest.fixture
def make_gateway() -> Callable[..., Tuple[LLMGateway, FakeProvider]]:
    return build_gateway


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no retry delay."""
    base = get_settings()
    pipeline = base.pipeline.model_copy(update={"retry_delay_seconds": 0.0, "max_generation_attempts": 1})
    return base.model_copy(update={"pipeline": pipeline})


@pytest.fixture
def settings_with_attempts(test_settings: Settings) -> Callable[[int], Settings]:
    def _make(attempts: int) -> Settings:
        pipeline = test_settings.pipeline.model_copy(update={"max_generation_attempts": attempts})
        return test_settings.model_copy(update={"pipeline": pipeline})

    return _make


def create_sqlite_client() -> DatabaseClient:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    return DatabaseClient(engine)


@pytest.fixture
def database_client() -> DatabaseClient:
    """Unconnected client for apps that create their own schema on startup."""
    return create_sqlite_client()


@pytest_asyncio.fixture
async def db_client():
    client = create_sqlite_client()
    await client.create_tables()
    yield client
    await client.disconnect()


@pytest_asyncio.fixture
async def store(db_client: DatabaseClient):
    async with db_client.session_maker() as session:
        yield ArtifactStore(session)


@pytest.fixture
def storage(tmp_path) -> StorageService:
    return StorageService(root=tmp_path / "storage")


@pytest_asyncio.fixture
async def project(store: ArtifactStore):
    return await store.projects.create_project(name="Inventory renewal", description="Replace the legacy stock system")


@pytest_asyncio.fixture
async def uploaded_document(store: ArtifactStore, project):
    return await store.documents.create_document(
        project_id=project.id,
        type=UPLOADED_FILE_TYPE,
        content={
            "file_name": "brief.txt",
            "mime_type": "text/plain",
            "file_path": None,
            "text": "Warehouse staff need to track stock levels per location.",
        },
    )


@pytest_asyncio.fixture
async def requirements_document(store: ArtifactStore, project):
    return await store.documents.create_document(
        project_id=project.id,
        type="requirements",
        content={"content": "1. Track stock per location\n2. Alert on low stock"},
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end flows over the in-memory store")

