"""Global pytest fixtures for testing."""

import contextlib
import os
from collections.abc import AsyncGenerator

import dotenv
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from lingo_api.dependencies import get_machine_translation_service
from lingo_api.main import app
from lingo_core.services import MachineTranslationService
from lingo_core.services.translation_providers import TranslationProvider
from lingo_database import Base
from lingo_database.models import Language, utcnow
from lingo_database.session import get_session

with contextlib.suppress(OSError):
    dotenv.load_dotenv()

# Test database URL - in-memory SQLite unless TEST_DATABASE_URL is set
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Safety check: ensure tests only run on a test database
if not TEST_DATABASE_URL.startswith("sqlite") and "test" not in TEST_DATABASE_URL:
    raise RuntimeError(
        f"Safety check failed: TEST_DATABASE_URL must point to a test database "
        f"(name should contain 'test'). Current: {TEST_DATABASE_URL}"
    )


class FakeTranslationProvider(TranslationProvider):
    """Deterministic provider; texts listed in ``failing`` raise."""

    name = "fake"

    def __init__(self) -> None:
        self.mapping: dict[str, str] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str, str]] = []
        self.available = True

    def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append((text, source, target))
        if text in self.failing:
            raise RuntimeError(f"cannot translate {text!r}")
        return self.mapping.get(text, f"[{target}] {text}")

    def list_supported_languages(self) -> list[dict[str, str]]:
        return [{"code": "en", "name": "English"}, {"code": "fr", "name": "French"}]

    def health(self) -> bool:
        return self.available


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with a fresh schema."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,  # One shared in-memory database
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def fake_provider() -> FakeTranslationProvider:
    """Provide a deterministic machine-translation provider."""
    return FakeTranslationProvider()


@pytest.fixture
def mt_service(fake_provider: FakeTranslationProvider) -> MachineTranslationService:
    """Machine translation service backed by the fake provider."""
    return MachineTranslationService(fake_provider, timeout=5.0)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, mt_service: MachineTranslationService
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database and provider overrides."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_machine_translation_service] = lambda: mt_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def languages(db_session: AsyncSession) -> dict[str, int]:
    """Create en (default), fr and de languages; returns their ids by code."""
    now = utcnow()
    created = {
        "en": Language(code="en", name="English", is_default=True, created_at=now, updated_at=now),
        "fr": Language(code="fr", name="French", created_at=now, updated_at=now),
        "de": Language(code="de", name="German", created_at=now, updated_at=now),
    }
    db_session.add_all(created.values())
    await db_session.commit()
    return {code: language.id for code, language in created.items()}
