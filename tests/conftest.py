# tests/conftest.py
"""
Shared fixtures: isolated configuration and an in-memory database
"""

import pytest
import pytest_asyncio

from commentlens.app.config import reset_config
from commentlens.app.database import DatabaseManager
from commentlens.app.dependencies import reset_dependencies
from commentlens.services import PersistenceService, ProfileStream

MEMORY_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Fresh configuration with dummy keys for every test"""
    monkeypatch.setenv("YOUTUBE_API_KEY", "test-youtube-key")
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("DB_URL", MEMORY_DB_URL)
    monkeypatch.setenv("LOG_FILE_PATH", "")
    monkeypatch.setenv("ANALYSIS_NAVIGATION_DELAY_SECONDS", "0")
    reset_config()
    reset_dependencies()
    yield
    reset_config()
    reset_dependencies()


@pytest_asyncio.fixture
async def database():
    """In-memory database with all tables created"""
    manager = DatabaseManager(url=MEMORY_DB_URL, echo=False)
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def profile_stream():
    return ProfileStream()


@pytest_asyncio.fixture
async def persistence(database, profile_stream):
    return PersistenceService(
        database=database, stream=profile_stream, starting_credits=2
    )
