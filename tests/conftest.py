"""Pytest configuration and fixtures."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Destructive operations and import enabled for all tests - must happen before app import
os.environ["PRODUCTION"] = "false"
os.environ["DISABLE_IMPORT"] = "false"

# Clear the settings cache to pick up the new environment variables
from mjleague.settings import Settings, get_settings  # noqa: E402

get_settings.cache_clear()

from mjleague.db.session import Database  # noqa: E402
from mjleague.main import create_app  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'league.db'}",
        production=False,
        disable_import=False,
    )


@pytest.fixture
async def database(settings: Settings) -> Database:
    """Open a fresh database for one test."""
    db = Database(settings.database_url)
    await db.open()
    yield db
    await db.close()


@pytest.fixture
async def db_session(database: Database):
    """Session on the test database."""
    async with database.session() as session:
        yield session


@pytest.fixture
def app(settings: Settings, database: Database):
    """App wired to the test database (ASGITransport skips the lifespan)."""
    application = create_app(settings)
    application.state.database = database
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
