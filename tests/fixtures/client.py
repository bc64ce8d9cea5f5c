"""
Client fixtures for testing.
Provides HTTP clients and dependency overrides for FastAPI application testing.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import Settings, settings
from listings_service.db import get_db
from listings_service.dependencies.app_deps import get_app_settings, get_storage
from listings_service.main import app as fastapi_app
from listings_service.utils.storage import UploadStorage

# Ensure the root_path is set to empty string for tests
fastapi_app.root_path = ""


@pytest.fixture
def test_settings() -> Settings:
    """A per-test copy of the settings that tests may adjust freely."""
    return settings.model_copy()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, storage: UploadStorage, test_settings: Settings
) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an HTTP client for making requests to the FastAPI app.
    It overrides the `get_db` dependency to use the isolated test database session,
    the storage dependency to use the per-test upload directory, and the
    settings dependency to use `test_settings`.
    """

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    fastapi_app.dependency_overrides[get_app_settings] = lambda: test_settings

    transport = ASGITransport(app=fastapi_app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        fastapi_app.dependency_overrides.clear()
