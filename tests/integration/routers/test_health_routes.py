from unittest.mock import AsyncMock

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from listings_service.db import get_db
from listings_service.main import app


@pytest.mark.asyncio
async def test_health_ok(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["environment"] == "testing"
    assert body["version"] == "1.0.0"
    assert body["db_time"].endswith("ms")
    assert "/properties" in body["endpoints"]


@pytest.mark.asyncio
async def test_health_database_down(client: AsyncClient):
    broken_session = AsyncMock()
    broken_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    async def override_get_db():
        yield broken_session

    app.dependency_overrides[get_db] = override_get_db

    response = await client.get("/health")
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    body = response.json()
    assert body["success"] is False
    assert body["database"] == "disconnected"
    assert body["error"] == "Database connection failed"
