import pytest
from fastapi import status
from httpx import AsyncClient

from listings_service.crud import user_crud
from tests.fixtures.helpers import bearer


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, admin_user):
    response = await client.post(
        "/auth/login", json={"email": "Admin@Example.com", "password": "admin-password"}
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "admin@example.com"
    assert data["user"]["role"] == "admin"
    assert "password_hash" not in data["user"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["data"]["id"] == str(admin_user.id)


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, admin_user):
    response = await client.post(
        "/auth/login", json={"email": "admin@example.com", "password": "nope"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient):
    response = await client.post(
        "/auth/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_login_missing_fields(client: AsyncClient):
    response = await client.post("/auth/login", json={"email": "admin@example.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Email and password are required"


@pytest.mark.asyncio
async def test_inactive_user_cannot_log_in(client: AsyncClient, db_session):
    user = await user_crud.create_user(db_session, "old@example.com", "old-password", role="admin")
    user.active = False
    await db_session.commit()

    response = await client.post(
        "/auth/login", json={"email": "old@example.com", "password": "old-password"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_token_of_inactive_user_is_rejected(client: AsyncClient, db_session):
    user = await user_crud.create_user(db_session, "gone@example.com", "pw-123456", role="admin")
    await db_session.commit()
    headers = bearer(user)
    user.active = False
    await db_session.commit()

    response = await client.post("/properties", json={}, headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client: AsyncClient):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_me_for_deleted_user(client: AsyncClient, db_session):
    user = await user_crud.create_user(db_session, "temp@example.com", "pw-123456")
    await db_session.commit()
    headers = bearer(user)
    await db_session.delete(user)
    await db_session.commit()

    response = await client.get("/auth/me", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_logout(client: AsyncClient):
    response = await client.post("/auth/logout")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True
