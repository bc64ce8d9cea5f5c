"""
Login and identity endpoints for back-office users.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import user_crud
from listings_service.db import get_db
from listings_service.dependencies.user_deps import get_token_payload
from listings_service.rate_limiting import LOGIN_LIMIT, limiter
from listings_service.schemas.auth_schemas import LoginRequest, LoginResult, UserResponse
from listings_service.schemas.common import envelope, error_responses
from listings_service.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    summary="Exchange email and password for a bearer token",
    responses=error_responses(400, 401),
)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    if not credentials.email or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    user = await user_crud.get_user_by_email(db, credentials.email)
    if user is None or not user.active or not verify_password(
        credentials.password, user.password_hash
    ):
        logger.info(f"Failed login attempt for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(str(user.id), user.email, user.role)
    logger.info(f"User {user.email} logged in")
    result = LoginResult(token=token, user=UserResponse.model_validate(user))
    return envelope(result.model_dump(mode="json"))


@router.get("/me", summary="Current user", responses=error_responses(401, 404))
async def me(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
):
    user = await user_crud.get_user_by_id(db, payload.get("user_id"))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return envelope(UserResponse.model_validate(user).model_dump(mode="json"))


@router.post("/logout", summary="Log out (tokens are stateless)")
async def logout():
    return envelope(message="Logged out successfully")
