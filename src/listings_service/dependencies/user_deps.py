import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import user_crud
from listings_service.db import get_db
from listings_service.models.user import User
from listings_service.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Dependency returning the claims of a valid bearer token.
    Raises HTTPException 401 if the token is missing, expired or malformed.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        logger.warning("Rejected request with an invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the user a token was issued to.
    Users that were deleted or deactivated since are rejected with 401.
    """
    user = await user_crud.get_user_by_id(db, payload.get("user_id"))
    if user is None or not user.active:
        logger.warning(f"Token presented for unknown or inactive user {payload.get('user_id')}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency to ensure the current user has the admin role.
    Raises HTTPException 403 otherwise.
    """
    if not current_user.is_admin:
        logger.warning(
            f"Admin access denied for user {current_user.email} (role {current_user.role})"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
