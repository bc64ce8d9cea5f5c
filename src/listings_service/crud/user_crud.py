# src/listings_service/crud/user_crud.py
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud.property_crud import parse_uuid
from listings_service.models.user import User
from listings_service.security import hash_password

logger = logging.getLogger(__name__)


async def get_user_by_id(db_session: AsyncSession, user_id) -> Optional[User]:
    parsed = parse_uuid(user_id)
    if parsed is None:
        return None
    return await db_session.get(User, parsed)


async def get_user_by_email(db_session: AsyncSession, email: str) -> Optional[User]:
    """Retrieves a user by email, case-insensitively."""
    result = await db_session.execute(
        select(User).filter(func.lower(User.email) == email.strip().lower())
    )
    return result.scalars().first()


async def create_user(
    db_session: AsyncSession,
    email: str,
    password: str,
    name: Optional[str] = None,
    role: str = "editor",
) -> Optional[User]:
    """Creates a user with a bcrypt password hash."""
    try:
        user = User(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        db_session.add(user)
        # The calling function or dependency manager is responsible for the commit.
        await db_session.flush()
        await db_session.refresh(user)
        return user
    except SQLAlchemyError as e:
        logger.error(f"Database error while creating user {email}: {e}", exc_info=True)
        await db_session.rollback()
        return None
