import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import Settings
from listings_service.crud import user_crud

logger = logging.getLogger(__name__)


async def bootstrap_admin(db: AsyncSession, app_settings: Settings) -> bool:
    """
    Create the initial admin account if no user with its email exists yet.

    Returns True when the admin exists afterwards (created now or earlier).
    """
    email = app_settings.INITIAL_ADMIN_EMAIL.strip().lower()
    if not email or not app_settings.INITIAL_ADMIN_PASSWORD:
        logger.warning("Initial admin credentials not configured, skipping admin bootstrap")
        return False

    try:
        existing = await user_crud.get_user_by_email(db, email)
        if existing:
            logger.info(f"Initial admin '{email}' already exists")
            return True

        user = await user_crud.create_user(
            db,
            email=email,
            password=app_settings.INITIAL_ADMIN_PASSWORD,
            name=app_settings.INITIAL_ADMIN_NAME,
            role="admin",
        )
        if user is None:
            return False
        await db.commit()
        logger.info(f"Created initial admin user '{email}'")
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Admin bootstrap failed: {e}", exc_info=True)
        return False
