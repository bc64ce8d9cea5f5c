from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from listings_service.config import settings
from listings_service.logging_config import logger

DATABASE_URL = settings.DATABASE_URL


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pool and driver options for the configured database URL."""
    options: Dict[str, Any] = {
        # Log SQL statements in DEBUG mode only.
        "echo": settings.LOGGING_LEVEL.upper() == "DEBUG",
        "pool_pre_ping": True,
    }
    if make_url(database_url).get_backend_name() == "sqlite":
        # SQLite has no server-side pool to tune
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        # Seconds a request waits for a pooled connection before giving up.
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={
            "application_name": "listings_service",
            "options": "-c timezone=UTC",
        },
    )
    return options


engine: AsyncEngine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

# All SQLAlchemy models inherit from this Base.
Base = declarative_base()


async def init_models() -> None:
    """Create any missing tables for the registered models."""
    import listings_service.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a transactional, auto-closing database session.

    The session is committed when the route handler finishes, rolled back on
    any database error, and always closed.
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database transaction failed: {e}", exc_info=True)
        await session.rollback()
        raise
    finally:
        await session.close()
