"""
Health check endpoint for monitoring service status.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import settings
from listings_service.db import get_db
from listings_service.logging_config import logger

router = APIRouter(tags=["Health"])

SERVICE_VERSION = "1.0.0"

# Track app startup time for uptime monitoring
start_time = time.time()

PUBLIC_ENDPOINTS = [
    "/properties",
    "/properties/stats",
    "/images/property/{property_id}",
    "/documents/serve/{document_id}",
    "/pages",
    "/sections",
    "/services",
    "/auth/login",
]


@router.get("/health", summary="Service and database health")
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Runs a trivial query against the database.
    Returns 200 when it answers and 503 otherwise.
    """
    now = datetime.now(timezone.utc)
    body = {
        "success": True,
        "status": "ok",
        "database": "connected",
        "version": SERVICE_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": now.isoformat(),
        "uptime_seconds": round(time.time() - start_time, 2),
        "endpoints": PUBLIC_ENDPOINTS,
    }
    try:
        query_start = time.time()
        await db.execute(text("SELECT 1"))
        body["db_time"] = f"{round((time.time() - query_start) * 1000, 2)}ms"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        body.update(
            success=False,
            status="error",
            database="disconnected",
            error="Database connection failed",
        )
        return JSONResponse(status_code=503, content=body)
    return JSONResponse(status_code=200, content=body)
