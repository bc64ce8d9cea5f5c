import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from listings_service.bootstrap import bootstrap_admin
from listings_service.config import settings
from listings_service.db import AsyncSessionLocal, init_models
from listings_service.exceptions import ListingsServiceError
from listings_service.logging_config import LoggingMiddleware, logger, setup_logging
from listings_service.rate_limiting import setup_rate_limiting
from listings_service.routers import (
    auth_routes,
    document_routes,
    health_routes,
    image_routes,
    maintenance_routes,
    page_routes,
    property_routes,
    section_routes,
    service_routes,
)
from listings_service.schemas.common import error_body
from listings_service.utils.storage import UploadStorage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: schema check, storage root and admin bootstrap."""
    logger.info("Application startup sequence initiated.")

    if not settings.is_production():
        try:
            await init_models()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")

    storage = UploadStorage.from_settings(settings)
    storage.root.mkdir(parents=True, exist_ok=True)
    logger.info(f"Serving uploads from {storage.root}")

    async with AsyncSessionLocal() as session:
        if await bootstrap_admin(session, settings):
            logger.info("Bootstrap process successful, application ready to serve requests")
        else:
            logger.warning(
                "Bootstrap process did not complete successfully. "
                "The application will start but may have limited functionality."
            )

    logger.info("Application startup complete.")
    yield
    logger.info("Application shutdown complete.")


app = FastAPI(
    title="Listings Service API",
    description="Real-estate listings catalog with image and document management and a content back office.",
    version=health_routes.SERVICE_VERSION,
    root_path=settings.ROOT_PATH,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Properties", "description": "Listing search, detail views and admin CRUD."},
        {"name": "Images", "description": "Property image upload, ordering and main-image selection."},
        {"name": "Documents", "description": "PDF documents attached to properties."},
        {"name": "Authentication", "description": "Back-office login."},
        {"name": "Pages", "description": "Content-managed pages."},
        {"name": "Sections", "description": "Page sections."},
        {"name": "Services", "description": "Services list."},
        {"name": "Maintenance", "description": "Image integrity checks."},
        {"name": "Health", "description": "Service health."},
    ],
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True},
)

app.startup_time = time.time()

# Add logging middleware first so the request id middleware wraps it
app.add_middleware(LoggingMiddleware)

# Setup logging configuration
setup_logging(app)

# Setup rate limiting
setup_rate_limiting(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(health_routes.router)
app.include_router(auth_routes.router)
app.include_router(property_routes.router)
app.include_router(image_routes.router)
app.include_router(document_routes.router)
app.include_router(page_routes.router)
app.include_router(section_routes.router)
app.include_router(service_routes.router)
app.include_router(maintenance_routes.router)

app.mount(
    settings.UPLOADS_PUBLIC_BASE,
    StaticFiles(directory=settings.UPLOADS_FS_BASE, check_dir=False),
    name="uploads",
)


# Exception handlers
@app.exception_handler(ListingsServiceError)
async def service_error_handler(request: Request, exc: ListingsServiceError):
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message}")
    else:
        logger.info(f"{exc.__class__.__name__} ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.client_message, **exc.extra),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.info(f"HTTPException ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info(f"ValidationError: {errors}")
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Field '{location}': {errors[0].get('msg')}" if location else errors[0].get("msg")
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]
    return JSONResponse(status_code=400, content=error_body(message, details=details))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Unhandled database error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Server error"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    content = error_body("Server error")
    if settings.DEBUG and not settings.is_production():
        content["detail"] = f"{exc.__class__.__name__}: {exc}"
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    uvicorn.run("listings_service.main:app", host="0.0.0.0", port=8000, reload=settings.is_development())
