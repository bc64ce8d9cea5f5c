from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import Settings, settings
from listings_service.db import get_db
from listings_service.services.document_assets import DocumentManager
from listings_service.services.image_assets import ImageAssetManager
from listings_service.services.integrity import IntegrityChecker
from listings_service.services.listing_query import ListingQueryEngine
from listings_service.services.property_service import PropertyManager
from listings_service.utils.storage import UploadStorage


def get_app_settings() -> Settings:
    """
    Returns the application settings, resolved once at import time.
    """
    return settings


@lru_cache()
def get_storage() -> UploadStorage:
    return UploadStorage.from_settings(settings)


def get_listing_engine(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
) -> ListingQueryEngine:
    return ListingQueryEngine(db, storage, app_settings)


def get_property_manager(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
) -> PropertyManager:
    return PropertyManager(db, storage, app_settings)


def get_image_manager(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
) -> ImageAssetManager:
    return ImageAssetManager(db, storage, app_settings)


def get_document_manager(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
) -> DocumentManager:
    return DocumentManager(db, storage, app_settings)


def get_integrity_checker(
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
) -> IntegrityChecker:
    return IntegrityChecker(db, storage, app_settings.MISSING_MAIN_POLICY)
