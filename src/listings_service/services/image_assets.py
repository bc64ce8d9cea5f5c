"""
Image Asset Manager.

Owns the lifecycle of property image files and their rows: uploads are
validated before anything touches the disk, files written for an upload are
removed again if the row cannot be stored, and every change to the main flag
happens inside a single transaction so a property never ends up with two main
images.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from listings_service.config import Settings
from listings_service.crud import image_crud, property_crud
from listings_service.exceptions import (
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    PersistenceError,
    UnsupportedMediaTypeError,
)
from listings_service.logging_config import logger
from listings_service.models.property import Property
from listings_service.schemas.image_schemas import ImageDeleteResult, ImageUpdate
from listings_service.services.presenters import format_image
from listings_service.utils.image_processing import (
    InvalidImageError,
    create_thumbnail,
    inspect_image,
    optimize_image,
)
from listings_service.utils.storage import UploadStorage


def _megabytes(size: int) -> str:
    return f"{size // (1024 * 1024)}MB"


class ImageAssetManager:
    def __init__(self, session: AsyncSession, storage: UploadStorage, settings: Settings):
        self.session = session
        self.storage = storage
        self.settings = settings

    async def _require_property(self, property_id: Any) -> Property:
        prop = await property_crud.find_property(self.session, property_id)
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    async def list_images(self, property_id: Any) -> List[Dict[str, Any]]:
        prop = await self._require_property(property_id)
        images = await image_crud.list_images(self.session, prop.id)
        return [format_image(image, self.storage) for image in images]

    def _validate_payload(self, data: bytes, declared_type: Optional[str]) -> Any:
        if not data:
            raise BadRequestError("Uploaded file is empty")
        if len(data) > self.settings.MAX_IMAGE_SIZE:
            raise PayloadTooLargeError(
                f"File too large. Maximum size is {_megabytes(self.settings.MAX_IMAGE_SIZE)}"
            )
        allowed = self.settings.ALLOWED_IMAGE_TYPES
        if declared_type and declared_type.lower() not in allowed:
            raise UnsupportedMediaTypeError(
                f"Invalid file type. Allowed types: {', '.join(allowed)}"
            )
        try:
            info = inspect_image(data)
        except InvalidImageError as e:
            logger.info(f"Rejected upload that is not a valid image: {e}")
            raise BadRequestError("Invalid image file") from e
        if info.mime_type not in allowed:
            raise UnsupportedMediaTypeError(
                f"Invalid file type. Allowed types: {', '.join(allowed)}"
            )
        return info

    def _write_files(self, rel_path: str, thumb_path: str, data: bytes) -> Optional[str]:
        """Write the image, then optimize it and make a thumbnail (best-effort)."""
        absolute = self.storage.write(rel_path, data)
        optimize_image(absolute, quality=self.settings.IMAGE_QUALITY)
        thumb_created = create_thumbnail(
            absolute,
            self.storage.absolute(thumb_path),
            size=self.settings.THUMBNAIL_SIZE,
            quality=self.settings.THUMBNAIL_QUALITY,
        )
        return thumb_path if thumb_created else None

    def _cleanup(self, paths: List[Optional[str]]) -> None:
        for path in paths:
            if self.storage.remove(path) is False:
                logger.error(f"Rollback could not remove uploaded file {path}")

    async def upload(
        self,
        property_id: Optional[str],
        data: Optional[bytes],
        declared_type: Optional[str] = None,
        alt_text: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_main: bool = False,
    ) -> Dict[str, Any]:
        """
        Store a new image for a property.

        All validation happens before the first filesystem mutation. If the
        row cannot be inserted, every file written for this upload is removed
        again before the error is raised.
        """
        if not property_id or not str(property_id).strip():
            raise BadRequestError("Property ID is required")
        if data is None:
            raise BadRequestError("No image file uploaded")

        prop = await property_crud.find_property(self.session, property_id)
        if prop is None:
            raise BadRequestError("Property not found")

        info = self._validate_payload(data, declared_type)

        existing = await image_crud.count_images(self.session, prop.id)
        if existing >= self.settings.MAX_IMAGES_PER_PROPERTY:
            raise BadRequestError(
                f"Maximum {self.settings.MAX_IMAGES_PER_PROPERTY} images per property allowed"
            )

        folder = self.storage.property_dir(prop.storage_folder)
        self.storage.ensure_directory(folder)
        rel_path = f"{folder}/{self.storage.generate_filename(info.extension)}"
        thumb_path = self.storage.thumbnail_name(rel_path)
        created: List[Optional[str]] = [rel_path, thumb_path]

        try:
            stored_thumb = await run_in_threadpool(self._write_files, rel_path, thumb_path, data)

            make_main = existing == 0 or bool(is_main)
            if make_main:
                await image_crud.clear_main_flags(self.session, prop.id)
            if sort_order is None:
                sort_order = await image_crud.get_next_sort_order(self.session, prop.id)

            image = await image_crud.insert_image(
                self.session,
                {
                    "property_id": prop.id,
                    "image_path": rel_path,
                    "thumbnail_path": stored_thumb,
                    "alt_text": alt_text,
                    "sort_order": sort_order,
                    "is_main": make_main,
                    "file_size": self.storage.size(rel_path) or len(data),
                    "mime_type": info.mime_type,
                },
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            self._cleanup(created)
            logger.error(
                f"Failed to save image record for property {prop.id}, uploaded files removed: {e}",
                exc_info=True,
            )
            raise PersistenceError(
                f"Failed to save image record: {e}",
                public_message="Failed to save image record",
            ) from e
        except Exception:
            await self.session.rollback()
            self._cleanup(created)
            raise

        logger.info(
            f"Uploaded image {image.id} for property {prop.id} "
            f"({image.file_size} bytes, main={image.is_main})"
        )
        return format_image(image, self.storage)

    async def set_main(self, property_id: Optional[str], image_id: Optional[str]) -> List[Dict[str, Any]]:
        """Make one image the main image of its property. Idempotent."""
        if not property_id or not image_id:
            raise BadRequestError("Property ID and image ID are required")

        image = await image_crud.get_image(self.session, image_id)
        if image is None:
            raise NotFoundError("Image not found")
        prop = await self._require_property(property_id)
        if image.property_id != prop.id:
            raise BadRequestError("Image does not belong to the specified property")

        try:
            await image_crud.clear_main_flags(self.session, prop.id)
            await image_crud.set_main_flag(self.session, image.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to set main image {image_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to set main image {image_id}: {e}") from e

        logger.info(f"Image {image.id} is now the main image of property {prop.id}")
        images = await image_crud.list_images(self.session, prop.id)
        return [format_image(img, self.storage) for img in images]

    async def update_image(
        self,
        image_id: str,
        changes: ImageUpdate,
        property_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        image = await image_crud.get_image(self.session, image_id)
        if image is None:
            raise NotFoundError("Image not found")
        if property_id is not None:
            prop = await self._require_property(property_id)
            if image.property_id != prop.id:
                raise BadRequestError("Image does not belong to the specified property")

        fields = changes.model_dump(exclude_unset=True)
        if fields.get("is_main") is False and image.is_main:
            raise BadRequestError(
                "Cannot unset the main image; set another image as main instead"
            )
        if "alt_text" in fields:
            image.alt_text = fields["alt_text"]
        if fields.get("sort_order") is not None:
            image.sort_order = fields["sort_order"]

        try:
            await self.session.flush()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to update image {image_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update image {image_id}: {e}") from e

        if fields.get("is_main") is True and not image.is_main:
            await self.set_main(str(image.property_id), str(image.id))

        refreshed = await image_crud.get_image(self.session, image.id)
        await self.session.refresh(refreshed)
        return format_image(refreshed, self.storage)

    async def delete(self, image_id: str, property_id: Optional[str] = None) -> ImageDeleteResult:
        """
        Delete the row first (promoting another image if this one was main),
        then remove its files. File removal failures are logged only.
        """
        image = await image_crud.get_image(self.session, image_id)
        if image is None:
            raise NotFoundError("Image not found")
        if property_id is not None:
            prop = await self._require_property(property_id)
            if image.property_id != prop.id:
                raise BadRequestError("Image does not belong to the specified property")

        paths = [image.image_path, image.thumbnail_path]
        owner_id = image.property_id
        was_main = bool(image.is_main)

        try:
            await image_crud.delete_image_rows(self.session, [image.id])
            if was_main:
                promoted = await image_crud.promote_first_image(self.session, owner_id)
                if promoted is not None:
                    logger.info(f"Promoted image {promoted.id} to main for property {owner_id}")
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete image {image_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete image {image_id}: {e}") from e

        deleted = failed = 0
        for path in paths:
            outcome = self.storage.remove(path)
            if outcome is True:
                deleted += 1
            elif outcome is False:
                failed += 1
                logger.warning(f"Image {image_id} row deleted but file {path} remains")
        logger.info(f"Deleted image {image_id}: {deleted} file(s) removed, {failed} failed")
        return ImageDeleteResult(deleted_files=deleted, failed_files=failed)
