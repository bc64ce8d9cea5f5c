"""
Property catalog operations: lookup, create, update with optimistic locking,
delete with asset cleanup, and reordering.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import Settings
from listings_service.crud import document_crud, image_crud, property_crud
from listings_service.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from listings_service.logging_config import logger
from listings_service.models.base import as_utc, utcnow
from listings_service.models.property import Property
from listings_service.schemas.property_schemas import (
    NON_NULLABLE_UPDATE_FIELDS,
    PropertyCreate,
    PropertyUpdate,
)
from listings_service.services.presenters import format_property
from listings_service.utils.property_rules import sanitize_property_data
from listings_service.utils.storage import PROPERTIES_DIR, UploadStorage

INVALID_IDENTIFIERS = ("", "undefined", "null")


def validation_message(error: ValidationError) -> str:
    """First readable message of a pydantic error, prefixed by its field."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    return f"Field '{field}': {message}" if field else message


class PropertyManager:
    def __init__(self, session: AsyncSession, storage: UploadStorage, settings: Settings):
        self.session = session
        self.storage = storage
        self.settings = settings

    async def _require(self, property_id: Any) -> Property:
        prop = await property_crud.get_property_by_id(self.session, property_id)
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    async def get(self, identifier: Optional[str]) -> Dict[str, Any]:
        """Fetch one property by code or id, with images and documents."""
        if identifier is None or identifier.strip().lower() in INVALID_IDENTIFIERS:
            raise BadRequestError("Missing or invalid property identifier")

        try:
            prop = await property_crud.find_property(self.session, identifier)
            if prop is None:
                raise NotFoundError("Property not found")
            images = await image_crud.list_images(self.session, prop.id)
            documents = await document_crud.list_documents(self.session, prop.id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load property {identifier}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load property {identifier}: {e}") from e
        return format_property(prop, images, self.storage, self.settings, documents)

    async def _next_property_code(self) -> str:
        numbers = await property_crud.get_prop_code_numbers(self.session)
        properties_root = self.storage.absolute(PROPERTIES_DIR)
        if properties_root.is_dir():
            for entry in properties_root.iterdir():
                match = property_crud.PROPERTY_CODE_RE.match(entry.name)
                if entry.is_dir() and match:
                    numbers.append(int(match.group(1)))
        next_number = max(numbers, default=0) + 1
        return f"prop-{next_number:03d}"

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = sanitize_property_data(payload)
        try:
            validated = PropertyCreate.model_validate(data)
        except ValidationError as e:
            raise BadRequestError(validation_message(e)) from e

        values = validated.model_dump(mode="json")
        values["price"] = validated.price
        values["area"] = validated.area

        if values.get("property_code"):
            existing = await property_crud.get_property_by_code(
                self.session, values["property_code"]
            )
            if existing is not None:
                raise ConflictError("Property code already exists")
        else:
            values["property_code"] = await self._next_property_code()

        if values.get("sort_order") is None:
            values["sort_order"] = await property_crud.get_max_sort_order(self.session) + 1

        try:
            prop = await property_crud.create_property(self.session, values)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Property insert rejected: {e}")
            raise ConflictError("Property code already exists") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to create property: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create property: {e}") from e

        try:
            self.storage.ensure_directory(self.storage.property_dir(prop.storage_folder))
        except StorageError as e:
            # Uploads create the folder again on demand
            logger.warning(f"Could not create storage folder for {prop.id}: {e}")
        logger.info(f"Created property {prop.property_code} ({prop.id})")
        return format_property(prop, [], self.storage, self.settings)

    def _check_not_stale(self, prop: Property, seen: Optional[datetime]) -> None:
        if seen is None:
            return
        current = as_utc(prop.updated_at)
        drift = abs((current - as_utc(seen)).total_seconds())
        if drift > self.settings.OPTIMISTIC_LOCK_TOLERANCE_SECONDS:
            logger.info(
                f"Optimistic lock conflict on property {prop.id}: "
                f"seen {seen.isoformat()}, current {current.isoformat()}"
            )
            raise ConflictError(
                "Property has been modified by another user. Please refresh and try again.",
                extra={"current_updated_at": current.isoformat()},
            )

    async def update(self, property_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        prop = await self._require(property_id)

        data = dict(payload)
        if not data.get("property_type"):
            data["property_type"] = prop.property_type
        data = sanitize_property_data(data)
        if "property_type" not in payload:
            data.pop("property_type", None)

        try:
            validated = PropertyUpdate.model_validate(data)
        except ValidationError as e:
            raise BadRequestError(validation_message(e)) from e

        self._check_not_stale(prop, validated.updated_at)

        changes = validated.model_dump(exclude_unset=True, mode="json")
        changes.pop("updated_at", None)
        for key in ("price", "area"):
            if changes.get(key) is not None:
                changes[key] = getattr(validated, key)
        for key in NON_NULLABLE_UPDATE_FIELDS:
            if key in changes and changes[key] is None:
                raise BadRequestError(f"Field '{key}' cannot be null")

        if changes.get("property_code") and changes["property_code"] != prop.property_code:
            existing = await property_crud.get_property_by_code(
                self.session, changes["property_code"]
            )
            if existing is not None and existing.id != prop.id:
                raise ConflictError("Property code already exists")

        for key, value in changes.items():
            setattr(prop, key, value)
        prop.updated_at = utcnow()

        try:
            await self.session.flush()
            await self.session.refresh(prop)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Property code already exists") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to update property {prop.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update property {property_id}: {e}") from e

        images = await image_crud.list_images(self.session, prop.id)
        return format_property(prop, images, self.storage, self.settings)

    async def delete(self, property_id: Any) -> Dict[str, int]:
        """
        Delete the property with its image and document rows in one
        transaction, then remove the stored files best-effort.
        """
        prop = await self._require(property_id)
        images = await image_crud.list_images(self.session, prop.id)
        documents = await document_crud.list_documents(self.session, prop.id)
        paths = [image.image_path for image in images]
        paths += [image.thumbnail_path for image in images if image.thumbnail_path]
        paths += [document.file_path for document in documents]

        try:
            await image_crud.delete_image_rows(self.session, [image.id for image in images])
            await document_crud.delete_documents_for_property(self.session, prop.id)
            await property_crud.delete_property_row(self.session, prop.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete property {prop.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete property {property_id}: {e}") from e

        deleted = failed = 0
        for path in paths:
            outcome = self.storage.remove(path)
            if outcome is True:
                deleted += 1
            elif outcome is False:
                failed += 1
        if failed:
            logger.warning(f"Property {prop.id} deleted but {failed} file(s) could not be removed")
        logger.info(f"Deleted property {prop.id} ({deleted} file(s) removed)")
        return {"deleted_files": deleted, "failed_files": failed}

    async def reorder(self, orders: List[Dict[str, Any]]) -> int:
        try:
            missing = await property_crud.update_sort_orders(self.session, orders)
            if missing:
                await self.session.rollback()
                raise NotFoundError(f"Property not found: {', '.join(missing)}")
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to reorder properties: {e}", exc_info=True)
            raise PersistenceError(f"Failed to reorder properties: {e}") from e
        return len(orders)

    async def stats(self) -> Dict[str, Any]:
        try:
            return await property_crud.get_property_stats(self.session)
        except SQLAlchemyError as e:
            logger.error(f"Failed to compute property stats: {e}", exc_info=True)
            raise PersistenceError(f"Failed to compute property stats: {e}") from e
