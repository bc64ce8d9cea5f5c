"""
JSON shapes for properties, images and documents as returned to clients.
"""

from typing import Any, Dict, List, Optional, Sequence

from listings_service.config import Settings
from listings_service.models.base import as_utc
from listings_service.models.property import Property
from listings_service.models.property_document import PropertyDocument
from listings_service.models.property_image import PropertyImage
from listings_service.schemas.property_schemas import PropertyResponse
from listings_service.utils.storage import UploadStorage


def format_image(image: PropertyImage, storage: UploadStorage) -> Dict[str, Any]:
    url = storage.public_url(image.image_path)
    thumbnail_url = (
        storage.public_url(image.thumbnail_path)
        if storage.exists(image.thumbnail_path)
        else url
    )
    return {
        "id": str(image.id),
        "property_id": str(image.property_id),
        "url": url,
        "thumbnail_url": thumbnail_url,
        "path": image.image_path,
        "alt_text": image.alt_text,
        "sort_order": image.sort_order,
        "is_main": bool(image.is_main),
        "file_size": image.file_size,
        "mime_type": image.mime_type,
        "created_at": as_utc(image.created_at).isoformat() if image.created_at else None,
    }


def format_document(document: PropertyDocument, settings: Settings) -> Dict[str, Any]:
    return {
        "id": str(document.id),
        "filename": document.original_filename,
        "size": document.file_size,
        "mime_type": document.mime_type,
        "url": f"{settings.ROOT_PATH.rstrip('/')}/documents/serve/{document.id}",
        "created_at": as_utc(document.created_at).isoformat() if document.created_at else None,
    }


def main_image_url(
    images: Sequence[PropertyImage], storage: UploadStorage, settings: Settings
) -> str:
    """URL of the main image, or the placeholder when it has no record or no file."""
    main: Optional[PropertyImage] = next((img for img in images if img.is_main), None)
    if main is None and images:
        main = images[0]
    if main is not None and storage.exists(main.image_path):
        return storage.public_url(main.image_path)
    return storage.absolute_url(settings.PLACEHOLDER_IMAGE_URL)


def format_property(
    prop: Property,
    images: Sequence[PropertyImage],
    storage: UploadStorage,
    settings: Settings,
    documents: Optional[List[PropertyDocument]] = None,
) -> Dict[str, Any]:
    data = PropertyResponse.model_validate(prop).model_dump(mode="json")
    formatted_images = [format_image(image, storage) for image in images]
    data["images"] = formatted_images
    data["main_image_url"] = main_image_url(images, storage, settings)
    data["gallery"] = [image["url"] for image in formatted_images]
    if documents is not None:
        data["documents"] = [format_document(doc, settings) for doc in documents]
    return data
