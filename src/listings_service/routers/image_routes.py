# src/listings_service/routers/image_routes.py
"""
Router for property images: upload, listing, metadata updates, main-image
selection and deletion. Paths under /properties/{property_id}/images are
aliases that carry the owning property in the URL.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse

from listings_service.dependencies.app_deps import get_image_manager
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.logging_config import logger
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.schemas.image_schemas import ImageUpdate, SetMainImageRequest
from listings_service.services.image_assets import ImageAssetManager

router = APIRouter(tags=["Images"])

TRUE_FORM_VALUES = ("true", "1", "yes", "on")


def _form_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUE_FORM_VALUES


def _form_int(value: Optional[str], field: str) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        number = int(value.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field}")
    if number < 0:
        raise HTTPException(status_code=400, detail=f"Invalid {field}")
    return number


@router.post(
    "/images/upload",
    summary="Upload an image for a property",
    status_code=status.HTTP_201_CREATED,
    responses={
        **error_responses(400, 401, 403, 500),
        413: {"description": "File too large"},
        415: {"description": "Unsupported file type"},
    },
)
@router.post("/images", include_in_schema=False, status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    property_id: Optional[str] = Form(None),
    sort_order: Optional[str] = Form(None),
    is_main: Optional[str] = Form(None),
    alt_text: Optional[str] = Form(None),
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise HTTPException(status_code=400, detail="Content-Type must be multipart/form-data")

    data = None
    declared_type = None
    if image is not None:
        data = await image.read()
        declared_type = image.content_type
        logger.info(
            f"Image upload received: {image.filename} ({len(data)} bytes, {declared_type}) "
            f"for property {property_id}"
        )

    created = await manager.upload(
        property_id,
        data,
        declared_type=declared_type,
        alt_text=alt_text.strip() if alt_text and alt_text.strip() else None,
        sort_order=_form_int(sort_order, "sort_order"),
        is_main=_form_flag(is_main),
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(created, message="Image uploaded successfully"),
    )


@router.get(
    "/images/property/{property_id}",
    summary="List the images of a property",
    responses=error_responses(404),
)
async def list_property_images(
    property_id: str,
    manager: ImageAssetManager = Depends(get_image_manager),
):
    return envelope(await manager.list_images(property_id))


@router.post(
    "/images/set-main",
    summary="Set the main image of a property",
    responses=error_responses(400, 401, 403, 404),
)
async def set_main_image(
    request_body: SetMainImageRequest,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    images = await manager.set_main(request_body.property_id, request_body.image_id)
    return envelope(images, message="Main image updated successfully")


@router.put(
    "/properties/{property_id}/images/{image_id}/main",
    summary="Set the main image of a property",
    responses=error_responses(400, 401, 403, 404),
)
@router.patch(
    "/properties/{property_id}/images/{image_id}/main",
    include_in_schema=False,
)
async def set_main_image_by_path(
    property_id: str,
    image_id: str,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    images = await manager.set_main(property_id, image_id)
    return envelope(images, message="Main image updated successfully")


@router.put(
    "/images/{image_id}",
    summary="Update image metadata",
    responses=error_responses(400, 401, 403, 404),
)
async def update_image(
    image_id: str,
    changes: ImageUpdate,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    updated = await manager.update_image(image_id, changes)
    return envelope(updated, message="Image updated successfully")


@router.put(
    "/properties/{property_id}/images/{image_id}",
    include_in_schema=False,
)
async def update_property_image(
    property_id: str,
    image_id: str,
    changes: ImageUpdate,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    updated = await manager.update_image(image_id, changes, property_id=property_id)
    return envelope(updated, message="Image updated successfully")


@router.delete(
    "/images/{image_id}",
    summary="Delete an image and its files",
    responses=error_responses(401, 403, 404),
)
async def delete_image(
    image_id: str,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    result = await manager.delete(image_id)
    return envelope(result.model_dump(), message="Image deleted successfully")


@router.delete(
    "/properties/{property_id}/images/{image_id}",
    include_in_schema=False,
)
async def delete_property_image(
    property_id: str,
    image_id: str,
    manager: ImageAssetManager = Depends(get_image_manager),
    current_user: User = Depends(require_admin_user),
):
    result = await manager.delete(image_id, property_id=property_id)
    return envelope(result.model_dump(), message="Image deleted successfully")
