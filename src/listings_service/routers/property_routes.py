# src/listings_service/routers/property_routes.py
"""
Router for the property catalog: public listing and detail views, and the
admin operations that create, update, delete and reorder properties.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from listings_service.config import Settings
from listings_service.dependencies.app_deps import (
    get_app_settings,
    get_listing_engine,
    get_property_manager,
)
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.schemas.property_schemas import PropertyReorderRequest
from listings_service.services.listing_query import ListingCriteria, ListingQueryEngine
from listings_service.services.property_service import PropertyManager

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", summary="Search and paginate listings", responses=error_responses(500))
async def list_properties(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Items per page (1-100)"),
    keyword: Optional[str] = Query(None, description="Free-text search"),
    transaction_type: Optional[str] = Query(None, description="sale, rent or all"),
    property_type: Optional[str] = Query(None, description="Catalog type or all"),
    city_region: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    price_min: Optional[str] = Query(None),
    price_max: Optional[str] = Query(None),
    area_min: Optional[str] = Query(None),
    area_max: Optional[str] = Query(None),
    featured: Optional[str] = Query(None, description="true or false"),
    active: Optional[str] = Query(None, description="Defaults to true; all for every listing"),
    engine: ListingQueryEngine = Depends(get_listing_engine),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Filters are parsed leniently: unknown or malformed values are ignored
    rather than rejected, and pages past the end return an empty list.
    """
    params = {
        "page": page,
        "limit": limit,
        "keyword": keyword,
        "transaction_type": transaction_type,
        "property_type": property_type,
        "city_region": city_region,
        "district": district,
        "price_min": price_min,
        "price_max": price_max,
        "area_min": area_min,
        "area_max": area_max,
        "featured": featured,
        "active": active,
    }
    criteria = ListingCriteria.from_params(
        params,
        default_limit=app_settings.DEFAULT_PAGE_LIMIT,
        max_limit=app_settings.MAX_PAGE_LIMIT,
    )
    result = await engine.search(criteria)
    return envelope(result.items, meta=result.meta)


@router.get("/stats", summary="Catalog statistics")
async def property_stats(manager: PropertyManager = Depends(get_property_manager)):
    return envelope(await manager.stats())


@router.get(
    "/{identifier}",
    summary="Get a property by code or id",
    responses=error_responses(400, 404),
)
async def get_property(
    identifier: str,
    manager: PropertyManager = Depends(get_property_manager),
):
    return envelope(await manager.get(identifier))


@router.post(
    "",
    summary="Create a property",
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 409),
)
async def create_property(
    payload: Dict[str, Any] = Body(...),
    manager: PropertyManager = Depends(get_property_manager),
    current_user: User = Depends(require_admin_user),
):
    created = await manager.create(payload)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(created, message="Property created successfully"),
    )


@router.put(
    "/{property_id}",
    summary="Update a property",
    responses=error_responses(400, 401, 403, 404, 409),
)
async def update_property(
    property_id: str,
    payload: Dict[str, Any] = Body(...),
    manager: PropertyManager = Depends(get_property_manager),
    current_user: User = Depends(require_admin_user),
):
    """
    Partial update. Send the last-seen `updated_at` to have the update
    rejected with 409 if someone else changed the property meanwhile.
    """
    updated = await manager.update(property_id, payload)
    return envelope(updated, message="Property updated successfully")


@router.delete(
    "/{property_id}",
    summary="Delete a property with its images and documents",
    responses=error_responses(401, 403, 404),
)
async def delete_property(
    property_id: str,
    manager: PropertyManager = Depends(get_property_manager),
    current_user: User = Depends(require_admin_user),
):
    result = await manager.delete(property_id)
    return envelope(result, message="Property deleted successfully")


@router.patch(
    "",
    summary="Reorder properties",
    responses=error_responses(400, 401, 403, 404),
)
async def reorder_properties(
    request_body: PropertyReorderRequest,
    manager: PropertyManager = Depends(get_property_manager),
    current_user: User = Depends(require_admin_user),
):
    updated = await manager.reorder([item.model_dump() for item in request_body.orders])
    return envelope({"updated": updated}, message="Sort order updated successfully")
