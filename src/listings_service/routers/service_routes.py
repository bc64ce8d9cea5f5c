# src/listings_service/routers/service_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import content_crud
from listings_service.db import get_db
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.content import Service
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.schemas.content_schemas import (
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])


def _service_data(service: Service) -> dict:
    return ServiceResponse.model_validate(service).model_dump(mode="json")


async def _get_service_or_404(db: AsyncSession, service_id: str) -> Service:
    service = await content_crud.get_by_id(db, Service, service_id)
    if service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return service


@router.get("", summary="List services")
async def list_services(
    all: bool = Query(False, description="Include inactive services"),
    db: AsyncSession = Depends(get_db),
):
    services = await content_crud.list_services(db, include_inactive=all)
    return envelope([_service_data(service) for service in services])


@router.get("/{service_id}", summary="Get a service", responses=error_responses(404))
async def get_service(service_id: str, db: AsyncSession = Depends(get_db)):
    return envelope(_service_data(await _get_service_or_404(db, service_id)))


@router.post(
    "",
    summary="Create a service",
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403),
)
async def create_service(
    service_in: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    service = await content_crud.create_item(db, Service, service_in.model_dump())
    await db.commit()
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(_service_data(service), message="Service created successfully"),
    )


@router.put("/{service_id}", summary="Update a service", responses=error_responses(400, 401, 403, 404))
async def update_service(
    service_id: str,
    service_in: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    service = await _get_service_or_404(db, service_id)
    service = await content_crud.update_item(db, service, service_in.model_dump(exclude_unset=True))
    await db.commit()
    return envelope(_service_data(service), message="Service updated successfully")


@router.delete("/{service_id}", summary="Delete a service", responses=error_responses(401, 403, 404))
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    service = await _get_service_or_404(db, service_id)
    await content_crud.delete_item(db, service)
    await db.commit()
    logger.info(f"Deleted service {service_id}")
    return envelope(message="Service deleted successfully")
