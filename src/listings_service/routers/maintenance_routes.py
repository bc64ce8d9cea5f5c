# src/listings_service/routers/maintenance_routes.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from listings_service.dependencies.app_deps import get_integrity_checker
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.services.integrity import IntegrityChecker

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get(
    "/image-integrity",
    summary="Check (and optionally repair) image rows against storage",
    responses=error_responses(401, 403, 500),
)
async def image_integrity(
    repair: bool = Query(False, description="Delete orphaned and missing-file rows"),
    missing_main_policy: Optional[Literal["leave", "promote_oldest"]] = Query(
        None, description="Override the configured policy for properties without a main image"
    ),
    checker: IntegrityChecker = Depends(get_integrity_checker),
    current_user: User = Depends(require_admin_user),
):
    if repair:
        report = await checker.repair(missing_main_policy)
    else:
        report = await checker.check()
    return envelope(report.to_dict())
