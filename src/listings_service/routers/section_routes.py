# src/listings_service/routers/section_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import content_crud
from listings_service.db import get_db
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.content import Page, Section
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.schemas.content_schemas import (
    SectionCreate,
    SectionResponse,
    SectionSortRequest,
    SectionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sections", tags=["Sections"])


def _section_data(section: Section, page_title: Optional[str]) -> dict:
    data = SectionResponse.model_validate(section).model_dump(mode="json")
    data["page_title"] = page_title
    return data


async def _get_section_or_404(db: AsyncSession, section_id: str) -> Section:
    section = await content_crud.get_by_id(db, Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    return section


async def _check_page(db: AsyncSession, page_id) -> None:
    if page_id is not None and await content_crud.get_by_id(db, Page, page_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Page not found")


@router.get("", summary="List sections")
async def list_sections(
    all: bool = Query(False, description="Include inactive sections"),
    type: Optional[str] = Query(None, description="Only sections of this type"),
    page_id: Optional[str] = Query(None, description="Only sections of this page"),
    db: AsyncSession = Depends(get_db),
):
    rows = await content_crud.list_sections(
        db, page_id=page_id, section_type=type, include_inactive=all
    )
    return envelope([_section_data(section, title) for section, title in rows])


@router.post(
    "/sort-order",
    summary="Reorder sections",
    responses=error_responses(400, 401, 403, 404),
)
async def sort_sections(
    request_body: SectionSortRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    missing = await content_crud.update_section_orders(
        db, [item.model_dump() for item in request_body.sections]
    )
    if missing:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Section not found: {', '.join(missing)}",
        )
    await db.commit()
    return envelope(
        {"updated": len(request_body.sections)}, message="Sort order updated successfully"
    )


@router.get("/{section_id}", summary="Get a section", responses=error_responses(404))
async def get_section(section_id: str, db: AsyncSession = Depends(get_db)):
    section = await _get_section_or_404(db, section_id)
    page_title = await content_crud.get_page_title(db, section.page_id)
    return envelope(_section_data(section, page_title))


@router.post(
    "",
    summary="Create a section",
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403),
)
async def create_section(
    section_in: SectionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    await _check_page(db, section_in.page_id)
    section = await content_crud.create_item(db, Section, section_in.model_dump())
    await db.commit()
    page_title = await content_crud.get_page_title(db, section.page_id)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(_section_data(section, page_title), message="Section created successfully"),
    )


@router.put("/{section_id}", summary="Update a section", responses=error_responses(400, 401, 403, 404))
async def update_section(
    section_id: str,
    section_in: SectionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    section = await _get_section_or_404(db, section_id)
    changes = section_in.model_dump(exclude_unset=True)
    if "page_id" in changes:
        await _check_page(db, changes["page_id"])
    section = await content_crud.update_item(db, section, changes)
    await db.commit()
    page_title = await content_crud.get_page_title(db, section.page_id)
    return envelope(_section_data(section, page_title), message="Section updated successfully")


@router.delete("/{section_id}", summary="Delete a section", responses=error_responses(401, 403, 404))
async def delete_section(
    section_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    section = await _get_section_or_404(db, section_id)
    await content_crud.delete_item(db, section)
    await db.commit()
    logger.info(f"Deleted section {section_id}")
    return envelope(message="Section deleted successfully")
