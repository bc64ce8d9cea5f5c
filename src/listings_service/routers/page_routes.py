# src/listings_service/routers/page_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import content_crud
from listings_service.db import get_db
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.content import Page
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.schemas.content_schemas import PageCreate, PageResponse, PageUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pages", tags=["Pages"])


def _page_data(page: Page) -> dict:
    return PageResponse.model_validate(page).model_dump(mode="json")


async def _get_page_or_404(db: AsyncSession, page_id: str) -> Page:
    page = await content_crud.get_by_id(db, Page, page_id)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page


async def _ensure_slug_free(db: AsyncSession, slug: str, page_id=None) -> None:
    existing = await content_crud.get_page_by_slug(db, slug)
    if existing is not None and existing.id != page_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Page with this slug already exists"
        )


@router.get("", summary="List pages")
async def list_pages(
    all: bool = Query(False, description="Include inactive pages"),
    db: AsyncSession = Depends(get_db),
):
    pages = await content_crud.list_pages(db, include_inactive=all)
    return envelope([_page_data(page) for page in pages])


@router.get("/slug/{slug}", summary="Get an active page by slug", responses=error_responses(404))
async def get_page_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    page = await content_crud.get_page_by_slug(db, slug)
    if page is None or not page.active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return envelope(_page_data(page))


@router.get("/{page_id}", summary="Get a page", responses=error_responses(404))
async def get_page(page_id: str, db: AsyncSession = Depends(get_db)):
    return envelope(_page_data(await _get_page_or_404(db, page_id)))


@router.post(
    "",
    summary="Create a page",
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 409),
)
async def create_page(
    page_in: PageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    await _ensure_slug_free(db, page_in.slug)
    try:
        page = await content_crud.create_item(db, Page, page_in.model_dump())
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Page with this slug already exists"
        )
    logger.info(f"Created page '{page.slug}' ({page.id})")
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(_page_data(page), message="Page created successfully"),
    )


@router.put("/{page_id}", summary="Update a page", responses=error_responses(400, 401, 403, 404, 409))
async def update_page(
    page_id: str,
    page_in: PageUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    page = await _get_page_or_404(db, page_id)
    changes = page_in.model_dump(exclude_unset=True)
    if changes.get("slug"):
        await _ensure_slug_free(db, changes["slug"], page.id)
    page = await content_crud.update_item(db, page, changes)
    await db.commit()
    return envelope(_page_data(page), message="Page updated successfully")


@router.delete("/{page_id}", summary="Delete a page", responses=error_responses(401, 403, 404))
async def delete_page(
    page_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin_user),
):
    page = await _get_page_or_404(db, page_id)
    await content_crud.delete_item(db, page)
    await db.commit()
    logger.info(f"Deleted page {page_id}")
    return envelope(message="Page deleted successfully")
