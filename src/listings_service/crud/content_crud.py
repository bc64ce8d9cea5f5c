# src/listings_service/crud/content_crud.py
import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud.property_crud import parse_uuid
from listings_service.db import Base
from listings_service.models.content import Page, Section, Service

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def get_by_id(db_session: AsyncSession, model: Type[ModelT], item_id) -> Optional[ModelT]:
    parsed = parse_uuid(item_id)
    if parsed is None:
        return None
    return await db_session.get(model, parsed)


async def create_item(db_session: AsyncSession, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
    item = model(**values)
    db_session.add(item)
    await db_session.flush()
    await db_session.refresh(item)
    return item


async def update_item(db_session: AsyncSession, item: ModelT, values: Dict[str, Any]) -> ModelT:
    for key, value in values.items():
        setattr(item, key, value)
    await db_session.flush()
    await db_session.refresh(item)
    return item


async def delete_item(db_session: AsyncSession, item: ModelT) -> None:
    await db_session.delete(item)
    await db_session.flush()


# --- Pages ---


async def list_pages(db_session: AsyncSession, include_inactive: bool = False) -> List[Page]:
    query = select(Page).order_by(Page.title.asc())
    if not include_inactive:
        query = query.filter(Page.active.is_(True))
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_page_by_slug(db_session: AsyncSession, slug: str) -> Optional[Page]:
    result = await db_session.execute(select(Page).filter(Page.slug == slug))
    return result.scalars().first()


# --- Sections ---


async def list_sections(
    db_session: AsyncSession,
    page_id=None,
    section_type: Optional[str] = None,
    include_inactive: bool = False,
) -> List[Tuple[Section, Optional[str]]]:
    """Sections with the title of their page, ordered by sort position."""
    query = (
        select(Section, Page.title)
        .outerjoin(Page, Page.id == Section.page_id)
        .order_by(Section.sort_order.asc(), Section.created_at.desc())
    )
    if page_id is not None:
        parsed = parse_uuid(page_id)
        if parsed is None:
            return []
        query = query.filter(Section.page_id == parsed)
    if section_type:
        query = query.filter(Section.section_type == section_type)
    if not include_inactive:
        query = query.filter(Section.active.is_(True))
    result = await db_session.execute(query)
    return [(section, page_title) for section, page_title in result.all()]


async def get_page_title(db_session: AsyncSession, page_id) -> Optional[str]:
    if page_id is None:
        return None
    result = await db_session.execute(select(Page.title).filter(Page.id == page_id))
    return result.scalar()


async def update_section_orders(
    db_session: AsyncSession, orders: List[Dict[str, Any]]
) -> List[str]:
    """Returns the ids that did not match any section."""
    missing = []
    for item in orders:
        section = await get_by_id(db_session, Section, item["id"])
        if section is None:
            missing.append(str(item["id"]))
            continue
        section.sort_order = item["sort_order"]
    await db_session.flush()
    return missing


# --- Services ---


async def list_services(db_session: AsyncSession, include_inactive: bool = False) -> List[Service]:
    query = select(Service).order_by(Service.sort_order.asc(), Service.created_at.asc())
    if not include_inactive:
        query = query.filter(Service.active.is_(True))
    result = await db_session.execute(query)
    return list(result.scalars().all())
