# src/listings_service/crud/image_crud.py
import uuid
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud.property_crud import parse_uuid
from listings_service.models.property import Property
from listings_service.models.property_image import PropertyImage

# Display order: main image first, then explicit order, then upload order.
DISPLAY_ORDER = (
    PropertyImage.is_main.desc(),
    PropertyImage.sort_order.asc(),
    PropertyImage.created_at.asc(),
    PropertyImage.id.asc(),
)


async def get_image(db_session: AsyncSession, image_id) -> Optional[PropertyImage]:
    parsed = parse_uuid(image_id)
    if parsed is None:
        return None
    return await db_session.get(PropertyImage, parsed)


async def list_images(
    db_session: AsyncSession, property_id: uuid.UUID
) -> List[PropertyImage]:
    result = await db_session.execute(
        select(PropertyImage)
        .filter(PropertyImage.property_id == property_id)
        .order_by(*DISPLAY_ORDER)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_images_for_properties(
    db_session: AsyncSession, property_ids: Sequence[uuid.UUID]
) -> Dict[uuid.UUID, List[PropertyImage]]:
    """Images of several properties in one query, grouped by property."""
    grouped: Dict[uuid.UUID, List[PropertyImage]] = {pid: [] for pid in property_ids}
    if not property_ids:
        return grouped
    result = await db_session.execute(
        select(PropertyImage)
        .filter(PropertyImage.property_id.in_(list(property_ids)))
        .order_by(PropertyImage.property_id, *DISPLAY_ORDER)
    )
    for image in result.scalars():
        grouped.setdefault(image.property_id, []).append(image)
    return grouped


async def count_images(db_session: AsyncSession, property_id: uuid.UUID) -> int:
    result = await db_session.execute(
        select(func.count(PropertyImage.id)).filter(
            PropertyImage.property_id == property_id
        )
    )
    return result.scalar() or 0


async def get_next_sort_order(db_session: AsyncSession, property_id: uuid.UUID) -> int:
    result = await db_session.execute(
        select(func.max(PropertyImage.sort_order)).filter(
            PropertyImage.property_id == property_id
        )
    )
    current = result.scalar()
    return 0 if current is None else current + 1


async def insert_image(db_session: AsyncSession, values: Dict[str, Any]) -> PropertyImage:
    image = PropertyImage(**values)
    db_session.add(image)
    await db_session.flush()
    return image


async def clear_main_flags(db_session: AsyncSession, property_id: uuid.UUID) -> None:
    await db_session.execute(
        update(PropertyImage)
        .where(PropertyImage.property_id == property_id, PropertyImage.is_main.is_(True))
        .values(is_main=False)
        .execution_options(synchronize_session="fetch")
    )


async def set_main_flag(db_session: AsyncSession, image_id: uuid.UUID) -> None:
    await db_session.execute(
        update(PropertyImage)
        .where(PropertyImage.id == image_id)
        .values(is_main=True)
        .execution_options(synchronize_session="fetch")
    )


async def promote_first_image(
    db_session: AsyncSession, property_id: uuid.UUID
) -> Optional[PropertyImage]:
    """Make the first remaining image (lowest sort_order, then oldest) the main one."""
    result = await db_session.execute(
        select(PropertyImage)
        .filter(PropertyImage.property_id == property_id)
        .order_by(
            PropertyImage.sort_order.asc(),
            PropertyImage.created_at.asc(),
            PropertyImage.id.asc(),
        )
        .limit(1)
    )
    candidate = result.scalars().first()
    if candidate is not None:
        await clear_main_flags(db_session, property_id)
        await set_main_flag(db_session, candidate.id)
    return candidate


async def delete_image_rows(db_session: AsyncSession, image_ids: Sequence[uuid.UUID]) -> int:
    if not image_ids:
        return 0
    await db_session.execute(
        delete(PropertyImage)
        .where(PropertyImage.id.in_(list(image_ids)))
        .execution_options(synchronize_session="fetch")
    )
    return len(image_ids)


async def list_all_images(db_session: AsyncSession) -> List[PropertyImage]:
    result = await db_session.execute(
        select(PropertyImage).order_by(PropertyImage.property_id, *DISPLAY_ORDER)
    )
    return list(result.scalars().all())


async def list_orphaned_images(db_session: AsyncSession) -> List[PropertyImage]:
    """Image rows whose property no longer exists."""
    result = await db_session.execute(
        select(PropertyImage)
        .outerjoin(Property, Property.id == PropertyImage.property_id)
        .filter(Property.id.is_(None))
        .order_by(PropertyImage.created_at)
    )
    return list(result.scalars().all())


async def count_main_images_by_property(
    db_session: AsyncSession,
) -> Dict[uuid.UUID, Dict[str, int]]:
    """Per existing property with images: total images and number flagged main."""
    main_count = func.sum(case((PropertyImage.is_main.is_(True), 1), else_=0))
    result = await db_session.execute(
        select(
            PropertyImage.property_id,
            func.count(PropertyImage.id),
            main_count,
        )
        .join(Property, Property.id == PropertyImage.property_id)
        .group_by(PropertyImage.property_id)
    )
    return {
        property_id: {"images": total, "mains": int(mains or 0)}
        for property_id, total, mains in result.all()
    }
