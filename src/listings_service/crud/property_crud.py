# src/listings_service/crud/property_crud.py
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.models.property import Property

PROPERTY_CODE_RE = re.compile(r"^prop-(\d+)$")


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        return None


async def get_property_by_id(
    db_session: AsyncSession, property_id: Any
) -> Optional[Property]:
    parsed = parse_uuid(property_id)
    if parsed is None:
        return None
    return await db_session.get(Property, parsed)


async def get_property_by_code(
    db_session: AsyncSession, property_code: str
) -> Optional[Property]:
    result = await db_session.execute(
        select(Property).filter(Property.property_code == property_code)
    )
    return result.scalars().first()


async def find_property(
    db_session: AsyncSession, identifier: Any
) -> Optional[Property]:
    """Look a property up by its code, falling back to its id."""
    if identifier is None:
        return None
    identifier = str(identifier).strip()
    if not identifier:
        return None
    prop = await get_property_by_code(db_session, identifier)
    if prop is None:
        prop = await get_property_by_id(db_session, identifier)
    return prop


async def get_max_sort_order(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.max(Property.sort_order)))
    return result.scalar() or 0


async def get_prop_code_numbers(db_session: AsyncSession) -> List[int]:
    """Numbers of all codes shaped like ``prop-NNN``."""
    result = await db_session.execute(
        select(Property.property_code).filter(Property.property_code.like("prop-%"))
    )
    numbers = []
    for code in result.scalars():
        match = PROPERTY_CODE_RE.match(code or "")
        if match:
            numbers.append(int(match.group(1)))
    return numbers


async def create_property(db_session: AsyncSession, values: Dict[str, Any]) -> Property:
    new_property = Property(**values)
    db_session.add(new_property)
    await db_session.flush()
    await db_session.refresh(new_property)
    return new_property


async def update_sort_orders(
    db_session: AsyncSession, orders: Iterable[Dict[str, Any]]
) -> List[str]:
    """
    Apply new sort positions. Returns the ids that did not match any property;
    the caller decides whether to roll back.
    """
    missing = []
    for item in orders:
        prop = await get_property_by_id(db_session, item["id"])
        if prop is None:
            missing.append(str(item["id"]))
            continue
        prop.sort_order = item["sort_order"]
    await db_session.flush()
    return missing


async def delete_property_row(db_session: AsyncSession, property_id: uuid.UUID) -> None:
    await db_session.execute(delete(Property).where(Property.id == property_id))


async def get_property_stats(db_session: AsyncSession) -> Dict[str, Any]:
    result = await db_session.execute(
        select(
            func.count(Property.id),
            func.sum(case((Property.active.is_(True), 1), else_=0)),
            func.sum(case((Property.featured.is_(True), 1), else_=0)),
            func.avg(Property.price),
        )
    )
    total, active, featured, average = result.one()
    return {
        "total_properties": total or 0,
        "active_properties": int(active or 0),
        "featured_properties": int(featured or 0),
        "average_price": round(float(average), 2) if average is not None else None,
    }
