# src/listings_service/crud/document_crud.py
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud.property_crud import parse_uuid
from listings_service.models.property_document import PropertyDocument


async def get_document(db_session: AsyncSession, document_id) -> Optional[PropertyDocument]:
    parsed = parse_uuid(document_id)
    if parsed is None:
        return None
    return await db_session.get(PropertyDocument, parsed)


async def list_documents(
    db_session: AsyncSession, property_id: uuid.UUID
) -> List[PropertyDocument]:
    result = await db_session.execute(
        select(PropertyDocument)
        .filter(PropertyDocument.property_id == property_id)
        .order_by(PropertyDocument.created_at.asc(), PropertyDocument.id.asc())
    )
    return list(result.scalars().all())


async def delete_document_row(db_session: AsyncSession, document_id: uuid.UUID) -> None:
    await db_session.execute(
        delete(PropertyDocument)
        .where(PropertyDocument.id == document_id)
        .execution_options(synchronize_session="fetch")
    )


async def delete_documents_for_property(
    db_session: AsyncSession, property_id: uuid.UUID
) -> None:
    await db_session.execute(
        delete(PropertyDocument)
        .where(PropertyDocument.property_id == property_id)
        .execution_options(synchronize_session="fetch")
    )
