"""
Helper functions for testing.
Provides utility functions and fixtures for seeding test data.
"""

import io
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import property_crud, user_crud
from listings_service.models.property import Property
from listings_service.models.property_image import PropertyImage
from listings_service.models.user import User
from listings_service.security import create_access_token
from listings_service.utils.storage import UploadStorage

PDF_BYTES = (
    b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    b"2 0 obj\n<< /Type /Pages /Kids [] /Count 0 >>\nendobj\ntrailer\n"
    b"<< /Root 1 0 R >>\n%%EOF\n"
)


def property_payload(**overrides: Any) -> Dict[str, Any]:
    """A valid create payload for a residential sale listing."""
    payload = {
        "title": "Bright two-room apartment",
        "description": "Renovated apartment close to the park",
        "price": 150000,
        "currency": "EUR",
        "transaction_type": "sale",
        "property_type": "2-СТАЕН",
        "city_region": "Sofia",
        "district": "Lozenets",
        "address": "12 Example Street",
        "area": 75.5,
        "bedrooms": 1,
        "bathrooms": 1,
        "floor_number": 3,
        "floors": 6,
        "has_elevator": True,
    }
    payload.update(overrides)
    return payload


async def seed_property(db_session: AsyncSession, **overrides: Any) -> Property:
    """Insert a property directly, bypassing the API."""
    values: Dict[str, Any] = {
        "property_code": f"test-{uuid.uuid4().hex[:8]}",
        "title": "Seeded property",
        "price": Decimal("150000"),
        "currency": "EUR",
        "transaction_type": "sale",
        "property_type": "2-СТАЕН",
        "city_region": "Sofia",
        "area": Decimal("80"),
        "active": True,
        "featured": False,
    }
    values.update(overrides)
    prop = await property_crud.create_property(db_session, values)
    await db_session.commit()
    return prop


async def seed_image(
    db_session: AsyncSession,
    prop: Property,
    storage: Optional[UploadStorage] = None,
    is_main: bool = False,
    sort_order: int = 0,
    with_file: bool = True,
    property_id: Optional[uuid.UUID] = None,
) -> PropertyImage:
    """Insert an image row, optionally with a real file behind it."""
    folder = f"properties/{prop.storage_folder}" if prop is not None else "properties/orphans"
    rel_path = f"{folder}/{uuid.uuid4().hex}.jpg"
    if with_file and storage is not None:
        storage.ensure_directory(folder)
        storage.write(rel_path, make_image_bytes())
    image = PropertyImage(
        property_id=property_id or prop.id,
        image_path=rel_path,
        is_main=is_main,
        sort_order=sort_order,
        mime_type="image/jpeg",
    )
    db_session.add(image)
    await db_session.commit()
    return image


async def fetch_images(db_session: AsyncSession, property_id) -> List[PropertyImage]:
    """Read the images of a property straight from the database."""
    result = await db_session.execute(
        select(PropertyImage)
        .filter(PropertyImage.property_id == property_id)
        .order_by(PropertyImage.sort_order, PropertyImage.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


def make_image_bytes(
    image_format: str = "JPEG", size=(640, 480), color=(200, 120, 40)
) -> bytes:
    buffer = io.BytesIO()
    mode = "RGBA" if image_format == "PNG" else "RGB"
    fill = color + (255,) if mode == "RGBA" else color
    Image.new(mode, size, fill).save(buffer, image_format)
    return buffer.getvalue()


def bearer(user: User) -> Dict[str, str]:
    token = create_access_token(str(user.id), user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def storage(tmp_path) -> UploadStorage:
    return UploadStorage(tmp_path / "uploads", public_base="/uploads", public_base_url="http://test")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = await user_crud.create_user(
        db_session, "admin@example.com", "admin-password", name="Admin", role="admin"
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> Dict[str, str]:
    return bearer(admin_user)


@pytest_asyncio.fixture
async def editor_headers(db_session: AsyncSession) -> Dict[str, str]:
    user = await user_crud.create_user(
        db_session, "editor@example.com", "editor-password", name="Editor", role="editor"
    )
    await db_session.commit()
    return bearer(user)
