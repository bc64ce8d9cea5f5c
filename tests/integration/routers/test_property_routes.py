"""
Integration tests for the property create, read, update, delete and
reorder endpoints.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.fixtures.helpers import PDF_BYTES, make_image_bytes, property_payload, seed_property


async def _create(client: AsyncClient, headers, **overrides) -> dict:
    response = await client.post("/properties", json=property_payload(**overrides), headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_property_requires_authentication(client: AsyncClient):
    response = await client.post("/properties", json=property_payload())
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "error": "Authentication required"}


@pytest.mark.asyncio
async def test_create_property_requires_admin(client: AsyncClient, editor_headers):
    response = await client.post("/properties", json=property_payload(), headers=editor_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"] == "Admin access required"


@pytest.mark.asyncio
async def test_create_property_assigns_code_and_folder(client: AsyncClient, admin_headers, storage):
    created = await _create(client, admin_headers)

    assert created["property_code"] == "prop-001"
    assert created["sort_order"] == 1
    assert created["images"] == []
    assert created["gallery"] == []
    assert created["main_image_url"] == "http://test/images/placeholder.jpg"
    assert storage.absolute("properties/prop-001").is_dir()

    second = await _create(client, admin_headers)
    assert second["property_code"] == "prop-002"
    assert second["sort_order"] == 2


@pytest.mark.asyncio
async def test_generated_code_skips_existing_folders(client: AsyncClient, admin_headers, storage):
    storage.ensure_directory("properties/prop-007")
    created = await _create(client, admin_headers)
    assert created["property_code"] == "prop-008"


@pytest.mark.asyncio
async def test_create_property_with_explicit_code(client: AsyncClient, admin_headers):
    created = await _create(client, admin_headers, property_code="sofia-center-12")
    assert created["property_code"] == "sofia-center-12"

    response = await client.post(
        "/properties", json=property_payload(property_code="sofia-center-12"), headers=admin_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"success": False, "error": "Property code already exists"}


@pytest.mark.asyncio
async def test_create_property_validation_error(client: AsyncClient, admin_headers):
    response = await client.post(
        "/properties", json=property_payload(title="ab"), headers=admin_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Field 'title'")


@pytest.mark.asyncio
async def test_create_property_rejects_unknown_type(client: AsyncClient, admin_headers):
    response = await client.post(
        "/properties", json=property_payload(property_type="CASTLE"), headers=admin_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "property_type" in response.json()["error"]


@pytest.mark.asyncio
async def test_non_residential_property_drops_residential_fields(client: AsyncClient, admin_headers):
    created = await _create(
        client, admin_headers, property_type="ОФИС", bedrooms=4, bathrooms=2, heating="gas"
    )
    assert created["bedrooms"] == 0
    assert created["bathrooms"] == 0
    assert created["heating"] is None
    assert created["floor_number"] is None


@pytest.mark.asyncio
async def test_created_property_reads_back_unchanged(client: AsyncClient, admin_headers):
    payload = property_payload(
        property_code="round-trip-1",
        currency="BGN",
        transaction_type="rent",
        property_type="КЪЩА",
        year_built=1998,
        heating="gas",
        featured=True,
    )
    created = await _create(client, admin_headers, **payload)
    fetched = (await client.get(f"/properties/{created['id']}")).json()["data"]

    for key, value in payload.items():
        assert fetched[key] == value, key
    assert fetched["created_at"] == created["created_at"]


@pytest.mark.asyncio
async def test_get_property_by_code_and_id(client: AsyncClient, db_session):
    prop = await seed_property(db_session, property_code="prop-042", title="Garden house")

    by_code = await client.get("/properties/prop-042")
    assert by_code.status_code == status.HTTP_200_OK
    data = by_code.json()["data"]
    assert data["id"] == str(prop.id)
    assert data["title"] == "Garden house"
    assert data["documents"] == []

    by_id = await client.get(f"/properties/{prop.id}")
    assert by_id.status_code == status.HTTP_200_OK
    assert by_id.json()["data"]["property_code"] == "prop-042"


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["undefined", "null"])
async def test_get_property_invalid_identifier(client: AsyncClient, identifier):
    response = await client.get(f"/properties/{identifier}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_get_unknown_property(client: AsyncClient):
    response = await client.get("/properties/prop-999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "Property not found"}


@pytest.mark.asyncio
async def test_update_property_with_current_timestamp(client: AsyncClient, admin_headers):
    created = await _create(client, admin_headers)

    response = await client.put(
        f"/properties/{created['id']}",
        json={"price": 175000, "featured": True, "updated_at": created["updated_at"]},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    data = response.json()["data"]
    assert data["price"] == 175000
    assert data["featured"] is True
    assert data["title"] == created["title"]


@pytest.mark.asyncio
async def test_update_property_with_stale_timestamp_conflicts(client: AsyncClient, admin_headers):
    created = await _create(client, admin_headers)

    response = await client.put(
        f"/properties/{created['id']}",
        json={"price": 1, "updated_at": "2000-01-01T00:00:00+00:00"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    body = response.json()
    assert body["success"] is False
    assert "modified by another user" in body["error"]
    assert body["current_updated_at"]

    # Nothing was applied
    current = await client.get(f"/properties/{created['id']}")
    assert current.json()["data"]["price"] == created["price"]


@pytest.mark.asyncio
async def test_update_without_timestamp_skips_the_lock(client: AsyncClient, admin_headers):
    created = await _create(client, admin_headers)
    response = await client.put(
        f"/properties/{created['id']}", json={"title": "Renamed flat"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["title"] == "Renamed flat"


@pytest.mark.asyncio
async def test_update_cannot_null_required_fields(client: AsyncClient, admin_headers):
    created = await _create(client, admin_headers)
    response = await client.put(
        f"/properties/{created['id']}", json={"title": None}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Field 'title' cannot be null"


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["", "   ", None])
async def test_update_cannot_clear_property_code(client: AsyncClient, admin_headers, blank):
    created = await _create(client, admin_headers)

    response = await client.put(
        f"/properties/{created['id']}", json={"property_code": blank}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Field 'property_code' cannot be null"

    current = await client.get(f"/properties/{created['id']}")
    assert current.json()["data"]["property_code"] == created["property_code"]


@pytest.mark.asyncio
async def test_update_to_taken_code_conflicts(client: AsyncClient, admin_headers):
    first = await _create(client, admin_headers)
    second = await _create(client, admin_headers)

    response = await client.put(
        f"/properties/{second['id']}",
        json={"property_code": first["property_code"]},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.asyncio
async def test_update_unknown_property(client: AsyncClient, admin_headers):
    response = await client.put(
        "/properties/00000000-0000-0000-0000-000000000000",
        json={"title": "Whatever"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_delete_property_removes_assets(client: AsyncClient, admin_headers, storage):
    created = await _create(client, admin_headers)
    code = created["property_code"]

    upload = await client.post(
        "/images/upload",
        data={"property_id": code},
        files={"image": ("front.jpg", make_image_bytes(), "image/jpeg")},
        headers=admin_headers,
    )
    assert upload.status_code == status.HTTP_201_CREATED
    document = await client.post(
        "/documents/upload",
        data={"property_id": code},
        files={"document": ("plan.pdf", PDF_BYTES, "application/pdf")},
        headers=admin_headers,
    )
    assert document.status_code == status.HTTP_201_CREATED

    response = await client.delete(f"/properties/{created['id']}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["message"] == "Property deleted successfully"
    # image, thumbnail and document
    assert body["data"] == {"deleted_files": 3, "failed_files": 0}
    assert list(storage.absolute(f"properties/{code}").iterdir()) == []

    assert (await client.get(f"/properties/{code}")).status_code == status.HTTP_404_NOT_FOUND
    images = await client.get(f"/images/property/{created['id']}")
    assert images.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_delete_unknown_property(client: AsyncClient, admin_headers):
    response = await client.delete(
        "/properties/00000000-0000-0000-0000-000000000000", headers=admin_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_reorder_properties(client: AsyncClient, admin_headers, db_session):
    first = await seed_property(db_session, sort_order=1)
    second = await seed_property(db_session, sort_order=2)

    response = await client.patch(
        "/properties",
        json={
            "orders": [
                {"id": str(first.id), "sort_order": 2},
                {"id": str(second.id), "sort_order": 1},
            ]
        },
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"updated": 2}

    listing = await client.get("/properties")
    ids = [item["id"] for item in listing.json()["data"]]
    assert ids == [str(second.id), str(first.id)]


@pytest.mark.asyncio
async def test_reorder_with_unknown_id_changes_nothing(client: AsyncClient, admin_headers, db_session):
    prop = await seed_property(db_session, sort_order=1)
    prop_id = str(prop.id)

    response = await client.patch(
        "/properties",
        json={
            "orders": [
                {"id": prop_id, "sort_order": 9},
                {"id": "00000000-0000-0000-0000-000000000000", "sort_order": 1},
            ]
        },
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

    detail = await client.get(f"/properties/{prop_id}")
    assert detail.json()["data"]["sort_order"] == 1


@pytest.mark.asyncio
async def test_property_stats(client: AsyncClient, db_session):
    await seed_property(db_session, price=100000, featured=True)
    await seed_property(db_session, price=200000)
    await seed_property(db_session, price=300000, active=False)

    response = await client.get("/properties/stats")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {
        "total_properties": 3,
        "active_properties": 2,
        "featured_properties": 1,
        "average_price": 200000.0,
    }
