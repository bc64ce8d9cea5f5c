"""
Integration tests for the image integrity check and repair.
"""

import uuid

import pytest

from listings_service.exceptions import BadRequestError
from listings_service.services.integrity import IntegrityChecker
from tests.fixtures.helpers import fetch_images, seed_image, seed_property


@pytest.mark.asyncio
async def test_clean_catalog_has_no_issues(db_session, storage):
    prop = await seed_property(db_session)
    await seed_image(db_session, prop, storage, is_main=True)
    await seed_image(db_session, prop, storage, sort_order=1)

    report = await IntegrityChecker(db_session, storage).check()
    assert report.has_issues is False
    assert report.to_dict()["has_issues"] is False


@pytest.mark.asyncio
async def test_check_reports_every_kind_of_issue(db_session, storage):
    healthy = await seed_property(db_session)
    await seed_image(db_session, healthy, storage, is_main=True)

    missing_file = await seed_image(db_session, healthy, storage, with_file=False, sort_order=1)

    doubled = await seed_property(db_session)
    await seed_image(db_session, doubled, storage, is_main=True)
    await seed_image(db_session, doubled, storage, is_main=True, sort_order=1)

    headless = await seed_property(db_session)
    await seed_image(db_session, headless, storage)

    orphan = await seed_image(db_session, healthy, storage, property_id=uuid.uuid4())

    report = await IntegrityChecker(db_session, storage).check()

    assert [item["id"] for item in report.orphaned] == [str(orphan.id)]
    assert [item["id"] for item in report.missing_files] == [str(missing_file.id)]
    assert report.multiple_mains == [{"property_id": str(doubled.id), "main_count": 2}]
    assert report.missing_mains == [str(headless.id)]
    assert report.has_issues is True
    assert report.repaired is False


@pytest.mark.asyncio
async def test_repair_with_leave_policy(db_session, storage):
    prop = await seed_property(db_session)
    await seed_image(db_session, prop, storage, is_main=True)
    await seed_image(db_session, prop, storage, with_file=False, sort_order=1)
    await seed_image(db_session, prop, storage, property_id=uuid.uuid4())

    headless = await seed_property(db_session)
    await seed_image(db_session, headless, storage)

    report = await IntegrityChecker(db_session, storage, "leave").repair()

    assert report.repaired is True
    assert report.deleted_orphaned == 1
    assert report.deleted_missing == 1
    assert report.promoted_mains == []
    assert report.orphaned == []
    assert report.missing_files == []
    # Properties without a main image are only reported
    assert report.missing_mains == [str(headless.id)]
    assert report.has_issues is True
    assert len(await fetch_images(db_session, prop.id)) == 1


@pytest.mark.asyncio
async def test_repair_promotes_first_image_by_sort_order(db_session, storage):
    headless = await seed_property(db_session)
    await seed_image(db_session, headless, storage, sort_order=5)
    await seed_image(db_session, headless, storage, sort_order=2)
    first = await seed_image(db_session, headless, storage, sort_order=1)
    first_id = first.id

    report = await IntegrityChecker(db_session, storage, "leave").repair("promote_oldest")

    assert report.promoted_mains == [str(headless.id)]
    assert report.has_issues is False
    rows = await fetch_images(db_session, headless.id)
    # lowest sort_order wins over upload age
    assert [row.id for row in rows if row.is_main] == [first_id]


@pytest.mark.asyncio
async def test_repair_can_leave_a_property_without_images(db_session, storage):
    prop = await seed_property(db_session)
    await seed_image(db_session, prop, storage, is_main=True, with_file=False)

    report = await IntegrityChecker(db_session, storage, "promote_oldest").repair()

    assert report.deleted_missing == 1
    assert report.promoted_mains == []
    assert report.has_issues is False
    assert await fetch_images(db_session, prop.id) == []


def test_unknown_policy_is_rejected(storage):
    with pytest.raises(BadRequestError):
        IntegrityChecker(None, storage, "delete_everything")
