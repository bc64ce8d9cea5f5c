"""
Image integrity check and repair.

The check reports four kinds of inconsistency between image rows, their
properties and the files on disk. Repair removes rows that can never be
valid again (orphaned rows and rows without a file). What to do with a
property that has images but no main image is an explicit policy:

* ``leave``: report it and change nothing (default);
* ``promote_oldest``: make the first remaining image (lowest sort order, then
  oldest) the main image.

Properties with more than one main image are reported only.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.crud import image_crud
from listings_service.crud.property_crud import parse_uuid
from listings_service.exceptions import BadRequestError, PersistenceError
from listings_service.logging_config import logger
from listings_service.models.property_image import PropertyImage
from listings_service.utils.storage import UploadStorage

MISSING_MAIN_POLICIES = ("leave", "promote_oldest")


def _describe(image: PropertyImage) -> Dict[str, Any]:
    return {
        "id": str(image.id),
        "property_id": str(image.property_id),
        "path": image.image_path,
    }


@dataclass
class IntegrityReport:
    orphaned: List[Dict[str, Any]] = field(default_factory=list)
    missing_files: List[Dict[str, Any]] = field(default_factory=list)
    multiple_mains: List[Dict[str, Any]] = field(default_factory=list)
    missing_mains: List[str] = field(default_factory=list)
    repaired: bool = False
    deleted_orphaned: int = 0
    deleted_missing: int = 0
    promoted_mains: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(
            self.orphaned or self.missing_files or self.multiple_mains or self.missing_mains
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["has_issues"] = self.has_issues
        return data


class IntegrityChecker:
    def __init__(
        self,
        session: AsyncSession,
        storage: UploadStorage,
        missing_main_policy: str = "leave",
    ):
        if missing_main_policy not in MISSING_MAIN_POLICIES:
            raise BadRequestError(f"Unknown missing-main policy: {missing_main_policy}")
        self.session = session
        self.storage = storage
        self.missing_main_policy = missing_main_policy

    async def check(self) -> IntegrityReport:
        report = IntegrityReport()
        try:
            orphaned = await image_crud.list_orphaned_images(self.session)
            orphaned_ids = {image.id for image in orphaned}
            report.orphaned = [_describe(image) for image in orphaned]

            for image in await image_crud.list_all_images(self.session):
                if image.id in orphaned_ids:
                    continue
                if not self.storage.exists(image.image_path):
                    report.missing_files.append(_describe(image))

            counts = await image_crud.count_main_images_by_property(self.session)
        except SQLAlchemyError as e:
            logger.error(f"Integrity check failed: {e}", exc_info=True)
            raise PersistenceError(f"Integrity check failed: {e}") from e

        for property_id, stats in counts.items():
            if stats["mains"] > 1:
                report.multiple_mains.append(
                    {"property_id": str(property_id), "main_count": stats["mains"]}
                )
            elif stats["images"] > 0 and stats["mains"] == 0:
                report.missing_mains.append(str(property_id))
        return report

    async def repair(self, policy: Optional[str] = None) -> IntegrityReport:
        """
        Delete orphaned and missing-file rows, then apply the missing-main
        policy, and report what is left.
        """
        policy = policy or self.missing_main_policy
        if policy not in MISSING_MAIN_POLICIES:
            raise BadRequestError(f"Unknown missing-main policy: {policy}")

        found = await self.check()
        promoted: List[str] = []
        try:
            deleted_orphaned = await image_crud.delete_image_rows(
                self.session, [parse_uuid(item["id"]) for item in found.orphaned]
            )
            deleted_missing = await image_crud.delete_image_rows(
                self.session, [parse_uuid(item["id"]) for item in found.missing_files]
            )
            await self.session.flush()

            if policy == "promote_oldest":
                counts = await image_crud.count_main_images_by_property(self.session)
                for property_id, stats in counts.items():
                    if stats["images"] > 0 and stats["mains"] == 0:
                        image = await image_crud.promote_first_image(self.session, property_id)
                        if image is not None:
                            promoted.append(str(property_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Integrity repair failed: {e}", exc_info=True)
            raise PersistenceError(f"Integrity repair failed: {e}") from e

        logger.info(
            f"Integrity repair removed {deleted_orphaned} orphaned and "
            f"{deleted_missing} missing-file rows, promoted {len(promoted)} main image(s)"
        )
        report = await self.check()
        report.repaired = True
        report.deleted_orphaned = deleted_orphaned
        report.deleted_missing = deleted_missing
        report.promoted_mains = promoted
        return report
