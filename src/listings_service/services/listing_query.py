"""
Listing Query Engine: filtered, paginated views over the property catalog.

Query parameters arrive as loose strings; `ListingCriteria.from_params`
normalizes them leniently (bad numbers and unknown sentinels are treated as
absent) so that a listing request never fails on its filters.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings_service.config import Settings
from listings_service.crud import image_crud
from listings_service.exceptions import PersistenceError
from listings_service.logging_config import logger
from listings_service.models.property import Property
from listings_service.services.presenters import format_property
from listings_service.utils.storage import UploadStorage

DISABLED_VALUES = ("", "all")
TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")

KEYWORD_FIELDS = (
    Property.title,
    Property.description,
    Property.city_region,
    Property.district,
    Property.address,
    Property.property_code,
    Property.property_type,
)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if value.lower() in DISABLED_VALUES:
        return None
    return value


def _number(value: Any) -> Optional[Decimal]:
    text = _text(value)
    if text is None:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def _flag(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = _text(value)
    if text is None:
        return None
    text = text.lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


@dataclass
class ListingCriteria:
    page: int = 1
    limit: int = 16
    keyword: Optional[str] = None
    transaction_type: Optional[str] = None
    property_type: Optional[str] = None
    city_region: Optional[str] = None
    district: Optional[str] = None
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    area_min: Optional[Decimal] = None
    area_max: Optional[Decimal] = None
    featured: Optional[bool] = None
    active: Optional[bool] = True

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_limit: int = 16,
        max_limit: int = 100,
    ) -> "ListingCriteria":
        """Build criteria from raw query parameters."""
        page = _positive_int(params.get("page")) or 1
        limit = _positive_int(params.get("limit")) or default_limit
        limit = max(1, min(limit, max_limit))

        # `active` defaults to true; "all" lists inactive listings too
        raw_active = params.get("active")
        if raw_active is None or str(raw_active).strip() == "":
            active: Optional[bool] = True
        elif str(raw_active).strip().lower() == "all":
            active = None
        else:
            active = _flag(raw_active)
            if active is None:
                active = True

        return cls(
            page=page,
            limit=limit,
            keyword=_text(params.get("keyword")),
            transaction_type=_text(params.get("transaction_type")),
            property_type=_text(params.get("property_type")),
            city_region=_text(params.get("city_region")),
            district=_text(params.get("district")),
            price_min=_number(params.get("price_min")),
            price_max=_number(params.get("price_max")),
            area_min=_number(params.get("area_min")),
            area_max=_number(params.get("area_max")),
            featured=_flag(params.get("featured")),
            active=active,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ListingPage:
    items: List[Dict[str, Any]]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def meta(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "hasPrev": self.page > 1,
            "hasNext": self.page < self.pages,
        }


class ListingQueryEngine:
    def __init__(self, session: AsyncSession, storage: UploadStorage, settings: Settings):
        self.session = session
        self.storage = storage
        self.settings = settings

    @staticmethod
    def build_filters(criteria: ListingCriteria) -> list:
        filters = []
        # user text is matched literally, `%` and `_` included
        if criteria.keyword:
            filters.append(
                or_(
                    *(
                        column.icontains(criteria.keyword, autoescape=True)
                        for column in KEYWORD_FIELDS
                    )
                )
            )
        if criteria.transaction_type:
            filters.append(Property.transaction_type == criteria.transaction_type)
        if criteria.property_type:
            filters.append(Property.property_type == criteria.property_type)
        if criteria.city_region:
            filters.append(Property.city_region.icontains(criteria.city_region, autoescape=True))
        if criteria.district:
            filters.append(Property.district.icontains(criteria.district, autoescape=True))
        if criteria.price_min is not None:
            filters.append(Property.price >= criteria.price_min)
        if criteria.price_max is not None:
            filters.append(Property.price <= criteria.price_max)
        if criteria.area_min is not None:
            filters.append(Property.area >= criteria.area_min)
        if criteria.area_max is not None:
            filters.append(Property.area <= criteria.area_max)
        if criteria.featured is not None:
            filters.append(Property.featured.is_(criteria.featured))
        if criteria.active is not None:
            filters.append(Property.active.is_(criteria.active))
        return filters

    async def search(self, criteria: ListingCriteria) -> ListingPage:
        """
        Run the listing query.

        Returns the requested page of formatted properties together with the
        total match count. Any database failure is logged and re-raised as a
        PersistenceError without leaking driver detail.
        """
        filters = self.build_filters(criteria)
        try:
            count_result = await self.session.execute(
                select(func.count(Property.id)).filter(*filters)
            )
            total = count_result.scalar() or 0

            # pages past the end skip the page query
            properties: List[Property] = []
            if criteria.offset < total:
                result = await self.session.execute(
                    select(Property)
                    .filter(*filters)
                    .order_by(
                        Property.sort_order.asc().nulls_last(),
                        Property.created_at.desc(),
                        Property.id.asc(),
                    )
                    .offset(criteria.offset)
                    .limit(criteria.limit)
                )
                properties = list(result.scalars().all())
            images = await image_crud.list_images_for_properties(
                self.session, [prop.id for prop in properties]
            )
        except SQLAlchemyError as e:
            logger.error(f"Listing query failed: {e}", exc_info=True)
            raise PersistenceError(f"Listing query failed: {e}") from e

        items = [
            format_property(prop, images.get(prop.id, []), self.storage, self.settings)
            for prop in properties
        ]
        return ListingPage(items=items, page=criteria.page, limit=criteria.limit, total=total)
