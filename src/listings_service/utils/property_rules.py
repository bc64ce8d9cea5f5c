"""
Catalog vocabularies and the sanitization applied to property payloads
before they are validated.
"""

from enum import Enum
from typing import Any, Dict


class Currency(str, Enum):
    EUR = "EUR"
    USD = "USD"
    BGN = "BGN"


class TransactionType(str, Enum):
    SALE = "sale"
    RENT = "rent"


class PropertyType(str, Enum):
    ONE_ROOM = "1-СТАЕН"
    TWO_ROOM = "2-СТАЕН"
    THREE_ROOM = "3-СТАЕН"
    FOUR_ROOM = "4-СТАЕН"
    MULTI_ROOM = "МНОГОСТАЕН"
    MAISONETTE = "МЕЗОНЕТ"
    STUDIO_ATTIC = "АТЕЛИЕ, ТАВАН"
    OFFICE = "ОФИС"
    SHOP = "МАГАЗИН"
    RESTAURANT = "ЗАВЕДЕНИЕ"
    WAREHOUSE = "СКЛАД"
    HOTEL = "ХОТЕЛ"
    HOUSE = "КЪЩА"
    VILLA = "ВИЛА"
    PLOT = "ПАРЦЕЛ"
    GARAGE = "ГАРАЖ"
    AGRICULTURAL_LAND = "ЗЕМЕДЕЛСКА ЗЕМЯ"
    INDUSTRIAL = "ПРОИЗВОДСТВЕНО ПОМЕЩЕНИЕ"
    BUSINESS = "БИЗНЕС ИМОТ"


RESIDENTIAL_TYPES = frozenset(
    {
        PropertyType.ONE_ROOM.value,
        PropertyType.TWO_ROOM.value,
        PropertyType.THREE_ROOM.value,
        PropertyType.FOUR_ROOM.value,
        PropertyType.MULTI_ROOM.value,
        PropertyType.MAISONETTE.value,
        PropertyType.STUDIO_ATTIC.value,
        PropertyType.HOUSE.value,
        PropertyType.VILLA.value,
    }
)

# Detail fields that only make sense for residential types, with the value
# they are forced to otherwise.
RESIDENTIAL_ONLY_DEFAULTS: Dict[str, Any] = {
    "bedrooms": 0,
    "bathrooms": 0,
    "terraces": 0,
    "floor_number": None,
    "floors": None,
    "construction_type": None,
    "condition_type": None,
    "heating": None,
    "year_built": None,
    "furnishing_level": None,
    "exposure": None,
}

OPTIONAL_TEXT_FIELDS = (
    "description",
    "district",
    "address",
    "construction_type",
    "condition_type",
    "heating",
    "exposure",
    "furnishing_level",
    "property_code",
)


def is_residential(property_type: Any) -> bool:
    if isinstance(property_type, Enum):
        property_type = property_type.value
    return property_type in RESIDENTIAL_TYPES


def sanitize_property_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a raw property payload.

    Strings are trimmed, blank optional strings become None, and for
    non-residential types every residential-only field is forced to its
    default. `property_type` must already be known for the last step; when it
    is absent (partial updates) the caller passes the stored type in.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == "" and key in OPTIONAL_TEXT_FIELDS:
                value = None
        cleaned[key] = value

    property_type = cleaned.get("property_type")
    if property_type and not is_residential(property_type):
        cleaned.update(RESIDENTIAL_ONLY_DEFAULTS)
    return cleaned
