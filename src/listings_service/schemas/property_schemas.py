from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from listings_service.models.base import as_utc
from listings_service.schemas.common import SortOrderItem
from listings_service.utils.property_rules import (
    Currency,
    PropertyType,
    TransactionType,
)

CODE_PATTERN = r"^[a-zA-Z0-9_-]+$"


class PropertyCreate(BaseModel):
    """Validated payload for creating a property (after sanitization)."""

    model_config = ConfigDict(extra="ignore")

    property_code: Optional[str] = Field(None, max_length=50, pattern=CODE_PATTERN)
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    price: Decimal = Field(..., gt=0, le=999999999)
    currency: Currency = Currency.EUR
    transaction_type: TransactionType
    property_type: PropertyType
    city_region: str = Field(..., min_length=1, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    area: Decimal = Field(..., gt=0, le=100000)

    bedrooms: int = Field(0, ge=0, le=1000)
    bathrooms: int = Field(0, ge=0, le=1000)
    floors: Optional[int] = Field(None, ge=0, le=1000)
    floor_number: Optional[int] = Field(None, ge=0, le=1000)
    terraces: int = Field(0, ge=0, le=1000)
    construction_type: Optional[str] = Field(None, max_length=50)
    condition_type: Optional[str] = Field(None, max_length=50)
    heating: Optional[str] = Field(None, max_length=50)
    exposure: Optional[str] = Field(None, max_length=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2040)
    furnishing_level: Optional[str] = Field(None, max_length=50)

    has_elevator: StrictBool = False
    has_garage: StrictBool = False
    has_southern_exposure: StrictBool = False
    new_construction: StrictBool = False
    featured: StrictBool = False
    active: StrictBool = True
    sort_order: Optional[int] = None


class PropertyUpdate(BaseModel):
    """Partial update; only the fields that were sent are applied."""

    model_config = ConfigDict(extra="ignore")

    property_code: Optional[str] = Field(None, max_length=50, pattern=CODE_PATTERN)
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    price: Optional[Decimal] = Field(None, gt=0, le=999999999)
    currency: Optional[Currency] = None
    transaction_type: Optional[TransactionType] = None
    property_type: Optional[PropertyType] = None
    city_region: Optional[str] = Field(None, min_length=1, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    area: Optional[Decimal] = Field(None, gt=0, le=100000)

    bedrooms: Optional[int] = Field(None, ge=0, le=1000)
    bathrooms: Optional[int] = Field(None, ge=0, le=1000)
    floors: Optional[int] = Field(None, ge=0, le=1000)
    floor_number: Optional[int] = Field(None, ge=0, le=1000)
    terraces: Optional[int] = Field(None, ge=0, le=1000)
    construction_type: Optional[str] = Field(None, max_length=50)
    condition_type: Optional[str] = Field(None, max_length=50)
    heating: Optional[str] = Field(None, max_length=50)
    exposure: Optional[str] = Field(None, max_length=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2040)
    furnishing_level: Optional[str] = Field(None, max_length=50)

    has_elevator: Optional[StrictBool] = None
    has_garage: Optional[StrictBool] = None
    has_southern_exposure: Optional[StrictBool] = None
    new_construction: Optional[StrictBool] = None
    featured: Optional[StrictBool] = None
    active: Optional[StrictBool] = None
    sort_order: Optional[int] = None

    updated_at: Optional[datetime] = Field(
        None, description="Last-seen modification time for optimistic locking"
    )


# Columns that may never be set to NULL through an update.
NON_NULLABLE_UPDATE_FIELDS = (
    "property_code",
    "title",
    "price",
    "currency",
    "transaction_type",
    "property_type",
    "city_region",
    "area",
    "bedrooms",
    "bathrooms",
    "terraces",
    "has_elevator",
    "has_garage",
    "has_southern_exposure",
    "new_construction",
    "featured",
    "active",
)


class PropertyResponse(BaseModel):
    """A property as stored; image and document data are attached by the presenter."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_code: Optional[str] = None
    title: str
    description: Optional[str] = None
    price: float
    currency: str
    transaction_type: str
    property_type: str
    city_region: str
    district: Optional[str] = None
    address: Optional[str] = None
    area: float
    bedrooms: int
    bathrooms: int
    floors: Optional[int] = None
    floor_number: Optional[int] = None
    terraces: int
    construction_type: Optional[str] = None
    condition_type: Optional[str] = None
    heating: Optional[str] = None
    exposure: Optional[str] = None
    year_built: Optional[int] = None
    furnishing_level: Optional[str] = None
    has_elevator: bool
    has_garage: bool
    has_southern_exposure: bool
    new_construction: bool
    featured: bool
    active: bool
    sort_order: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class PropertyReorderRequest(BaseModel):
    orders: List[SortOrderItem] = Field(..., min_length=1)


class PropertyStats(BaseModel):
    total_properties: int
    active_properties: int
    featured_properties: int
    average_price: Optional[float] = None
