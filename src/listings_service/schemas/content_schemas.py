"""
Schemas for pages, sections and services.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from listings_service.schemas.common import SortOrderItem


class PageCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9_-]*$")
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    meta_description: Optional[str] = Field(None, max_length=500)
    active: StrictBool = True


class PageUpdate(BaseModel):
    slug: Optional[str] = Field(
        None, min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9_-]*$"
    )
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    meta_description: Optional[str] = Field(None, max_length=500)
    active: Optional[StrictBool] = None


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    title: str
    content: str
    meta_description: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class SectionCreate(BaseModel):
    page_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    section_type: str = Field(..., min_length=1, max_length=50)
    sort_order: int = 0
    active: StrictBool = True
    meta_data: Optional[Dict[str, Any]] = None


class SectionUpdate(BaseModel):
    page_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    section_type: Optional[str] = Field(None, min_length=1, max_length=50)
    sort_order: Optional[int] = None
    active: Optional[StrictBool] = None
    meta_data: Optional[Dict[str, Any]] = None


class SectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    page_id: Optional[UUID] = None
    page_title: Optional[str] = None
    title: str
    content: str
    section_type: str
    sort_order: int
    active: bool
    meta_data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class SectionSortRequest(BaseModel):
    sections: List[SortOrderItem] = Field(..., min_length=1)


class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    icon: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., min_length=1, max_length=50)
    sort_order: int = 0
    active: StrictBool = True


class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    sort_order: Optional[int] = None
    active: Optional[StrictBool] = None


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    icon: str
    color: str
    sort_order: int
    active: bool
    created_at: datetime
    updated_at: datetime
