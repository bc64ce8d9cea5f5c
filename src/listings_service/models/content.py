"""
Content-managed entities: pages, page sections and the services list.
"""

import uuid

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text, Uuid

from listings_service.db import Base
from listings_service.models.base import TimestampMixin


class Page(TimestampMixin, Base):
    __tablename__ = "pages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    meta_description = Column(String(500), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Page(id='{self.id}', slug='{self.slug}')>"


class Section(TimestampMixin, Base):
    __tablename__ = "sections"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    page_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("pages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    section_type = Column(String(50), nullable=False, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    meta_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Section(id='{self.id}', type='{self.section_type}')>"


class Service(TimestampMixin, Base):
    __tablename__ = "services"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(100), nullable=False)
    color = Column(String(50), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Service(id='{self.id}', title='{self.title}')>"
