import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
    func,
)

from listings_service.db import Base
from listings_service.models.base import utcnow


class PropertyImage(Base):
    """
    One stored image of a property.

    `image_path` and `thumbnail_path` are relative to the uploads root
    (``properties/<folder>/<file>``); public URLs are derived from them.
    """

    __tablename__ = "property_images"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_path = Column(String(500), nullable=False)
    thumbnail_path = Column(String(500), nullable=True)
    alt_text = Column(String(255), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_main = Column(Boolean, nullable=False, default=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(50), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return (
            f"<PropertyImage(id='{self.id}', property_id='{self.property_id}', "
            f"is_main={self.is_main})>"
        )
