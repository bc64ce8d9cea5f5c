import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid, func

from listings_service.db import Base
from listings_service.models.base import utcnow


class PropertyDocument(Base):
    __tablename__ = "property_documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False, default="application/pdf")

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<PropertyDocument(id='{self.id}', filename='{self.original_filename}')>"
