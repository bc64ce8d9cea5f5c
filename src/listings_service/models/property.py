import uuid

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text, Uuid

from listings_service.db import Base
from listings_service.models.base import TimestampMixin


class Property(TimestampMixin, Base):
    __tablename__ = "properties"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_code = Column(String(50), unique=True, nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    transaction_type = Column(String(10), nullable=False, index=True)
    property_type = Column(String(50), nullable=False, index=True)

    city_region = Column(String(100), nullable=False, index=True)
    district = Column(String(100), nullable=True)
    address = Column(String(500), nullable=True)
    area = Column(Numeric(10, 2), nullable=False)

    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Integer, nullable=False, default=0)
    floors = Column(Integer, nullable=True)
    floor_number = Column(Integer, nullable=True)
    terraces = Column(Integer, nullable=False, default=0)
    construction_type = Column(String(50), nullable=True)
    condition_type = Column(String(50), nullable=True)
    heating = Column(String(50), nullable=True)
    exposure = Column(String(50), nullable=True)
    year_built = Column(Integer, nullable=True)
    furnishing_level = Column(String(50), nullable=True)

    has_elevator = Column(Boolean, nullable=False, default=False)
    has_garage = Column(Boolean, nullable=False, default=False)
    has_southern_exposure = Column(Boolean, nullable=False, default=False)
    new_construction = Column(Boolean, nullable=False, default=False)

    featured = Column(Boolean, nullable=False, default=False, index=True)
    active = Column(Boolean, nullable=False, default=True, index=True)
    sort_order = Column(Integer, nullable=True)

    @property
    def storage_folder(self) -> str:
        """Folder name under the uploads root; the code, falling back to the id."""
        code = (self.property_code or "").strip()
        return code or str(self.id)

    def __repr__(self):
        return f"<Property(id='{self.id}', code='{self.property_code}')>"
