"""
Database models for the Listings Service.
"""

from listings_service.models.content import Page, Section, Service
from listings_service.models.property import Property
from listings_service.models.property_document import PropertyDocument
from listings_service.models.property_image import PropertyImage
from listings_service.models.user import User

__all__ = [
    "Page",
    "Property",
    "PropertyDocument",
    "PropertyImage",
    "Section",
    "Service",
    "User",
]
