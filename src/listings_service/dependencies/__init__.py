from .app_deps import (
    get_app_settings,
    get_document_manager,
    get_image_manager,
    get_integrity_checker,
    get_listing_engine,
    get_property_manager,
    get_storage,
)
from .user_deps import bearer_scheme, get_current_user, require_admin_user

__all__ = [
    "bearer_scheme",
    "get_app_settings",
    "get_current_user",
    "get_document_manager",
    "get_image_manager",
    "get_integrity_checker",
    "get_listing_engine",
    "get_property_manager",
    "get_storage",
    "require_admin_user",
]
