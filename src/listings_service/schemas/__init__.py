from .auth_schemas import LoginRequest, LoginResult, UserResponse
from .common import (
    ErrorResponse,
    MessageResponse,
    PaginationMeta,
    SortOrderItem,
    envelope,
    error_body,
    error_responses,
)
from .image_schemas import ImageDeleteResult, ImageUpdate, SetMainImageRequest
from .property_schemas import (
    PropertyCreate,
    PropertyReorderRequest,
    PropertyResponse,
    PropertyStats,
    PropertyUpdate,
)

__all__ = [
    "ErrorResponse",
    "ImageDeleteResult",
    "ImageUpdate",
    "LoginRequest",
    "LoginResult",
    "MessageResponse",
    "PaginationMeta",
    "PropertyCreate",
    "PropertyReorderRequest",
    "PropertyResponse",
    "PropertyStats",
    "PropertyUpdate",
    "SetMainImageRequest",
    "SortOrderItem",
    "UserResponse",
    "envelope",
    "error_body",
    "error_responses",
]
