"""
Common schemas shared across multiple endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Page metadata returned alongside listing results."""

    page: int = Field(..., description="Current page, starting at 1")
    limit: int = Field(..., description="Maximum items per page")
    total: int = Field(..., description="Items matching the filters, ignoring pagination")
    pages: int = Field(..., description="Total number of pages")
    hasPrev: bool = Field(..., description="Whether a previous page exists")
    hasNext: bool = Field(..., description="Whether a next page exists")


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Human-readable error message")


class MessageResponse(BaseModel):
    """Standard message envelope for operations without a payload."""

    success: bool = Field(True, description="Operation success status")
    message: str = Field(..., description="Response message")


class SortOrderItem(BaseModel):
    id: str = Field(..., description="Identifier of the item to reorder")
    sort_order: int = Field(..., description="New sort position")


def envelope(
    data: Any = None,
    *,
    meta: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a success envelope: ``{"success": true, "data": ..., "meta": ...}``."""
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if meta is not None:
        body["meta"] = meta
    return body


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message}
    body.update(extra)
    return body


STANDARD_ERRORS: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Authentication required"},
    403: {"model": ErrorResponse, "description": "Admin access required"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    return {code: STANDARD_ERRORS.get(code, {"model": ErrorResponse}) for code in codes}
