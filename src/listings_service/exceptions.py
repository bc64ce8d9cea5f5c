"""
Service-level exceptions.

Each error carries the HTTP status it maps to and a client-safe message.
Storage and persistence errors keep their internal detail for the log only.
"""

from typing import Any, Dict, Optional


class ListingsServiceError(Exception):
    status_code: int = 500
    public_message: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        extra: Optional[Dict[str, Any]] = None,
        public_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}
        if public_message is not None:
            self.public_message = public_message

    @property
    def client_message(self) -> str:
        return self.public_message or self.message


class BadRequestError(ListingsServiceError):
    status_code = 400


class NotFoundError(ListingsServiceError):
    status_code = 404


class ConflictError(ListingsServiceError):
    status_code = 409


class PayloadTooLargeError(ListingsServiceError):
    status_code = 413


class UnsupportedMediaTypeError(ListingsServiceError):
    status_code = 415


class StorageError(ListingsServiceError):
    """File-system failure: directory creation, writes, verification."""

    status_code = 500
    public_message = "File storage error"


class PersistenceError(ListingsServiceError):
    """Database failure in the middle of an operation."""

    status_code = 500
    public_message = "Server error"
