"""
PDF documents attached to properties.

Documents follow the image upload contract with a single accepted type and no
derived files. The content itself must carry the PDF signature; the declared
content type is only checked as a hint.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from listings_service.config import Settings
from listings_service.crud import document_crud, property_crud
from listings_service.exceptions import (
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    PersistenceError,
    StorageError,
    UnsupportedMediaTypeError,
)
from listings_service.logging_config import logger
from listings_service.models.property_document import PropertyDocument
from listings_service.services.presenters import format_document
from listings_service.utils.storage import UploadStorage

PDF_MIME_TYPE = "application/pdf"
PDF_SIGNATURE = b"%PDF-"
# Some browsers send PDFs with a generic type; the signature decides.
ACCEPTED_DECLARED_TYPES = (PDF_MIME_TYPE, "application/x-pdf", "application/octet-stream")


def is_pdf(data: bytes) -> bool:
    return data[:1024].lstrip().startswith(PDF_SIGNATURE)


def _display_name(filename: Optional[str]) -> str:
    name = Path((filename or "").replace("\\", "/")).name.strip()
    return name or "document.pdf"


class DocumentManager:
    def __init__(self, session: AsyncSession, storage: UploadStorage, settings: Settings):
        self.session = session
        self.storage = storage
        self.settings = settings

    async def list_for_property(self, property_id: Any) -> List[Dict[str, Any]]:
        prop = await property_crud.find_property(self.session, property_id)
        if prop is None:
            raise NotFoundError("Property not found")
        documents = await document_crud.list_documents(self.session, prop.id)
        return [format_document(doc, self.settings) for doc in documents]

    async def upload(
        self,
        property_id: Optional[str],
        data: Optional[bytes],
        filename: Optional[str] = None,
        declared_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not property_id or not str(property_id).strip():
            raise BadRequestError("Property ID is required")
        if data is None:
            raise BadRequestError("No document file uploaded")

        prop = await property_crud.find_property(self.session, property_id)
        if prop is None:
            raise NotFoundError("Property not found")

        if len(data) > self.settings.MAX_DOCUMENT_SIZE:
            raise PayloadTooLargeError(
                f"File too large. Maximum size is {self.settings.MAX_DOCUMENT_SIZE // (1024 * 1024)}MB"
            )
        if not data:
            raise BadRequestError("Uploaded file is empty")
        if declared_type and declared_type.lower() not in ACCEPTED_DECLARED_TYPES:
            raise UnsupportedMediaTypeError("Only PDF files are allowed")
        if not is_pdf(data):
            raise UnsupportedMediaTypeError("Only PDF files are allowed")

        folder = self.storage.property_dir(prop.storage_folder)
        self.storage.ensure_directory(folder)
        stored_name = self.storage.generate_filename("pdf")
        rel_path = f"{folder}/{stored_name}"
        await run_in_threadpool(self.storage.write, rel_path, data)

        try:
            document = PropertyDocument(
                property_id=prop.id,
                filename=stored_name,
                original_filename=_display_name(filename),
                file_path=rel_path,
                file_size=len(data),
                mime_type=PDF_MIME_TYPE,
            )
            self.session.add(document)
            await self.session.flush()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            if self.storage.remove(rel_path) is False:
                logger.error(f"Rollback could not remove uploaded document {rel_path}")
            logger.error(f"Failed to save document record: {e}", exc_info=True)
            raise PersistenceError(
                f"Failed to save document record: {e}",
                public_message="Failed to save document record",
            ) from e

        logger.info(f"Uploaded document {document.id} for property {prop.id} ({len(data)} bytes)")
        return format_document(document, self.settings)

    async def get_for_serving(self, document_id: str) -> Tuple[PropertyDocument, Path]:
        document = await document_crud.get_document(self.session, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not self.storage.exists(document.file_path):
            logger.warning(f"Document {document.id} has no file at {document.file_path}")
            raise NotFoundError("Document file not found")
        return document, self.storage.absolute(document.file_path)

    async def delete(self, document_id: str) -> None:
        """Remove the file first, then the row."""
        document = await document_crud.get_document(self.session, document_id)
        if document is None:
            raise NotFoundError("Document not found")

        if self.storage.remove(document.file_path) is False:
            raise StorageError(
                f"Failed to delete document file {document.file_path}",
                public_message="Failed to delete document file",
            )

        try:
            await document_crud.delete_document_row(self.session, document.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete document {document_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete document {document_id}: {e}") from e
        logger.info(f"Deleted document {document_id}")
