# src/listings_service/routers/document_routes.py
"""
Router for PDF documents attached to properties.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse, JSONResponse

from listings_service.dependencies.app_deps import get_document_manager
from listings_service.dependencies.user_deps import require_admin_user
from listings_service.models.user import User
from listings_service.schemas.common import envelope, error_responses
from listings_service.services.document_assets import PDF_MIME_TYPE, DocumentManager

router = APIRouter(prefix="/documents", tags=["Documents"])

NO_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _inline_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode() or "document.pdf"
    ascii_name = ascii_name.replace('"', "")
    if ascii_name == filename:
        return f'inline; filename="{filename}"'
    return f"inline; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/upload",
    summary="Upload a PDF document for a property",
    status_code=status.HTTP_201_CREATED,
    responses={
        **error_responses(400, 401, 403, 404, 500),
        413: {"description": "File too large"},
        415: {"description": "Only PDF files are allowed"},
    },
)
async def upload_document(
    document: Optional[UploadFile] = File(None),
    property_id: Optional[str] = Form(None),
    manager: DocumentManager = Depends(get_document_manager),
    current_user: User = Depends(require_admin_user),
):
    data = await document.read() if document is not None else None
    created = await manager.upload(
        property_id,
        data,
        filename=document.filename if document is not None else None,
        declared_type=document.content_type if document is not None else None,
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(created, message="Document uploaded successfully"),
    )


@router.get(
    "/property/{property_id}",
    summary="List the documents of a property",
    responses=error_responses(404),
)
async def list_property_documents(
    property_id: str,
    manager: DocumentManager = Depends(get_document_manager),
):
    return envelope(await manager.list_for_property(property_id))


async def _serve(document_id: str, manager: DocumentManager) -> FileResponse:
    document, path = await manager.get_for_serving(document_id)
    headers = dict(NO_CACHE_HEADERS)
    headers["Content-Disposition"] = _inline_disposition(document.original_filename)
    return FileResponse(path, media_type=PDF_MIME_TYPE, headers=headers)


@router.get(
    "/serve/{document_id}",
    summary="Stream a document inline",
    response_class=FileResponse,
    responses=error_responses(404),
)
async def serve_document(
    document_id: str,
    manager: DocumentManager = Depends(get_document_manager),
):
    return await _serve(document_id, manager)


@router.get("/{document_id}", include_in_schema=False, response_class=FileResponse)
async def get_document(
    document_id: str,
    manager: DocumentManager = Depends(get_document_manager),
):
    return await _serve(document_id, manager)


@router.delete(
    "/{document_id}",
    summary="Delete a document",
    responses=error_responses(401, 403, 404, 500),
)
async def delete_document(
    document_id: str,
    manager: DocumentManager = Depends(get_document_manager),
    current_user: User = Depends(require_admin_user),
):
    await manager.delete(document_id)
    return envelope(message="Document deleted successfully")
