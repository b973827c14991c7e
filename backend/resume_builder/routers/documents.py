import json
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from resume_builder.config import settings
from resume_builder.dependencies import get_document_repository, require_user
from resume_builder.exceptions import DocumentAccessError, DocumentNotFoundError, StoreError
from resume_builder.schemas.document import (
    DocumentIdRequest,
    DocumentListResponse,
    DocumentSaveRequest,
    DocumentSaveResponse,
    SuccessResponse,
)
from resume_builder.services.document_repository import DocumentRepository
from resume_builder.services.pdf_service import content_disposition, render_document_pdf
from resume_builder.utils.timestamps import utc_now_iso

logger = logging.getLogger("resume_builder.documents")

router = APIRouter(tags=["documents"])


def _load_owned(repo: DocumentRepository, user_id: str, document_id: str) -> dict:
    try:
        return repo.get(user_id, document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")
    except DocumentAccessError:
        logger.warning("User %s tried to access document %s", user_id, document_id)
        raise HTTPException(status_code=403, detail="Unauthorized access to document")


@router.post("/save-document", response_model=DocumentSaveResponse)
async def save_document(
    req: DocumentSaveRequest,
    user: dict = Depends(require_user),
    repo: DocumentRepository = Depends(get_document_repository),
):
    if len(json.dumps(req.data)) > settings.max_payload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Document data too large (max {settings.max_payload_bytes} bytes)",
        )

    now = utc_now_iso()
    try:
        document_id = repo.save(
            user["id"],
            req.type,
            req.title,
            req.data,
            created_at=req.created_at or now,
            updated_at=req.updated_at or now,
        )
    except StoreError as exc:
        logger.error("Error saving document for user %s: %s", user["id"], exc)
        raise HTTPException(status_code=500, detail="Failed to save document")
    return DocumentSaveResponse(document_id=document_id)


@router.get("/get-documents", response_model=DocumentListResponse)
async def get_documents(
    user: dict = Depends(require_user),
    repo: DocumentRepository = Depends(get_document_repository),
):
    try:
        documents = repo.list_documents(user["id"])
    except StoreError as exc:
        logger.error("Error getting documents for user %s: %s", user["id"], exc)
        raise HTTPException(status_code=500, detail="Failed to get documents")
    return DocumentListResponse(documents=documents)


@router.post("/download-document")
async def download_document(
    req: DocumentIdRequest,
    user: dict = Depends(require_user),
    repo: DocumentRepository = Depends(get_document_repository),
):
    try:
        document = _load_owned(repo, user["id"], req.document_id)
    except StoreError as exc:
        logger.error("Error downloading document %s: %s", req.document_id, exc)
        raise HTTPException(status_code=500, detail="Failed to download document")

    return Response(
        content=render_document_pdf(document),
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(document.get("title"))},
    )


@router.delete("/delete-document", response_model=SuccessResponse)
async def delete_document(
    req: DocumentIdRequest,
    user: dict = Depends(require_user),
    repo: DocumentRepository = Depends(get_document_repository),
):
    try:
        repo.delete(user["id"], req.document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")
    except DocumentAccessError:
        logger.warning("User %s tried to delete document %s", user["id"], req.document_id)
        raise HTTPException(status_code=403, detail="Unauthorized access to document")
    except StoreError as exc:
        logger.error("Error deleting document %s: %s", req.document_id, exc)
        raise HTTPException(status_code=500, detail="Failed to delete document")
    return SuccessResponse()
