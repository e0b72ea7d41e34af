"""Document endpoints."""

import logging
import time
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response, UploadFile, status

from pdfchat.config import get_settings
from pdfchat.core.exceptions import DocumentNotFoundError, InvalidInputError
from pdfchat.core.parsing import DocumentFormat, resolve_format
from pdfchat.deps import Ingestion, Repository
from pdfchat.repositories.base import DocumentRecord
from pdfchat.schemas.document import (
    DeleteResponse,
    DocumentDetail,
    DocumentRead,
    DocumentUploadResponse,
)

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter()


@router.post("/upload", response_model=DocumentUploadResponse)
async def upload_document(ingestion: Ingestion, file: UploadFile | None = None) -> DocumentRecord:
    """Upload a PDF, extract its text and index it for chat."""
    if file is None:
        raise InvalidInputError("No PDF file provided")

    original_name = file.filename or "document.pdf"

    if resolve_format(file.content_type, original_name) != DocumentFormat.PDF:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are allowed",
        )

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large",
        )

    logger.info("Processing PDF upload: %s (%d bytes)", original_name, len(content))

    return await ingestion.ingest(
        content,
        filename=f"uploaded_{int(time.time() * 1000)}.pdf",
        original_name=original_name,
        content_format=DocumentFormat.PDF,
    )


@router.post("/sample", response_model=DocumentUploadResponse)
async def create_sample_document(ingestion: Ingestion) -> DocumentRecord:
    """Create the built-in demo document."""
    return await ingestion.ingest_sample()


@router.get("", response_model=list[DocumentRead])
async def list_documents(repository: Repository) -> list[DocumentRecord]:
    """List all documents."""
    return await repository.list_documents()


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(document_id: UUID, repository: Repository) -> DocumentRecord:
    """Get a specific document with its extracted text."""
    document = await repository.get_document(document_id)
    if not document:
        raise DocumentNotFoundError(document_id)
    return document


@router.get("/{document_id}/pdf")
async def get_document_pdf(document_id: UUID, repository: Repository) -> Response:
    """Serve the uploaded file for inline viewing."""
    document = await repository.get_document(document_id)
    if not document or not document.pdf_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="PDF file not found",
        )

    return Response(
        content=document.pdf_data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": "inline",
            "Cache-Control": "public, max-age=3600",
        },
    )


@router.delete("/{document_id}", response_model=DeleteResponse)
async def delete_document(document_id: UUID, repository: Repository) -> DeleteResponse:
    """Delete a document with its chunks and chat history."""
    deleted = await repository.delete_document(document_id)
    if deleted:
        logger.info("Deleted document %s", document_id)
    return DeleteResponse(success=True)
