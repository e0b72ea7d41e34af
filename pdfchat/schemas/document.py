"""Document schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class DocumentUploadResponse(BaseModel):
    """Response after document ingestion."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    original_name: str
    page_count: int
    uploaded_at: datetime


class DocumentRead(DocumentUploadResponse):
    """Schema for listing documents."""

    content_type: str
    extraction_degraded: bool = False


class DocumentDetail(DocumentRead):
    """Schema for a single document, including extracted text."""

    text_content: str


class DeleteResponse(BaseModel):
    """Response after deleting a document."""

    success: bool = True
