"""Pydantic schemas for API request/response validation."""

from pdfchat.schemas.chat import ChatMessageRead, ChatRequest, Citation, SummaryResponse
from pdfchat.schemas.document import (
    DeleteResponse,
    DocumentDetail,
    DocumentRead,
    DocumentUploadResponse,
)

__all__ = [
    "ChatMessageRead",
    "ChatRequest",
    "Citation",
    "SummaryResponse",
    "DeleteResponse",
    "DocumentDetail",
    "DocumentRead",
    "DocumentUploadResponse",
]
