"""Chat schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Citation(BaseModel):
    """A page reference supporting a generated answer."""

    page_number: int
    content: str


class ChatRequest(BaseModel):
    """Chat request schema."""

    message: str


class ChatMessageRead(BaseModel):
    """A persisted chat turn."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    message: str
    response: str
    citations: list[Citation] = []
    timestamp: datetime


class SummaryResponse(BaseModel):
    """Document summary response."""

    summary: str
