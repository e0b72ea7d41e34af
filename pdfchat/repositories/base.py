"""Abstract repository interface and shared records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pdfchat.schemas.chat import Citation

if TYPE_CHECKING:
    from pdfchat.core.chunking import TextChunk


@dataclass
class DocumentRecord:
    """A stored document."""

    id: UUID
    filename: str
    original_name: str
    content_type: str
    text_content: str
    page_count: int
    uploaded_at: datetime
    extraction_degraded: bool = False
    pdf_data: bytes | None = None


@dataclass
class ChunkRecord:
    """A stored chunk, owned by a document."""

    id: UUID
    document_id: UUID
    chunk_index: int
    content: str
    content_hash: str
    page_number: int
    embedding: list[float] | None = None


@dataclass
class MessageRecord:
    """A stored chat turn, owned by a document."""

    id: UUID
    document_id: UUID
    message: str
    response: str
    timestamp: datetime
    citations: list[Citation] = field(default_factory=list)


class DocumentRepository(ABC):
    """Persistence for documents and the chunks and messages they own.

    Deleting a document deletes its chunks and messages.
    """

    @abstractmethod
    async def create_document(
        self,
        *,
        filename: str,
        original_name: str,
        content_type: str,
        text_content: str,
        page_count: int,
        extraction_degraded: bool = False,
        pdf_data: bytes | None = None,
    ) -> DocumentRecord:
        """Store a new document."""

    @abstractmethod
    async def get_document(self, document_id: UUID) -> DocumentRecord | None:
        """Return a document, or None if it does not exist."""

    @abstractmethod
    async def list_documents(self) -> list[DocumentRecord]:
        """Return all documents, oldest first."""

    @abstractmethod
    async def delete_document(self, document_id: UUID) -> bool:
        """Delete a document with its chunks and messages. Returns False if absent."""

    @abstractmethod
    async def create_chunks(
        self,
        document_id: UUID,
        chunks: list[TextChunk],
    ) -> list[ChunkRecord]:
        """Store a batch of chunks for a document."""

    @abstractmethod
    async def get_chunks(self, document_id: UUID) -> list[ChunkRecord]:
        """Return a document's chunks ordered by chunk index."""

    @abstractmethod
    async def search_chunks(self, document_id: UUID, query: str) -> list[ChunkRecord]:
        """Return chunks containing ``query`` (case-insensitive), by chunk index."""

    @abstractmethod
    async def create_message(
        self,
        document_id: UUID,
        message: str,
        response: str,
        citations: list[Citation],
    ) -> MessageRecord:
        """Store a chat turn."""

    @abstractmethod
    async def get_messages(self, document_id: UUID) -> list[MessageRecord]:
        """Return a document's chat turns in chronological order."""
