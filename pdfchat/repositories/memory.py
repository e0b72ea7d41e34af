"""Volatile dict-backed repository."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pdfchat.core.chunking import TextChunk
from pdfchat.repositories.base import ChunkRecord, DocumentRecord, DocumentRepository, MessageRecord
from pdfchat.schemas.chat import Citation


class MemoryRepository(DocumentRepository):
    """Keeps everything in process memory; contents are lost on restart."""

    def __init__(self) -> None:
        self.documents: dict[UUID, DocumentRecord] = {}
        self.chunks: dict[UUID, ChunkRecord] = {}
        self.messages: dict[UUID, MessageRecord] = {}

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
        document = DocumentRecord(
            id=uuid4(),
            filename=filename,
            original_name=original_name,
            content_type=content_type,
            text_content=text_content,
            page_count=page_count,
            uploaded_at=datetime.now(timezone.utc),
            extraction_degraded=extraction_degraded,
            pdf_data=pdf_data,
        )
        self.documents[document.id] = document
        return document

    async def get_document(self, document_id: UUID) -> DocumentRecord | None:
        return self.documents.get(document_id)

    async def list_documents(self) -> list[DocumentRecord]:
        return sorted(self.documents.values(), key=lambda d: d.uploaded_at)

    async def delete_document(self, document_id: UUID) -> bool:
        existed = self.documents.pop(document_id, None) is not None

        for chunk_id in [c.id for c in self.chunks.values() if c.document_id == document_id]:
            del self.chunks[chunk_id]
        for message_id in [m.id for m in self.messages.values() if m.document_id == document_id]:
            del self.messages[message_id]

        return existed

    async def create_chunks(
        self,
        document_id: UUID,
        chunks: list[TextChunk],
    ) -> list[ChunkRecord]:
        records = []
        for chunk in chunks:
            record = ChunkRecord(
                id=uuid4(),
                document_id=document_id,
                chunk_index=chunk.chunk_index,
                content=chunk.content,
                content_hash=chunk.content_hash,
                page_number=chunk.page_number,
            )
            self.chunks[record.id] = record
            records.append(record)
        return records

    async def get_chunks(self, document_id: UUID) -> list[ChunkRecord]:
        return sorted(
            (c for c in self.chunks.values() if c.document_id == document_id),
            key=lambda c: c.chunk_index,
        )

    async def search_chunks(self, document_id: UUID, query: str) -> list[ChunkRecord]:
        query_lower = query.lower()
        return [c for c in await self.get_chunks(document_id) if query_lower in c.content.lower()]

    async def create_message(
        self,
        document_id: UUID,
        message: str,
        response: str,
        citations: list[Citation],
    ) -> MessageRecord:
        record = MessageRecord(
            id=uuid4(),
            document_id=document_id,
            message=message,
            response=response,
            timestamp=datetime.now(timezone.utc),
            citations=list(citations),
        )
        self.messages[record.id] = record
        return record

    async def get_messages(self, document_id: UUID) -> list[MessageRecord]:
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(
            (m for m in self.messages.values() if m.document_id == document_id),
            key=lambda m: m.timestamp,
        )
