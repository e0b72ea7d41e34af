"""SQLAlchemy-backed repository."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from pdfchat.core.chunking import TextChunk
from pdfchat.core.exceptions import PersistenceError
from pdfchat.database import async_session_maker
from pdfchat.models.chat_message import ChatMessage
from pdfchat.models.chunk import Chunk
from pdfchat.models.document import Document
from pdfchat.repositories.base import ChunkRecord, DocumentRecord, DocumentRepository, MessageRecord
from pdfchat.schemas.chat import Citation

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on read; stored values are UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _document_record(document: Document) -> DocumentRecord:
    return DocumentRecord(
        id=document.id,
        filename=document.filename,
        original_name=document.original_name,
        content_type=document.content_type,
        text_content=document.text_content,
        page_count=document.page_count,
        uploaded_at=_as_utc(document.uploaded_at),
        extraction_degraded=document.extraction_degraded,
        pdf_data=document.pdf_data,
    )


def _chunk_record(chunk: Chunk) -> ChunkRecord:
    return ChunkRecord(
        id=chunk.id,
        document_id=chunk.document_id,
        chunk_index=chunk.chunk_index,
        content=chunk.content,
        content_hash=chunk.content_hash,
        page_number=chunk.page_number,
        embedding=chunk.embedding,
    )


def _message_record(message: ChatMessage) -> MessageRecord:
    return MessageRecord(
        id=message.id,
        document_id=message.document_id,
        message=message.message,
        response=message.response,
        timestamp=_as_utc(message.timestamp),
        citations=[Citation.model_validate(c) for c in message.citations or []],
    )


class SqlRepository(DocumentRepository):
    """Repository over the ORM models; storage errors become PersistenceError."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] = async_session_maker):
        self.session_maker = session_maker

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self.session_maker() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Database error: %s", e)
            raise PersistenceError(str(e)) from e

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
        document = Document(
            id=uuid4(),
            filename=filename,
            original_name=original_name,
            content_type=content_type,
            text_content=text_content,
            page_count=page_count,
            extraction_degraded=extraction_degraded,
            pdf_data=pdf_data,
            uploaded_at=datetime.now(timezone.utc),
        )
        async with self._session() as db:
            db.add(document)
            await db.commit()
        return _document_record(document)

    async def get_document(self, document_id: UUID) -> DocumentRecord | None:
        async with self._session() as db:
            document = await db.get(Document, document_id)
            return _document_record(document) if document else None

    async def list_documents(self) -> list[DocumentRecord]:
        async with self._session() as db:
            result = await db.execute(select(Document).order_by(Document.uploaded_at))
            return [_document_record(d) for d in result.scalars().all()]

    async def delete_document(self, document_id: UUID) -> bool:
        async with self._session() as db:
            result = await db.execute(
                select(Document)
                .options(selectinload(Document.chunks), selectinload(Document.messages))
                .where(Document.id == document_id)
            )
            document = result.scalar_one_or_none()
            if not document:
                return False

            await db.delete(document)
            await db.commit()
            return True

    async def create_chunks(
        self,
        document_id: UUID,
        chunks: list[TextChunk],
    ) -> list[ChunkRecord]:
        db_chunks = [
            Chunk(
                id=uuid4(),
                document_id=document_id,
                chunk_index=chunk.chunk_index,
                content=chunk.content,
                content_hash=chunk.content_hash,
                page_number=chunk.page_number,
            )
            for chunk in chunks
        ]
        async with self._session() as db:
            db.add_all(db_chunks)
            await db.commit()
        return [_chunk_record(c) for c in db_chunks]

    async def get_chunks(self, document_id: UUID) -> list[ChunkRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(Chunk)
                .where(Chunk.document_id == document_id)
                .order_by(Chunk.chunk_index)
            )
            return [_chunk_record(c) for c in result.scalars().all()]

    async def search_chunks(self, document_id: UUID, query: str) -> list[ChunkRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(Chunk)
                .where(Chunk.document_id == document_id)
                .where(func.lower(Chunk.content).contains(query.lower(), autoescape=True))
                .order_by(Chunk.chunk_index)
            )
            return [_chunk_record(c) for c in result.scalars().all()]

    async def create_message(
        self,
        document_id: UUID,
        message: str,
        response: str,
        citations: list[Citation],
    ) -> MessageRecord:
        chat_message = ChatMessage(
            id=uuid4(),
            document_id=document_id,
            message=message,
            response=response,
            citations=[c.model_dump() for c in citations],
            timestamp=datetime.now(timezone.utc),
        )
        async with self._session() as db:
            db.add(chat_message)
            await db.commit()
        return _message_record(chat_message)

    async def get_messages(self, document_id: UUID) -> list[MessageRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(ChatMessage)
                .where(ChatMessage.document_id == document_id)
                .order_by(ChatMessage.timestamp)
            )
            return [_message_record(m) for m in result.scalars().all()]
