"""Chat endpoints."""

import asyncio
import logging
from uuid import UUID

from fastapi import APIRouter

from pdfchat.config import get_settings
from pdfchat.core.exceptions import DocumentNotFoundError, GenerationError
from pdfchat.deps import Chat, Repository
from pdfchat.repositories.base import MessageRecord
from pdfchat.schemas.chat import ChatMessageRead, ChatRequest, SummaryResponse

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter()


@router.get("/{document_id}/messages", response_model=list[ChatMessageRead])
async def list_messages(document_id: UUID, repository: Repository) -> list[MessageRecord]:
    """Get chat history for a document, oldest first."""
    if not await repository.get_document(document_id):
        raise DocumentNotFoundError(document_id)
    return await repository.get_messages(document_id)


@router.post("/{document_id}/chat", response_model=ChatMessageRead)
async def chat(document_id: UUID, request: ChatRequest, chat_service: Chat) -> MessageRecord:
    """Ask a question about a document."""
    logger.info("Processing chat message for document %s", document_id)
    try:
        return await asyncio.wait_for(
            chat_service.chat_with_document(document_id, request.message),
            timeout=settings.chat_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        logger.error("Chat for document %s timed out", document_id)
        raise GenerationError("Chat request timed out") from e


@router.post("/{document_id}/summary", response_model=SummaryResponse)
async def summarize(document_id: UUID, chat_service: Chat) -> SummaryResponse:
    """Generate a short summary of a document."""
    try:
        summary = await asyncio.wait_for(
            chat_service.summarize_document(document_id),
            timeout=settings.chat_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        logger.error("Summary for document %s timed out", document_id)
        raise GenerationError("Summary request timed out") from e
    return SummaryResponse(summary=summary)
