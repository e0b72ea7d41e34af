"""Persistence for documents, chunks and chat messages."""

from pdfchat.repositories.base import ChunkRecord, DocumentRecord, DocumentRepository, MessageRecord
from pdfchat.repositories.factory import get_repository

__all__ = [
    "ChunkRecord",
    "DocumentRecord",
    "DocumentRepository",
    "MessageRecord",
    "get_repository",
]
