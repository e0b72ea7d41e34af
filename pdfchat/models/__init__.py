"""SQLAlchemy models package."""

from pdfchat.models.document import Document
from pdfchat.models.chunk import Chunk
from pdfchat.models.chat_message import ChatMessage

__all__ = [
    "Document",
    "Chunk",
    "ChatMessage",
]
