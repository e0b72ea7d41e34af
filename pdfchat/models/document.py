"""Document model."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Integer, LargeBinary, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pdfchat.database import Base

if TYPE_CHECKING:
    from pdfchat.models.chat_message import ChatMessage
    from pdfchat.models.chunk import Chunk


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """Document represents an uploaded file and its extracted text."""

    __tablename__ = "documents"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    filename: Mapped[str] = mapped_column(String(500), nullable=False)
    original_name: Mapped[str] = mapped_column(String(500), nullable=False)
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)

    text_content: Mapped[str] = mapped_column(Text, nullable=False)
    page_count: Mapped[int] = mapped_column(Integer, nullable=False)
    extraction_degraded: Mapped[bool] = mapped_column(Boolean, default=False)

    # Raw upload, served back to the viewer
    pdf_data: Mapped[bytes | None] = mapped_column(LargeBinary)

    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    chunks: Mapped[list["Chunk"]] = relationship(
        "Chunk",
        back_populates="document",
        cascade="all, delete-orphan",
    )
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="document",
        cascade="all, delete-orphan",
    )
