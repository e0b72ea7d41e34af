"""Chat message model."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pdfchat.database import Base
from pdfchat.models.document import utcnow

if TYPE_CHECKING:
    from pdfchat.models.document import Document


class ChatMessage(Base):
    """One question/answer turn about a document."""

    __tablename__ = "chat_messages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    document_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)

    citations: Mapped[list] = mapped_column(JSON, default=list)
    # Structure: [{"page_number": 1, "content": "..."}]

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)

    # Relationships
    document: Mapped["Document"] = relationship("Document", back_populates="messages")
