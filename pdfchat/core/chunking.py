"""Paragraph-based text chunking with character overlap and page estimates."""

import hashlib
import logging
import math
import re
from dataclasses import dataclass

from pdfchat.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass
class TextChunk:
    """A chunk of text with its estimated source page."""

    content: str
    content_hash: str
    chunk_index: int
    page_number: int


class Chunker:
    """Fixed-size (characters) paragraph chunker with overlap."""

    def __init__(
        self,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
    ):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def _compute_hash(self, text: str) -> str:
        """Compute hash of chunk content."""
        return hashlib.sha256(text.encode()).hexdigest()

    @staticmethod
    def split_paragraphs(text: str) -> list[str]:
        """Split on blank lines, dropping empty paragraphs."""
        return [p.strip() for p in PARAGRAPH_BREAK.split(text) if p.strip()]

    @staticmethod
    def estimate_page(offset: int, chars_per_page: float, page_count: int) -> int:
        """Estimate the page holding a character offset."""
        page = math.ceil(offset / chars_per_page) if chars_per_page else 1
        return min(page_count, max(1, page))

    def _close(self, buffer: str, page_number: int, chunk_index: int) -> TextChunk:
        content = buffer.strip()
        return TextChunk(
            content=content,
            content_hash=self._compute_hash(content),
            chunk_index=chunk_index,
            page_number=page_number,
        )

    def chunk(self, text: str, page_count: int) -> list[TextChunk]:
        """Chunk a document's full text.

        Paragraphs are appended to a running buffer until the next one would
        push it past ``chunk_size``. The closed chunk is tagged with the page
        estimate of the paragraph that triggered the close, and the next
        buffer starts with the last ``chunk_overlap`` characters of the closed
        chunk.
        """
        if not text or not text.strip():
            return []

        page_count = max(1, page_count)
        chars_per_page = len(text) / page_count

        chunks: list[TextChunk] = []
        buffer = ""
        page_number = 1
        cursor = 0

        for paragraph in self.split_paragraphs(text):
            # Forward cursor: a repeated paragraph maps to its own position
            offset = text.find(paragraph, cursor)
            cursor = offset + len(paragraph)
            page_number = self.estimate_page(offset, chars_per_page, page_count)

            if buffer and len(buffer) + len(paragraph) > self.chunk_size:
                closed = self._close(buffer, page_number, len(chunks))
                chunks.append(closed)

                overlap = ""
                if self.chunk_overlap > 0:
                    overlap = closed.content[-self.chunk_overlap:].lstrip()
                buffer = f"{overlap} {paragraph}" if overlap else paragraph
            else:
                buffer = f"{buffer} {paragraph}" if buffer else paragraph

        # Don't forget the last chunk
        if buffer.strip():
            chunks.append(self._close(buffer, page_number, len(chunks)))

        logger.debug("Created %d chunks from %d chars", len(chunks), len(text))
        return chunks


# Singleton chunker
chunker = Chunker()


def chunk_text(text: str, page_count: int) -> list[TextChunk]:
    """Chunk text using default chunker."""
    return chunker.chunk(text, page_count)
