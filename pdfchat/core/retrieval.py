"""Context retrieval: select the chunks passed to the LLM for a query."""

import logging
import re
from abc import ABC, abstractmethod
from uuid import UUID

from pdfchat.config import get_settings
from pdfchat.repositories.base import ChunkRecord, DocumentRepository

logger = logging.getLogger(__name__)
settings = get_settings()


def build_context(chunks: list[ChunkRecord]) -> str:
    """Join chunk contents with blank lines."""
    return "\n\n".join(chunk.content for chunk in chunks)


def query_terms(query: str) -> set[str]:
    """Lowercased word tokens of a query."""
    return set(re.findall(r"\w+", query.lower()))


class ContextRetriever(ABC):
    """Base retriever.

    ``get_context`` never raises: if chunk lookup fails or the document has
    no chunks, it falls back to the head of the document's raw text, and to
    an empty string when that is unavailable too.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        fallback_chars: int = settings.context_fallback_chars,
    ):
        self.repository = repository
        self.fallback_chars = fallback_chars

    @abstractmethod
    async def select_chunks(
        self,
        document_id: UUID,
        query: str,
        max_chunks: int,
    ) -> list[ChunkRecord]:
        """Pick the chunks to use as context, best first."""

    def name(self) -> str:
        return type(self).__name__

    async def get_context(
        self,
        document_id: UUID,
        query: str,
        max_chunks: int = settings.context_max_chunks,
    ) -> str:
        if max_chunks <= 0:
            return ""

        try:
            chunks = (await self.select_chunks(document_id, query, max_chunks))[:max_chunks]
        except Exception as e:
            logger.warning("Chunk lookup failed for document %s: %s", document_id, e)
            chunks = []

        if chunks:
            context = build_context(chunks)
            logger.info(
                "Returning context with %d chunks (%d chars) via %s",
                len(chunks),
                len(context),
                self.name(),
            )
            return context

        return await self._raw_text_fallback(document_id)

    async def _raw_text_fallback(self, document_id: UUID) -> str:
        try:
            document = await self.repository.get_document(document_id)
        except Exception as e:
            logger.error("Error getting document content for %s: %s", document_id, e)
            return ""

        if document and document.text_content:
            logger.info("Returning raw document text as context for %s", document_id)
            return document.text_content[: self.fallback_chars]
        return ""


class SubstringRetriever(ContextRetriever):
    """Case-insensitive substring match, falling back to the first chunks."""

    async def select_chunks(
        self,
        document_id: UUID,
        query: str,
        max_chunks: int,
    ) -> list[ChunkRecord]:
        chunks = await self.repository.search_chunks(document_id, query)
        if not chunks:
            logger.debug("No query-specific chunks found, using first chunks for context")
            chunks = (await self.repository.get_chunks(document_id))[:max_chunks]
        return chunks


class KeywordRetriever(ContextRetriever):
    """Token-overlap ranking: chunks matching more distinct query words rank higher."""

    async def select_chunks(
        self,
        document_id: UUID,
        query: str,
        max_chunks: int,
    ) -> list[ChunkRecord]:
        all_chunks = await self.repository.get_chunks(document_id)
        terms = query_terms(query)

        scored = []
        for chunk in all_chunks:
            score = len(terms & query_terms(chunk.content))
            if score:
                scored.append((score, chunk))

        if not scored:
            logger.debug("No keyword overlap, using first chunks for context")
            return all_chunks[:max_chunks]

        scored.sort(key=lambda item: (-item[0], item[1].chunk_index))
        return [chunk for _, chunk in scored[:max_chunks]]


_STRATEGIES: dict[str, type[ContextRetriever]] = {
    "substring": SubstringRetriever,
    "keyword": KeywordRetriever,
}


def get_retriever(repository: DocumentRepository) -> ContextRetriever:
    """Get the retriever for the configured strategy."""
    cls = _STRATEGIES.get(settings.retrieval_strategy, SubstringRetriever)
    return cls(repository)
