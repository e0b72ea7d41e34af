"""Document ingestion: extract, chunk and persist in one request."""

import logging

from pdfchat.core.chunking import Chunker, chunker as default_chunker
from pdfchat.core.exceptions import InvalidInputError
from pdfchat.core.parsing import DocumentFormat, extract_text
from pdfchat.repositories.base import DocumentRecord, DocumentRepository
from pdfchat.services.sample import SAMPLE_FILENAME, SAMPLE_ORIGINAL_NAME, generate_sample_content

logger = logging.getLogger(__name__)


class IngestionService:
    """Turns uploaded bytes into a stored document and its chunks."""

    def __init__(self, repository: DocumentRepository, chunker: Chunker = default_chunker):
        self.repository = repository
        self.chunker = chunker

    async def ingest(
        self,
        content: bytes,
        filename: str,
        original_name: str,
        content_format: DocumentFormat,
    ) -> DocumentRecord:
        """
        Process an upload: extract text, store the document, chunk and store chunks.

        Extraction problems are absorbed into placeholder text; only storage
        errors propagate.
        """
        if not content:
            raise InvalidInputError("Empty file")

        # 1. Extract text (never raises; degraded results carry placeholder text)
        extracted = extract_text(content, filename, original_name, content_format)

        # 2. Store document
        document = await self.repository.create_document(
            filename=filename,
            original_name=original_name,
            content_type=DocumentFormat(content_format).value,
            text_content=extracted.text,
            page_count=extracted.page_count,
            extraction_degraded=extracted.degraded,
            pdf_data=content,
        )

        # 3. Chunk and store chunks
        chunks = self.chunker.chunk(extracted.text, extracted.page_count)
        await self.repository.create_chunks(document.id, chunks)

        logger.info(
            "Document %s ingested: %s, %d pages, %d chunks, degraded=%s",
            document.id,
            original_name,
            document.page_count,
            len(chunks),
            extracted.degraded,
        )
        return document

    async def ingest_sample(self) -> DocumentRecord:
        """Ingest the built-in demo document through the plain-text path."""
        return await self.ingest(
            generate_sample_content().encode("utf-8"),
            SAMPLE_FILENAME,
            SAMPLE_ORIGINAL_NAME,
            DocumentFormat.TEXT,
        )
