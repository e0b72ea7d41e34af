"""Text extraction for uploaded documents.

Extraction never fails outward: when the PDF decoder yields nothing or
raises, a descriptive placeholder is returned with ``degraded=True`` so the
document can still be chatted with.
"""

import io
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pypdf import PdfReader

from pdfchat.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class DocumentFormat(str, Enum):
    """Explicit format tag chosen by the caller."""

    PDF = "pdf"
    TEXT = "text"


@dataclass
class ExtractionResult:
    """Result of extracting text from a document."""

    text: str
    page_count: int
    degraded: bool = False
    reason: str | None = None


class DocumentParser(ABC):
    """Abstract base class for document parsers."""

    @abstractmethod
    def parse(self, content: bytes, original_name: str) -> ExtractionResult:
        """Parse document content."""
        pass

    @staticmethod
    def strip_control_chars(text: str) -> str:
        """Remove control characters except newlines and tabs."""
        return re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]", "", text)

    @classmethod
    def clean_text(cls, text: str) -> str:
        """Clean and normalize text to a single line."""
        text = re.sub(r"\s+", " ", text)
        return cls.strip_control_chars(text).strip()


class PDFParser(DocumentParser):
    """Parser for PDF files using pypdf."""

    def parse(self, content: bytes, original_name: str) -> ExtractionResult:
        try:
            reader = PdfReader(io.BytesIO(content))
            page_texts = [self.clean_text(page.extract_text() or "") for page in reader.pages]
            page_count = len(reader.pages)
        except Exception as e:
            logger.warning("PDF decoding failed for %s: %s", original_name, e)
            return ExtractionResult(
                text=unreadable_pdf_text(original_name),
                page_count=1,
                degraded=True,
                reason=f"decoder error: {type(e).__name__}",
            )

        text = "\n\n".join(page_texts).strip()
        if not text:
            logger.info("No extractable text in %s (%d pages)", original_name, page_count)
            return ExtractionResult(
                text=image_based_pdf_text(original_name),
                page_count=1,
                degraded=True,
                reason="no extractable text",
            )

        return ExtractionResult(
            text=text,
            page_count=max(1, page_count),
        )


class TextParser(DocumentParser):
    """Parser for plain text stand-ins (e.g. the built-in sample)."""

    def parse(self, content: bytes, original_name: str) -> ExtractionResult:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError:
            # latin-1 maps every byte
            text = content.decode("latin-1")

        text = self.strip_control_chars(text).strip()
        if not text:
            return ExtractionResult(
                text=f"Text Document: {original_name}\n\nThis document contains no text.",
                page_count=1,
                degraded=True,
                reason="empty text",
            )

        return ExtractionResult(text=text, page_count=1)


PARSERS: dict[DocumentFormat, type[DocumentParser]] = {
    DocumentFormat.PDF: PDFParser,
    DocumentFormat.TEXT: TextParser,
}

CONTENT_TYPE_TO_FORMAT: dict[str, DocumentFormat] = {
    "application/pdf": DocumentFormat.PDF,
    "text/plain": DocumentFormat.TEXT,
}

# Extension fallback mapping
EXTENSION_TO_FORMAT: dict[str, DocumentFormat] = {
    ".pdf": DocumentFormat.PDF,
    ".txt": DocumentFormat.TEXT,
}


def resolve_format(content_type: str | None, filename: str) -> DocumentFormat | None:
    """Map a declared MIME type (or, failing that, the extension) to a format."""
    if content_type and content_type in CONTENT_TYPE_TO_FORMAT:
        return CONTENT_TYPE_TO_FORMAT[content_type]
    return EXTENSION_TO_FORMAT.get(Path(filename).suffix.lower())


def title_from_filename(name: str) -> str:
    """Derive a readable title from a file name."""
    stem = Path(name).stem
    return re.sub(r"[-_]+", " ", stem).strip() or name


def image_based_pdf_text(original_name: str) -> str:
    return (
        f"PDF Document: {original_name}\n\n"
        "This PDF appears to be image-based or contains no extractable text. "
        "Please try uploading a text-based PDF or use the sample document "
        "to test the chat functionality."
    )


def unreadable_pdf_text(original_name: str) -> str:
    title = title_from_filename(original_name)
    return (
        f"PDF Document Analysis: {original_name}\n\n"
        "This appears to be a PDF document, but its text could not be "
        "extracted automatically.\n\n"
        f'Based on the file name, the document seems to be about "{title}".\n\n'
        "To get the best results, you could:\n"
        "1. Try uploading the document again\n"
        "2. Use the sample document to test the chat functionality\n"
        "3. Paste the relevant text directly into the chat\n\n"
        "Questions can still be answered about the topic suggested by the file name."
    )


def extract_text(
    content: bytes,
    filename: str,
    original_name: str,
    content_format: DocumentFormat,
) -> ExtractionResult:
    """Extract plain text and a page count from raw document bytes."""
    if settings.fast_extraction:
        logger.info("Fast extraction enabled, skipping parse of %s", original_name)
        return ExtractionResult(
            text=(
                f"Document: {original_name}\n\n"
                "Text extraction is disabled on this deployment. "
                "Answers will not be grounded in the document content."
            ),
            page_count=1,
            degraded=True,
            reason="fast extraction mode",
        )

    parser = PARSERS[DocumentFormat(content_format)]()
    result = parser.parse(content, original_name or filename)

    logger.info(
        "Extracted %s (%s): %d chars, %d pages, degraded=%s",
        original_name,
        content_format,
        len(result.text),
        result.page_count,
        result.degraded,
    )
    return result
