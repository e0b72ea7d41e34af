"""Domain errors raised by the ingestion and chat pipeline."""


class DocumentNotFoundError(Exception):
    """Raised when a referenced document has no backing record."""

    def __init__(self, document_id: object):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class InvalidInputError(Exception):
    """Raised for missing or malformed required input."""


class GenerationError(Exception):
    """Raised when the LLM provider fails to produce a response."""


class PersistenceError(Exception):
    """Raised when the storage layer fails."""
