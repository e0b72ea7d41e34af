"""Repository factory: select backend based on config."""

from functools import lru_cache

from pdfchat.config import get_settings
from pdfchat.repositories.base import DocumentRepository
from pdfchat.repositories.memory import MemoryRepository
from pdfchat.repositories.sql import SqlRepository

settings = get_settings()

_BACKENDS: dict[str, type[DocumentRepository]] = {
    "memory": MemoryRepository,
    "database": SqlRepository,
}


@lru_cache
def get_repository() -> DocumentRepository:
    """Get the process-wide repository for the configured backend."""
    cls = _BACKENDS.get(settings.storage_backend)
    if not cls:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    return cls()
