"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from pdfchat.core.retrieval import ContextRetriever, get_retriever
from pdfchat.repositories import DocumentRepository, get_repository
from pdfchat.services.chat import ChatService
from pdfchat.services.ingestion import IngestionService
from pdfchat.services.llm import LLMProvider, get_llm_provider


def get_repo() -> DocumentRepository:
    return get_repository()


def get_llm() -> LLMProvider:
    return get_llm_provider()


def get_context_retriever(
    repository: Annotated[DocumentRepository, Depends(get_repo)],
) -> ContextRetriever:
    return get_retriever(repository)


def get_chat_service(
    llm: Annotated[LLMProvider, Depends(get_llm)],
    repository: Annotated[DocumentRepository, Depends(get_repo)],
    retriever: Annotated[ContextRetriever, Depends(get_context_retriever)],
) -> ChatService:
    return ChatService(llm=llm, repository=repository, retriever=retriever)


def get_ingestion_service(
    repository: Annotated[DocumentRepository, Depends(get_repo)],
) -> IngestionService:
    return IngestionService(repository)


# Type aliases for dependency injection
Repository = Annotated[DocumentRepository, Depends(get_repo)]
Chat = Annotated[ChatService, Depends(get_chat_service)]
Ingestion = Annotated[IngestionService, Depends(get_ingestion_service)]
