"""Chat service: grounded prompts, LLM calls and post-hoc citations."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from pdfchat.config import get_settings
from pdfchat.core.exceptions import DocumentNotFoundError, InvalidInputError
from pdfchat.core.retrieval import ContextRetriever
from pdfchat.repositories.base import DocumentRepository, MessageRecord
from pdfchat.schemas.chat import Citation
from pdfchat.services.llm import LLMProvider

settings = get_settings()
logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant that answers questions about documents. "
    "Use the provided document context to answer accurately and cite relevant information."
)
SUMMARY_SYSTEM_PROMPT = "You are a helpful AI assistant that provides concise document summaries."

EMPTY_RESPONSE = "I apologize, but I couldn't generate a response."
EMPTY_SUMMARY = "Unable to generate summary."

MAX_CITATIONS = 3
MIN_SENTENCE_CHARS = 20
MATCH_PREFIX_CHARS = 30
EXCERPT_CHARS = 100
SENTENCES_PER_PAGE = 10


@dataclass
class ChatResult:
    """A generated answer with the citations derived from it."""

    response: str
    citations: list[Citation] = field(default_factory=list)


def history_from_messages(messages: list[MessageRecord]) -> list[dict]:
    """Flatten stored chat turns into role-tagged messages, oldest first."""
    history = []
    for m in messages:
        history.append({"role": "user", "content": m.message})
        history.append({"role": "assistant", "content": m.response})
    return history


class ChatService:
    """Service for document-grounded chat."""

    def __init__(
        self,
        llm: LLMProvider,
        repository: DocumentRepository,
        retriever: ContextRetriever,
    ):
        self.llm = llm
        self.repository = repository
        self.retriever = retriever

    def _build_messages(
        self,
        user_message: str,
        document_context: str,
        conversation_history: list[dict] | None,
    ) -> list[dict]:
        """Build the message list: system, prior turns, then context + question."""
        messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]

        if conversation_history:
            messages.extend(
                {"role": m["role"], "content": m["content"]} for m in conversation_history
            )

        context = document_context[: settings.prompt_context_chars]
        messages.append({
            "role": "user",
            "content": f"Document Context:\n{context}\n\nUser Question: {user_message}",
        })
        return messages

    @staticmethod
    def extract_citations(response_text: str, document_context: str) -> list[Citation]:
        """Cite context sentences whose opening words reappear in the response.

        Page numbers are estimated from the sentence position (ten sentences
        per page).
        """
        sentences = [s for s in document_context.split(".") if len(s.strip()) > MIN_SENTENCE_CHARS]
        response_lower = response_text.lower()

        citations = []
        for index, sentence in enumerate(sentences):
            sentence = sentence.strip()
            if sentence.lower()[:MATCH_PREFIX_CHARS] in response_lower:
                citations.append(Citation(
                    page_number=index // SENTENCES_PER_PAGE + 1,
                    content=sentence[:EXCERPT_CHARS] + "...",
                ))
                if len(citations) == MAX_CITATIONS:
                    break

        return citations

    async def respond(
        self,
        user_message: str,
        document_context: str,
        conversation_history: list[dict] | None = None,
    ) -> ChatResult:
        """Generate a grounded answer. Provider failures raise GenerationError."""
        messages = self._build_messages(user_message, document_context, conversation_history)

        completion = await self.llm.complete(
            messages,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
        )

        logger.info(
            "LLM reply for chat: %d chars, %d input tokens, %d output tokens",
            len(completion.text),
            completion.tokens_input,
            completion.tokens_output,
        )

        response_text = completion.text.strip() or EMPTY_RESPONSE
        citations = self.extract_citations(response_text, document_context)

        return ChatResult(response=response_text, citations=citations)

    async def summarize(self, document_text: str) -> str:
        """Generate a short summary of a document's text."""
        prompt = (
            "Please provide a concise summary of the following document:\n\n"
            f"{document_text[: settings.summary_context_chars]}...\n\nSummary:"
        )
        completion = await self.llm.complete(
            [
                {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=settings.summary_max_tokens,
            temperature=settings.summary_temperature,
        )
        return completion.text.strip() or EMPTY_SUMMARY

    async def chat_with_document(self, document_id: UUID, message: str) -> MessageRecord:
        """Run one chat turn: retrieve context, generate, persist."""
        if not message or not message.strip():
            raise InvalidInputError("Message is required")

        document = await self.repository.get_document(document_id)
        if not document:
            raise DocumentNotFoundError(document_id)

        context = await self.retriever.get_context(document_id, message)
        history = history_from_messages(await self.repository.get_messages(document_id))

        result = await self.respond(message, context, history)

        chat_message = await self.repository.create_message(
            document_id,
            message,
            result.response,
            result.citations,
        )
        logger.info(
            "Saved chat message for document %s (%d chars, %d citations)",
            document_id,
            len(result.response),
            len(result.citations),
        )
        return chat_message

    async def summarize_document(self, document_id: UUID) -> str:
        document = await self.repository.get_document(document_id)
        if not document:
            raise DocumentNotFoundError(document_id)
        return await self.summarize(document.text_content)
