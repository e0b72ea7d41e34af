"""Tests for the chat service: prompt layout, citations and persistence."""

import logging
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from pdfchat.core.chunking import chunk_text
from pdfchat.core.exceptions import DocumentNotFoundError, GenerationError, InvalidInputError
from pdfchat.core.retrieval import SubstringRetriever
from pdfchat.repositories.memory import MemoryRepository
from pdfchat.services.chat import (
    CHAT_SYSTEM_PROMPT,
    EMPTY_RESPONSE,
    EMPTY_SUMMARY,
    SUMMARY_SYSTEM_PROMPT,
    ChatService,
    history_from_messages,
)
from pdfchat.services.llm import Completion, LLMProvider


class FakeLLM(LLMProvider):
    """Returns canned replies and records every request."""

    def __init__(self, replies: list[str] | None = None):
        self.replies = list(replies or ["A generated answer."])
        self.calls: list[dict] = []

    async def complete(self, messages, max_tokens, temperature):
        self.calls.append({"messages": messages, "max_tokens": max_tokens, "temperature": temperature})
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return Completion(text=reply)


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def repo():
    return MemoryRepository()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def service(llm, repo):
    return ChatService(llm=llm, repository=repo, retriever=SubstringRetriever(repo))


async def _ingest(repo: MemoryRepository, text: str, page_count: int = 1):
    document = await repo.create_document(
        filename="doc.pdf",
        original_name="doc.pdf",
        content_type="pdf",
        text_content=text,
        page_count=page_count,
    )
    await repo.create_chunks(document.id, chunk_text(text, page_count))
    return document


# ─── respond ─────────────────────────────────────────────────────────────────

class TestRespond:
    @pytest.mark.asyncio
    async def test_message_layout(self, service, llm):
        history = [
            {"role": "user", "content": "Earlier question"},
            {"role": "assistant", "content": "Earlier answer"},
        ]

        await service.respond("What is it?", "Some context.", history)

        messages = llm.calls[0]["messages"]
        assert messages[0] == {"role": "system", "content": CHAT_SYSTEM_PROMPT}
        assert messages[1:3] == history
        assert messages[3] == {
            "role": "user",
            "content": "Document Context:\nSome context.\n\nUser Question: What is it?",
        }
        assert llm.calls[0]["max_tokens"] == 500
        assert llm.calls[0]["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_context_truncated_in_prompt(self, service, llm):
        await service.respond("Q?", "c" * 5000)

        final = llm.calls[0]["messages"][-1]["content"]
        assert final == "Document Context:\n" + "c" * 1500 + "\n\nUser Question: Q?"

    @pytest.mark.asyncio
    async def test_empty_reply_becomes_apology(self, repo):
        service = ChatService(llm=FakeLLM(["   "]), repository=repo, retriever=SubstringRetriever(repo))

        result = await service.respond("Q?", "context")

        assert result.response == EMPTY_RESPONSE
        assert result.citations == []

    @pytest.mark.asyncio
    async def test_empty_context_still_calls_llm(self, service, llm):
        result = await service.respond("Q?", "")

        assert len(llm.calls) == 1
        assert result.citations == []

    @pytest.mark.asyncio
    async def test_logs_token_usage(self, repo, caplog):
        llm = AsyncMock(spec=LLMProvider)
        llm.complete.return_value = Completion(text="Answer", tokens_input=42, tokens_output=7)
        service = ChatService(llm=llm, repository=repo, retriever=SubstringRetriever(repo))

        with caplog.at_level(logging.INFO, logger="pdfchat.services.chat"):
            await service.respond("Q?", "context")

        assert "42 input tokens, 7 output tokens" in caplog.text

    @pytest.mark.asyncio
    async def test_generation_error_propagates(self, repo):
        llm = AsyncMock(spec=LLMProvider)
        llm.complete.side_effect = GenerationError("provider down")
        service = ChatService(llm=llm, repository=repo, retriever=SubstringRetriever(repo))

        with pytest.raises(GenerationError):
            await service.respond("Q?", "context")


# ─── Citations ───────────────────────────────────────────────────────────────

class TestCitations:
    def test_cites_sentences_echoed_in_response(self):
        context = (
            "The quarterly revenue increased by twelve percent. "
            "Short one. "
            "Operating costs remained flat across all regions."
        )
        response = "As stated, the quarterly revenue increased by twelve percent overall."

        citations = ChatService.extract_citations(response, context)

        assert len(citations) == 1
        assert citations[0].page_number == 1
        assert citations[0].content == "The quarterly revenue increased by twelve percent..."

    def test_caps_at_three(self):
        sentences = [f"Repeated sentence number {i} with padding" for i in range(6)]
        context = ". ".join(sentences) + "."
        response = " ".join(s.lower() for s in sentences)

        citations = ChatService.extract_citations(response, context)

        assert len(citations) == 3
        for citation in citations:
            assert citation.content.endswith("...")
            assert citation.content[:-3] in context

    def test_page_estimated_from_sentence_position(self):
        sentences = [f"Sentence {i:02d} filler text for the position test" for i in range(12)]
        context = ". ".join(sentences) + "."
        response = sentences[11]

        citations = ChatService.extract_citations(response, context)

        assert [c.page_number for c in citations] == [2]

    def test_no_match(self):
        assert ChatService.extract_citations("unrelated", "A sentence that is long enough here.") == []


# ─── chat_with_document ──────────────────────────────────────────────────────

class TestChatWithDocument:
    @pytest.mark.asyncio
    async def test_persists_turn_and_passes_history(self, service, repo, llm):
        doc = await _ingest(repo, "Revenue grew strongly in the third quarter of the year.")

        first = await service.chat_with_document(doc.id, "revenue")
        await service.chat_with_document(doc.id, "Anything else?")

        stored = await repo.get_messages(doc.id)
        assert [m.message for m in stored] == ["revenue", "Anything else?"]
        assert stored[0].id == first.id
        assert "Revenue grew strongly" in llm.calls[0]["messages"][-1]["content"]

        second_call = llm.calls[1]["messages"]
        assert second_call[1] == {"role": "user", "content": "revenue"}
        assert second_call[2] == {"role": "assistant", "content": "A generated answer."}

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, service, repo, llm):
        doc = await _ingest(repo, "Some text.")

        with pytest.raises(InvalidInputError):
            await service.chat_with_document(doc.id, "   ")

        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_missing_document(self, service, llm):
        with pytest.raises(DocumentNotFoundError):
            await service.chat_with_document(uuid4(), "Hello?")

        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_failed_generation_is_not_persisted(self, repo):
        llm = AsyncMock(spec=LLMProvider)
        llm.complete.side_effect = GenerationError("provider down")
        service = ChatService(llm=llm, repository=repo, retriever=SubstringRetriever(repo))
        doc = await _ingest(repo, "Some text.")

        with pytest.raises(GenerationError):
            await service.chat_with_document(doc.id, "Hello?")

        assert await repo.get_messages(doc.id) == []


# ─── Summaries ───────────────────────────────────────────────────────────────

class TestSummarize:
    @pytest.mark.asyncio
    async def test_summary_prompt(self, service, llm):
        await service.summarize("d" * 3000)

        call = llm.calls[0]
        assert call["messages"][0] == {"role": "system", "content": SUMMARY_SYSTEM_PROMPT}
        assert call["messages"][1]["content"] == (
            "Please provide a concise summary of the following document:\n\n"
            + "d" * 2000
            + "...\n\nSummary:"
        )
        assert call["max_tokens"] == 200
        assert call["temperature"] == 0.5

    @pytest.mark.asyncio
    async def test_empty_summary_fallback(self, repo):
        service = ChatService(llm=FakeLLM([""]), repository=repo, retriever=SubstringRetriever(repo))
        assert await service.summarize("text") == EMPTY_SUMMARY

    @pytest.mark.asyncio
    async def test_summarize_missing_document(self, service):
        with pytest.raises(DocumentNotFoundError):
            await service.summarize_document(uuid4())


def test_history_from_messages_empty():
    assert history_from_messages([]) == []
