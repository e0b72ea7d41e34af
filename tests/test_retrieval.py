"""Tests for context retrieval and its raw-text fallback."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from pdfchat.core.chunking import TextChunk
from pdfchat.core.retrieval import (
    KeywordRetriever,
    SubstringRetriever,
    build_context,
    get_retriever,
    query_terms,
)
from pdfchat.repositories.memory import MemoryRepository


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _chunk(index: int, content: str) -> TextChunk:
    return TextChunk(content=content, content_hash=f"h{index}", chunk_index=index, page_number=1)


async def _document_with_chunks(repo: MemoryRepository, contents: list[str], text: str = "raw text"):
    document = await repo.create_document(
        filename="doc.pdf",
        original_name="doc.pdf",
        content_type="pdf",
        text_content=text,
        page_count=1,
    )
    await repo.create_chunks(document.id, [_chunk(i, c) for i, c in enumerate(contents)])
    return document


@pytest.fixture
def repo():
    return MemoryRepository()


# ─── Substring strategy ──────────────────────────────────────────────────────

class TestSubstringRetriever:
    @pytest.mark.asyncio
    async def test_matching_chunks_in_index_order(self, repo):
        doc = await _document_with_chunks(repo, [
            "Intro about nothing",
            "Revenue grew in Q3",
            "Costs were flat",
            "Q3 REVENUE details",
        ])

        context = await SubstringRetriever(repo).get_context(doc.id, "revenue")

        assert context == "Revenue grew in Q3\n\nQ3 REVENUE details"

    @pytest.mark.asyncio
    async def test_caps_at_max_chunks(self, repo):
        doc = await _document_with_chunks(repo, [f"match {i}" for i in range(6)])

        context = await SubstringRetriever(repo).get_context(doc.id, "match", max_chunks=2)

        assert context == "match 0\n\nmatch 1"

    @pytest.mark.asyncio
    async def test_no_match_falls_back_to_first_chunks(self, repo):
        doc = await _document_with_chunks(repo, ["one", "two", "three", "four"])

        context = await SubstringRetriever(repo).get_context(doc.id, "absent", max_chunks=3)

        assert context == "one\n\ntwo\n\nthree"

    @pytest.mark.asyncio
    async def test_query_is_matched_as_whole_phrase(self, repo):
        doc = await _document_with_chunks(repo, ["red apples", "green apples", "red car"])

        context = await SubstringRetriever(repo).get_context(doc.id, "red apples")

        assert context == "red apples"


# ─── Fallbacks ───────────────────────────────────────────────────────────────

class TestFallbacks:
    @pytest.mark.asyncio
    async def test_no_chunks_uses_raw_text_prefix(self, repo):
        doc = await _document_with_chunks(repo, [], text="x" * 5000)

        context = await SubstringRetriever(repo).get_context(doc.id, "anything")

        assert context == "x" * 3000

    @pytest.mark.asyncio
    async def test_missing_document_returns_empty(self, repo):
        assert await SubstringRetriever(repo).get_context(uuid4(), "anything") == ""

    @pytest.mark.asyncio
    async def test_non_positive_max_chunks_returns_empty(self, repo):
        doc = await _document_with_chunks(repo, ["content"])
        assert await SubstringRetriever(repo).get_context(doc.id, "content", max_chunks=0) == ""

    @pytest.mark.asyncio
    async def test_lookup_failure_falls_back_to_raw_text(self):
        document = MagicMock(text_content="raw document text")

        mock_repo = MagicMock()
        mock_repo.search_chunks = AsyncMock(side_effect=RuntimeError("db down"))
        mock_repo.get_document = AsyncMock(return_value=document)

        context = await SubstringRetriever(mock_repo).get_context(uuid4(), "query")

        assert context == "raw document text"

    @pytest.mark.asyncio
    async def test_double_failure_returns_empty(self):
        mock_repo = MagicMock()
        mock_repo.search_chunks = AsyncMock(side_effect=RuntimeError("db down"))
        mock_repo.get_document = AsyncMock(side_effect=RuntimeError("db down"))

        context = await SubstringRetriever(mock_repo).get_context(uuid4(), "query")

        assert context == ""

    @pytest.mark.asyncio
    async def test_fallback_length_is_configurable(self, repo):
        doc = await _document_with_chunks(repo, [], text="abcdef")

        context = await SubstringRetriever(repo, fallback_chars=3).get_context(doc.id, "q")

        assert context == "abc"


# ─── Keyword strategy ────────────────────────────────────────────────────────

class TestKeywordRetriever:
    @pytest.mark.asyncio
    async def test_ranks_by_distinct_term_overlap(self, repo):
        doc = await _document_with_chunks(repo, [
            "budget only",
            "the budget for marketing in 2024",
            "marketing only",
            "nothing relevant",
        ])

        context = await KeywordRetriever(repo).get_context(doc.id, "marketing budget 2024", max_chunks=2)

        assert context.split("\n\n") == ["the budget for marketing in 2024", "budget only"]

    @pytest.mark.asyncio
    async def test_no_overlap_uses_first_chunks(self, repo):
        doc = await _document_with_chunks(repo, ["alpha", "beta", "gamma"])

        context = await KeywordRetriever(repo).get_context(doc.id, "zeta", max_chunks=2)

        assert context == "alpha\n\nbeta"


# ─── Helpers and factory ─────────────────────────────────────────────────────

class TestHelpers:
    def test_query_terms(self):
        assert query_terms("What's the Budget, budget?") == {"what", "s", "the", "budget"}

    def test_build_context_empty(self):
        assert build_context([]) == ""

    def test_factory_defaults_to_substring(self, repo):
        assert isinstance(get_retriever(repo), SubstringRetriever)

    def test_factory_selects_keyword(self, repo):
        with patch("pdfchat.core.retrieval.settings") as mock_settings:
            mock_settings.retrieval_strategy = "keyword"
            retriever = get_retriever(repo)

        assert isinstance(retriever, KeywordRetriever)
        assert retriever.name() == "KeywordRetriever"

    def test_factory_unknown_strategy_falls_back(self, repo):
        with patch("pdfchat.core.retrieval.settings") as mock_settings:
            mock_settings.retrieval_strategy = "vector"
            assert isinstance(get_retriever(repo), SubstringRetriever)
