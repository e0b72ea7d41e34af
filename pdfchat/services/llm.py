"""LLM provider for chat completions.

Hugging Face's inference router speaks the OpenAI chat-completions protocol,
so the OpenAI client is used with a different base URL.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache

from openai import AsyncOpenAI, OpenAIError

from pdfchat.config import get_settings
from pdfchat.core.exceptions import GenerationError

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class Completion:
    """Text generated by the provider."""

    text: str
    tokens_input: int = 0
    tokens_output: int = 0


class LLMProvider(ABC):
    """Interface for text-completion providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[dict],
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        """Generate a reply to role-tagged messages. Raises GenerationError on failure."""


class OpenAICompatibleProvider(LLMProvider):
    """Chat completions over any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.client = AsyncOpenAI(
            api_key=api_key if api_key is not None else settings.huggingface_api_key,
            base_url=base_url or settings.llm_base_url,
            timeout=timeout or settings.llm_timeout_seconds,
            max_retries=0,
        )
        self.model = model or settings.llm_model

    async def complete(
        self,
        messages: list[dict],
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("LLM request to %s failed: %s", self.model, e)
            raise GenerationError(f"LLM provider request failed: {type(e).__name__}") from e

        text = ""
        if response.choices and response.choices[0].message:
            text = response.choices[0].message.content or ""

        return Completion(
            text=text,
            tokens_input=response.usage.prompt_tokens if response.usage else 0,
            tokens_output=response.usage.completion_tokens if response.usage else 0,
        )


@lru_cache
def get_llm_provider() -> LLMProvider:
    """Get the process-wide LLM provider."""
    return OpenAICompatibleProvider()
