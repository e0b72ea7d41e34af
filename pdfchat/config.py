"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: str = "memory"  # memory | database
    database_url: str = "sqlite+aiosqlite:///./pdfchat.db"

    # LLM (OpenAI-compatible chat completions, Hugging Face router by default)
    huggingface_api_key: str = ""
    llm_base_url: str = "https://router.huggingface.co/v1"
    llm_model: str = "meta-llama/Llama-3.1-8B-Instruct"
    llm_timeout_seconds: float = 60.0
    chat_timeout_seconds: float = 90.0  # request boundary

    chat_max_tokens: int = 500
    chat_temperature: float = 0.7
    summary_max_tokens: int = 200
    summary_temperature: float = 0.5

    # Prompt context limits (characters)
    prompt_context_chars: int = 1500
    summary_context_chars: int = 2000

    # Chunking (characters)
    chunk_size: int = 1000
    chunk_overlap: int = 100

    # Retrieval
    retrieval_strategy: str = "substring"  # substring | keyword
    context_max_chunks: int = 3
    context_fallback_chars: int = 3000

    # Extraction
    fast_extraction: bool = False  # skip PDF parsing on constrained hosts

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024

    # App
    cors_origins: list[str] = ["*"]
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
