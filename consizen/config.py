"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # No default credential: an empty key makes the upstream unavailable.
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    upstream_timeout_seconds: float = 30.0

    temperature: float = 0.7
    top_p: float = 0.95
    max_output_tokens: int = 1024

    cache_backend: str = "memory"
    redis_url: str = "redis://localhost:6379"
    cache_max_entries: int = 100
    cache_ttl_seconds: int = 3600

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
