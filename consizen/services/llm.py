"""LLM service wrapper for Gemini via its OpenAI-compatible API."""

import logging

import openai
from openai import AsyncOpenAI

from consizen.config import settings

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    """Raised when no Gemini API key is configured."""


class UpstreamModelError(Exception):
    """Raised when a single model invocation fails."""

    def __init__(self, model: str, message: str, status_code: int | None = None):
        self.model = model
        self.status_code = status_code
        super().__init__(message)


class LLMService:
    """Async Gemini client wrapper for text generation."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        self.api_key = api_key or settings.gemini_api_key
        self.base_url = base_url or settings.gemini_base_url
        self.client: AsyncOpenAI | None = None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def initialize(self) -> None:
        """Initialize the upstream client."""
        if self.api_key:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=settings.upstream_timeout_seconds,
                max_retries=0,
            )
        else:
            logger.warning("No Gemini API key configured, generation requests will be refused")

    async def generate(self, prompt: str, model: str) -> str:
        """
        Generate text for a prompt with a specific model.

        Args:
            prompt: Full prompt text sent upstream
            model: Gemini model identifier

        Returns:
            Generated response text

        Raises:
            LLMNotConfiguredError: If no API key is configured
            UpstreamModelError: If the model call fails for any reason
        """
        if self.client is None:
            raise LLMNotConfiguredError("LLM client not initialized. Check GEMINI_API_KEY.")

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_tokens=settings.max_output_tokens,
            )
        except openai.RateLimitError as e:
            raise UpstreamModelError(model, f"Rate limit exceeded: {e}", status_code=429)
        except openai.APIStatusError as e:
            raise UpstreamModelError(
                model, f"Model request failed: {e}", status_code=e.status_code
            )
        except openai.APITimeoutError as e:
            raise UpstreamModelError(model, f"Model request timed out: {e}", status_code=504)
        except openai.APIError as e:
            raise UpstreamModelError(model, f"LLM service unavailable: {e}")

        if not response.choices:
            raise UpstreamModelError(model, "Malformed response: no choices returned")

        choice = response.choices[0]
        content = choice.message.content
        if not content:
            # Safety blocks come back as an empty message with a finish reason.
            raise UpstreamModelError(
                model, f"Empty response (finish_reason={choice.finish_reason})"
            )
        return content
