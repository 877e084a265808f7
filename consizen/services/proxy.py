"""Generation proxy - orchestrates caching, model selection and fallback."""

import logging
import time

from consizen.services.cache import ResponseStore, make_cache_key
from consizen.services.llm import LLMNotConfiguredError, LLMService, UpstreamModelError
from consizen.services.metrics import Metrics
from consizen.services.model_policy import DEFAULT_TASK, candidate_models
from consizen.services.prompts import build_upstream_prompt

logger = logging.getLogger(__name__)


class MissingPromptError(ValueError):
    """Raised when a request arrives without a prompt."""

    code = "MISSING_PROMPT"

    def __init__(self):
        super().__init__("Prompt is required")


class AllModelsFailedError(Exception):
    """Raised when every candidate model has failed."""

    code = "ALL_MODELS_FAILED"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class GenerationProxy:
    """
    Serves generation requests for the browser client.

    Flow:
    1. Reject an empty prompt
    2. Return a live cached response for (task, prompt prefix)
    3. On miss: try the policy model, then the fallback model
    4. Cache the first success; failures are never cached
    """

    def __init__(self, cache: ResponseStore, llm: LLMService, metrics: Metrics):
        self.cache = cache
        self.llm = llm
        self.metrics = metrics

    async def handle_generate(
        self,
        prompt: str | None,
        task: str | None = None,
        model_complexity: str | None = None,
        cache_key_source: str | None = None,
    ) -> str:
        """
        Turn a prompt and task hint into generated text.

        Args:
            prompt: Caller's prompt text
            task: Task label used for model selection, defaults to "general"
            model_complexity: "low", "medium" or "high"
            cache_key_source: Text keyed in place of the prompt, for callers
                whose prompts share a long fixed preamble

        Returns:
            Generated (or cached) response text

        Raises:
            MissingPromptError: If prompt is missing or empty
            AllModelsFailedError: If the primary and fallback models both fail
            LLMNotConfiguredError: If no upstream credential is configured
        """
        if not prompt or not prompt.strip():
            self.metrics.record_validation_error()
            raise MissingPromptError()

        start_time = time.time()
        task = task or DEFAULT_TASK
        key = make_cache_key(task, cache_key_source or prompt)

        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.record_cache_hit((time.time() - start_time) * 1000)
            logger.info(f"Cache hit (task={task}): {prompt[:50]}...")
            return cached

        upstream_prompt = build_upstream_prompt(prompt, task)
        candidates = candidate_models(task, model_complexity)
        last_error: UpstreamModelError | None = None

        for attempt, model in enumerate(candidates):
            if attempt > 0:
                self.metrics.record_fallback()
                logger.info(f"Falling back to {model}")

            logger.info(f"Cache miss, calling {model} (task={task}): {prompt[:50]}...")
            try:
                result = await self.llm.generate(upstream_prompt, model)
            except LLMNotConfiguredError:
                self.metrics.record_unavailable()
                raise
            except UpstreamModelError as e:
                self.metrics.record_model_call(model, success=False)
                logger.warning(f"Model {model} failed: {e}")
                last_error = e
                continue

            self.metrics.record_model_call(model, success=True)
            self.cache.set(key, result)
            self.metrics.record_cache_miss((time.time() - start_time) * 1000)
            return result

        self.metrics.record_exhausted()
        message = str(last_error) if last_error else "No candidate models available"
        status_code = last_error.status_code if last_error else None
        logger.error(f"All models failed for task={task}: {message}")
        raise AllModelsFailedError(message, status_code=status_code)

    def forget(
        self,
        prompt: str,
        task: str | None = None,
        cache_key_source: str | None = None,
    ) -> None:
        """Drop a cached response the caller could not use."""
        self.cache.delete(make_cache_key(task or DEFAULT_TASK, cache_key_source or prompt))
