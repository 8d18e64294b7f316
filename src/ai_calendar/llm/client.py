from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
from openai import OpenAI, OpenAIError

from ..config import LlmSettings

logger = logging.getLogger(__name__)


class TextGenerationError(RuntimeError):
    """Raised when the text-generation endpoint is unreachable or answers with an error."""


class TextGenerator(Protocol):
    def generate(self, prompt: str, *, model: str, temperature: float, max_tokens: int) -> str: ...

    def health_check(self) -> bool: ...


class OllamaClient:
    """Client for an Ollama-compatible ``/api/generate`` endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def generate(self, prompt: str, *, model: str, temperature: float, max_tokens: int) -> str:
        body = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }
        try:
            response = self._client.post("/api/generate", json=body)
        except httpx.HTTPError as exc:
            raise TextGenerationError(f"LLM request failed: {exc}") from exc

        if response.is_error:
            raise TextGenerationError(f"LLM request failed: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise TextGenerationError("LLM returned a body that is not JSON") from exc
        if not isinstance(payload, dict) or "response" not in payload:
            raise TextGenerationError("LLM response is missing the 'response' field")
        return str(payload["response"] or "")

    def health_check(self) -> bool:
        try:
            response = self._client.get("/api/tags")
        except httpx.HTTPError as exc:
            logger.warning("LLM health check failed: %s", exc)
            return False
        return response.is_success

    def close(self) -> None:
        self._client.close()


class OpenAIChatClient:
    """Client for OpenAI-compatible chat completion endpoints."""

    def __init__(self, api_key: Optional[str], *, base_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self._client = OpenAI(api_key=api_key, base_url=base_url or None, timeout=timeout)

    def generate(self, prompt: str, *, model: str, temperature: float, max_tokens: int) -> str:
        try:
            completion = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            raise TextGenerationError(f"LLM request failed: {exc}") from exc
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    def health_check(self) -> bool:
        try:
            self._client.models.list()
        except OpenAIError as exc:
            logger.warning("LLM health check failed: %s", exc)
            return False
        return True


def build_text_generator(settings: LlmSettings) -> TextGenerator:
    if not settings.is_configured:
        logger.warning("Text generation is not configured; missing %s", ", ".join(settings.missing_env_vars))
    timeout = settings.timeout.total_seconds()
    if settings.provider == "openai":
        return OpenAIChatClient(settings.api_key, base_url=settings.base_url, timeout=timeout)
    return OllamaClient(settings.base_url, timeout=timeout)
