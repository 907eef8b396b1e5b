"""LLM port — outbound interface for large language model calls."""

from typing import Any, Protocol

from domain.model.completion import LLMCompletion


class LLMError(Exception):
    """Base exception for LLM port errors."""


class LLMTimeoutError(LLMError):
    """LLM request timed out."""


class LLMRateLimitError(LLMError):
    """LLM provider rate limit exceeded."""


class LLMAuthError(LLMError):
    """LLM provider authentication failed."""


class LLMPort(Protocol):
    """Port for making LLM generation calls with token usage tracking."""

    @property
    def is_configured(self) -> bool:
        """Whether a provider credential is available."""
        ...

    async def generate(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: int,
        temperature: float = 0.1,
        response_schema: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> LLMCompletion:
        """Run one completion and return its text and finish reason.

        Raises:
            LLMTimeoutError, LLMAuthError, LLMRateLimitError, LLMError
        """
        ...
