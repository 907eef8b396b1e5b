"""LiteLLM adapter — implements LLMPort using LiteLLM for provider-agnostic LLM calls."""

import logging
from typing import Any

import litellm
import openai
from litellm import acompletion, completion_cost

from domain.model.completion import FinishReason, LLMCompletion
from domain.model.token_usage import LLMCallResult
from port.llm import LLMAuthError, LLMError, LLMRateLimitError, LLMTimeoutError

# Suppress LiteLLM's verbose logging (proxy server warnings, etc.)
litellm.suppress_debug_info = True
litellm.set_verbose = False
logging.getLogger("LiteLLM").setLevel(logging.CRITICAL)

logger = logging.getLogger(__name__)

# LiteLLM normalizes provider finish reasons to OpenAI's vocabulary
_FINISH_REASONS = {
    "stop": FinishReason.STOP,
    "length": FinishReason.MAX_TOKENS,
}


def _extract_provider_from_model(model: str) -> str | None:
    """Extract provider name from model string.

    Args:
        model: Model string (e.g., "gemini/gemini-2.5-flash", "gpt-4.1-mini")

    Returns:
        Provider name or None if not specified in model string.
    """
    if "/" in model:
        return model.split("/")[0]
    if model.startswith("gpt-") or model.startswith("o1") or model.startswith("o3"):
        return "openai"
    return None


def map_finish_reason(raw: str | None) -> FinishReason:
    """Map a LiteLLM finish reason onto the domain enum."""
    if raw is None:
        return FinishReason.STOP
    return _FINISH_REASONS.get(raw.lower(), FinishReason.OTHER)


class LiteLLMAdapter:
    """Adapter that implements LLMPort using LiteLLM.

    Holds no per-request state, so one instance is shared by all requests.
    """

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def generate(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: int,
        temperature: float = 0.1,
        response_schema: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> LLMCompletion:
        """Call the LLM API and return text, finish reason and token usage.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: LiteLLM model identifier.
            max_tokens: Output token ceiling.
            temperature: Sampling temperature.
            response_schema: JSON schema the provider should conform to.
            timeout: Request timeout in seconds.

        Raises:
            ValueError: If messages list is empty.
            LLMTimeoutError: If the provider request times out.
            LLMAuthError: If the credential is rejected.
            LLMRateLimitError: If rate limit is exceeded.
            LLMError: If the LLM API returns any other error.
        """
        if not messages:
            raise ValueError("messages list cannot be empty")

        kwargs: dict[str, Any] = {}
        if response_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "response", "schema": response_schema},
            }

        try:
            response = await acompletion(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                timeout=timeout,
                api_key=self._api_key,
                **kwargs,
            )
        except litellm.Timeout as e:
            raise LLMTimeoutError(str(e)) from e
        except litellm.AuthenticationError as e:
            raise LLMAuthError(str(e)) from e
        except litellm.RateLimitError as e:
            raise LLMRateLimitError(str(e)) from e
        except (litellm.APIError, litellm.APIConnectionError, litellm.BadRequestError,
                litellm.ServiceUnavailableError, litellm.InternalServerError) as e:
            raise LLMError(str(e)) from e
        except openai.APIError as e:
            # NotFoundError, PermissionDeniedError, UnprocessableEntityError etc.
            # derive from openai's status errors, not from litellm.APIError
            raise LLMError(str(e)) from e

        content = ""
        raw_finish_reason = None
        if response.choices and len(response.choices) > 0:
            choice = response.choices[0]
            raw_finish_reason = getattr(choice, "finish_reason", None)
            message = choice.message
            if message and message.content:
                content = message.content.strip()

        if not content:
            logger.warning("No content in LLM response", extra={
                "model": model,
                "response_id": getattr(response, "id", None),
                "finish_reason": raw_finish_reason,
            })

        usage = getattr(response, "usage", None)
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0
        total_tokens = usage.total_tokens if usage else 0

        try:
            estimated_cost = completion_cost(completion_response=response)
        except Exception as e:
            logger.debug("Could not calculate cost with LiteLLM", extra={
                "model": model, "error": str(e),
            })
            estimated_cost = 0.0

        provider = _extract_provider_from_model(model)

        stats = LLMCallResult(
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            estimated_cost=estimated_cost,
            provider=provider,
        )

        logger.debug("LLM API call completed", extra={
            "model": model, "provider": provider,
            "finish_reason": raw_finish_reason,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            "estimated_cost": estimated_cost,
        })

        return LLMCompletion(
            text=content,
            finish_reason=map_finish_reason(raw_finish_reason),
            stats=stats,
            raw_finish_reason=raw_finish_reason,
        )
