"""Model invoker — one generation call with a wall-clock timeout.

Translates port-level failures into the domain error taxonomy and turns a
"max output length" finish reason into TruncatedOutputError.
"""

import asyncio
import logging
from typing import Any

from domain.model.completion import FinishReason, LLMCompletion
from domain.model.errors import (
    ConfigurationMissingError,
    ModelTimeoutError,
    TruncatedOutputError,
    UpstreamRejectedError,
)
from port.llm import LLMError, LLMPort, LLMTimeoutError

logger = logging.getLogger(__name__)


async def invoke_model(
    llm: LLMPort,
    model: str,
    messages: list[dict[str, str]],
    max_tokens: int,
    timeout: float,
    temperature: float = 0.1,
    response_schema: dict[str, Any] | None = None,
) -> LLMCompletion:
    """Run one generation call raced against ``timeout``.

    On timeout the in-flight call is cancelled by ``asyncio.wait_for``.

    Raises:
        ConfigurationMissingError: No provider credential.
        ModelTimeoutError: The call did not finish in time.
        TruncatedOutputError: The output budget ran out.
        UpstreamRejectedError: Any other provider failure.
    """
    if not llm.is_configured:
        raise ConfigurationMissingError("GEMINI_API_KEY environment variable is not set", model)

    try:
        completion = await asyncio.wait_for(
            llm.generate(
                messages=messages,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                response_schema=response_schema,
                timeout=timeout,
            ),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, LLMTimeoutError) as e:
        logger.warning("Model request timed out", extra={"model": model, "timeout": timeout})
        raise ModelTimeoutError(model, timeout) from e
    except LLMError as e:
        logger.error("Model request rejected by provider", extra={
            "model": model, "error": str(e), "errorType": type(e).__name__,
        })
        raise UpstreamRejectedError(f"Model request failed ({model})", model) from e

    if completion.finish_reason == FinishReason.MAX_TOKENS:
        logger.warning("Model output hit max tokens", extra={
            "model": model, "max_tokens": max_tokens,
            "completion_tokens": completion.stats.completion_tokens,
        })
        error = TruncatedOutputError(model, max_tokens)
        error.stats = completion.stats
        raise error

    if completion.finish_reason == FinishReason.OTHER:
        # Partial output may still parse, so keep going
        logger.warning("Unexpected finish reason", extra={
            "model": model, "finish_reason": completion.raw_finish_reason,
        })

    return completion
