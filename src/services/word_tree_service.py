"""Word derivation tree service — single-attempt generation.

No retry tiers and no truncation repair: any failure becomes one
WordTreeError.
"""

import logging

from domain.model.analysis import WordTreeResult
from domain.model.errors import AnalysisError, WordTreeError
from domain.model.schema import word_tree_response_schema
from port.llm import LLMPort
from services.model_invoker import invoke_model
from services.response_validator import validate_word_tree_payload
from utils.json_parsing import parse_json_content
from utils.prompts import build_word_tree_messages

logger = logging.getLogger(__name__)

WORD_TREE_MAX_TOKENS = 4096
WORD_TREE_TIMEOUT = 25.0
WORD_TREE_TEMPERATURE = 0.2

WORD_TREE_FAILURE_MESSAGE = "Word tree generation failed. Please try again."


async def generate_word_tree(
    root: str,
    word: str,
    llm: LLMPort,
    model: str,
    timeout: float = WORD_TREE_TIMEOUT,
) -> WordTreeResult:
    """Generate words derived from ``root`` (seen in ``word``).

    Raises:
        WordTreeError: On any provider, parsing or shape failure.
    """
    try:
        completion = await invoke_model(
            llm,
            model=model,
            messages=build_word_tree_messages(root, word),
            max_tokens=WORD_TREE_MAX_TOKENS,
            timeout=timeout,
            temperature=WORD_TREE_TEMPERATURE,
            response_schema=word_tree_response_schema(),
        )
    except AnalysisError as e:
        logger.error("Word tree model call failed", extra={
            "root": root, "errorKind": e.kind.value, "error": str(e),
        })
        raise WordTreeError(WORD_TREE_FAILURE_MESSAGE) from e

    data = parse_json_content(completion.text)
    if data is None:
        logger.error("Word tree response is not JSON", extra={
            "root": root, "content_preview": completion.text[:200],
        })
        raise WordTreeError(WORD_TREE_FAILURE_MESSAGE)

    validation = validate_word_tree_payload(data)
    if not validation:
        logger.error("Word tree response failed validation", extra={
            "root": root, "field_path": validation.field_path, "reason": validation.reason,
        })
        raise WordTreeError(WORD_TREE_FAILURE_MESSAGE)

    result = WordTreeResult.from_payload(data)
    logger.info("Word tree generated", extra={
        "root": root, "word": word, "derivative_count": len(result.derivatives),
        **completion.stats.to_dict(),
    })
    return result
