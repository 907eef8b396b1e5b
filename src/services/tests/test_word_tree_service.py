"""Unit tests for word tree generation."""

import json
import unittest
from unittest.mock import AsyncMock, patch

import httpx
import litellm

from adapter.external.litellm import LiteLLMAdapter
from adapter.fake.llm import FakeLLMAdapter, FakeReply
from domain.model.completion import FinishReason
from domain.model.errors import WordTreeError
from port.llm import LLMRateLimitError
from services.word_tree_service import (
    WORD_TREE_FAILURE_MESSAGE,
    WORD_TREE_MAX_TOKENS,
    WORD_TREE_TEMPERATURE,
    generate_word_tree,
)

MODEL = "gemini/gemini-2.5-flash"


def _tree_json() -> str:
    return json.dumps({
        "root": "port",
        "rootMeaning": "to carry",
        "derivatives": [
            {"word": "port", "meaning": "a harbour", "rootHighlight": [0, 4]},
            {"word": "export", "meaning": "send goods abroad", "rootHighlight": [2, 4]},
            {"word": "transport", "meaning": "carry across", "rootHighlight": [5, 4]},
        ],
    })


class TestGenerateWordTree(unittest.IsolatedAsyncioTestCase):
    """Test cases for generate_word_tree."""

    async def test_success(self):
        llm = FakeLLMAdapter(response=_tree_json())

        result = await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(result.root, "port")
        self.assertEqual(result.root_meaning, "to carry")
        self.assertEqual([d.word for d in result.derivatives], ["port", "export", "transport"])
        self.assertEqual(result.derivatives[2].root_highlight, (5, 4))

    async def test_single_call_with_word_tree_parameters(self):
        llm = FakeLLMAdapter(response=_tree_json())

        await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(len(llm.calls), 1)
        call = llm.calls[0]
        self.assertEqual(call["model"], MODEL)
        self.assertEqual(call["max_tokens"], WORD_TREE_MAX_TOKENS)
        self.assertEqual(call["temperature"], WORD_TREE_TEMPERATURE)
        self.assertIn("derivatives", call["response_schema"]["properties"])
        self.assertIn('"port"', call["messages"][-1]["content"])
        self.assertIn('"transport"', call["messages"][-1]["content"])

    async def test_fenced_response_accepted(self):
        llm = FakeLLMAdapter(response=f"```json\n{_tree_json()}\n```")

        result = await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(len(result.derivatives), 3)

    async def test_non_json_fails(self):
        llm = FakeLLMAdapter(response="port, export, transport")

        with self.assertRaises(WordTreeError) as ctx:
            await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(str(ctx.exception), WORD_TREE_FAILURE_MESSAGE)

    async def test_invalid_shape_fails(self):
        llm = FakeLLMAdapter(response=json.dumps({"root": "port", "derivatives": []}))

        with self.assertRaises(WordTreeError):
            await generate_word_tree("port", "transport", llm, MODEL)

    async def test_truncated_output_fails_without_retry(self):
        llm = FakeLLMAdapter(replies=[
            FakeReply(text='{"root": "port", "derivatives": [{"word": "a"},', finish_reason=FinishReason.MAX_TOKENS),
            FakeReply(text=_tree_json()),
        ])

        with self.assertRaises(WordTreeError):
            await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(len(llm.calls), 1)

    async def test_timeout_fails(self):
        llm = FakeLLMAdapter(replies=[FakeReply(text=_tree_json(), delay=1.0)])

        with self.assertRaises(WordTreeError):
            await generate_word_tree("port", "transport", llm, MODEL, timeout=0.05)

    async def test_provider_error_fails(self):
        llm = FakeLLMAdapter(replies=[LLMRateLimitError("quota")])

        with self.assertRaises(WordTreeError) as ctx:
            await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(str(ctx.exception), WORD_TREE_FAILURE_MESSAGE)

    async def test_provider_status_error_fails(self):
        """A provider status error outside litellm.APIError still yields WordTreeError."""
        error = litellm.PermissionDeniedError(
            "Permission denied", llm_provider="gemini", model=MODEL,
            response=httpx.Response(403, request=httpx.Request("POST", "https://generativelanguage.test")),
        )
        llm = LiteLLMAdapter(api_key="test-key")

        with patch("adapter.external.litellm.acompletion", new_callable=AsyncMock, side_effect=error):
            with self.assertRaises(WordTreeError) as ctx:
                await generate_word_tree("port", "transport", llm, MODEL)

        self.assertEqual(str(ctx.exception), WORD_TREE_FAILURE_MESSAGE)

    async def test_unconfigured_fails(self):
        llm = FakeLLMAdapter(configured=False)

        with self.assertRaises(WordTreeError):
            await generate_word_tree("port", "transport", llm, MODEL)


if __name__ == '__main__':
    unittest.main()
