"""Unit tests for POST /word-tree."""

import json
import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_app_settings, get_llm_port
from adapter.fake.llm import FakeLLMAdapter
from port.llm import LLMError
from utils.config import Settings


def _tree() -> dict:
    return {
        "root": "struct",
        "rootMeaning": "to build",
        "derivatives": [
            {"word": "structure", "meaning": "something built", "rootHighlight": [0, 6]},
            {"word": "construct", "meaning": "to build", "rootHighlight": [3, 6]},
            {"word": "destruction", "meaning": "act of ruining", "rootHighlight": [2, 6]},
        ],
    }


class TestWordTreeRoute(unittest.TestCase):
    """Test cases for POST /word-tree endpoint."""

    def setUp(self):
        """Set up test client."""
        self.client = TestClient(app)
        self.settings = Settings(api_key="test-key", primary_model="gemini/gemini-2.5-flash")
        app.dependency_overrides[get_app_settings] = lambda: self.settings

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()

    def test_word_tree_success(self):
        llm = FakeLLMAdapter(response=json.dumps(_tree()))
        app.dependency_overrides[get_llm_port] = lambda: llm

        response = self.client.post("/word-tree", json={"root": "struct", "word": "construction"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["root"], "struct")
        self.assertEqual(data["rootMeaning"], "to build")
        self.assertEqual(len(data["derivatives"]), 3)
        self.assertEqual(data["derivatives"][1]["rootHighlight"], [3, 6])
        self.assertEqual(llm.calls[0]["model"], "gemini/gemini-2.5-flash")

    def test_inputs_trimmed(self):
        llm = FakeLLMAdapter(response=json.dumps(_tree()))
        app.dependency_overrides[get_llm_port] = lambda: llm

        self.client.post("/word-tree", json={"root": " struct ", "word": " construction\n"})

        self.assertIn('"struct"', llm.calls[0]["messages"][-1]["content"])
        self.assertIn('"construction"', llm.calls[0]["messages"][-1]["content"])

    def test_missing_root_returns_400(self):
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter()

        response = self.client.post("/word-tree", json={"word": "construction"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Root is required"})

    def test_missing_word_returns_400(self):
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter()

        response = self.client.post("/word-tree", json={"root": "struct", "word": "  "})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Word is required"})

    def test_invalid_model_output_returns_500(self):
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter(response="struct, construct")

        response = self.client.post("/word-tree", json={"root": "struct", "word": "construction"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Word tree generation failed. Please try again."})

    def test_provider_error_returns_500(self):
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter(replies=[LLMError("boom")])

        response = self.client.post("/word-tree", json={"root": "struct", "word": "construction"})

        self.assertEqual(response.status_code, 500)
        self.assertNotIn("boom", response.json()["error"])


if __name__ == '__main__':
    unittest.main()
