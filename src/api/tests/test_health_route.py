"""Unit tests for health and root endpoints."""

import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app, SERVICE_NAME, VERSION
from api.dependencies import get_app_settings, get_llm_port
from adapter.fake.llm import FakeLLMAdapter
from utils.config import Settings


class TestHealthRoute(unittest.TestCase):
    """Test cases for GET /health endpoint."""

    def setUp(self):
        """Set up test client."""
        self.client = TestClient(app)

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()

    def test_healthy_when_configured(self):
        app.dependency_overrides[get_app_settings] = lambda: Settings(api_key="test-key")
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter()

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["status"], "healthy")
        self.assertEqual(data["services"]["llm"]["primary_model"], "gemini/gemini-2.5-flash")
        self.assertEqual(data["services"]["llm"]["fallback_model"], "gemini/gemini-2.0-flash")

    def test_degraded_without_api_key(self):
        app.dependency_overrides[get_app_settings] = lambda: Settings()
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter(configured=False)

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")

    def test_fallback_hidden_when_disabled(self):
        same = "gemini/gemini-2.5-flash"
        app.dependency_overrides[get_app_settings] = lambda: Settings(
            api_key="k", primary_model=same, fallback_model=same,
        )
        app.dependency_overrides[get_llm_port] = lambda: FakeLLMAdapter()

        response = self.client.get("/health")

        self.assertIsNone(response.json()["services"]["llm"]["fallback_model"])


class TestRootRoute(unittest.TestCase):
    """Test cases for GET / endpoint."""

    def test_root(self):
        response = TestClient(app).get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "service": SERVICE_NAME, "version": VERSION, "status": "running",
        })

    def test_unknown_route_uses_error_shape(self):
        response = TestClient(app).get("/nope")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Not Found"})


if __name__ == '__main__':
    unittest.main()
