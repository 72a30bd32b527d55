"""
Integration tests for the chat API.
Tests the HTTP surface end to end with a fake model provider.
"""

import io
import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeLLMProvider
from clamia.api.chat import get_orchestrator
from clamia.core.errors import UpstreamError
from clamia.core.logging_config import setup_request_logger
from clamia.core.orchestrator import ConversationOrchestrator
from clamia.core.rate_limiter import InMemoryRateLimiter
from clamia.knowledge.retriever import KnowledgeRetriever
from clamia.main import app


class RecordingRetriever(KnowledgeRetriever):
    def __init__(self):
        self.queries = []

    async def retrieve(self, query, k=None):
        self.queries.append(query)
        return []


@pytest.fixture
def request_log():
    stream = io.StringIO()
    setup_request_logger(stream=stream)
    return stream


@pytest.fixture
def provider():
    return FakeLLMProvider()


@pytest.fixture
def client(provider):
    orchestrator = ConversationOrchestrator(
        llm_provider=provider,
        rate_limiter=InMemoryRateLimiter(window_seconds=60, max_requests=10),
    )
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def _log_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_reply(self, client, provider):
        response = client.post(
            "/api/chat",
            json={
                "messages": [{"role": "user", "content": "I feel lonely."}],
                "problemType": "General",
                "userInfo": {"name": "Sam", "age": 29},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"reply", "startMood", "endMood"}
        assert data["reply"]["role"] == "assistant"
        assert data["reply"]["content"] == provider.reply
        assert "timestamp" in data["reply"]
        assert data["startMood"]["label"] == "negative"
        assert data["startMood"] == data["endMood"]

        system_prompt = provider.calls[0][0].content
        assert "- Name: Sam" in system_prompt

    def test_neutral_message_moods(self, client):
        response = client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "The bus arrives at noon"}]},
        )
        assert response.status_code == 200
        assert response.json()["startMood"] == {"score": 0.0, "label": "neutral"}

    @pytest.mark.parametrize("body,error", [
        ({}, "Messages must be an array"),
        ({"messages": "hello"}, "Messages must be an array"),
        ({"messages": []}, "Messages array cannot be empty"),
        ({"messages": [{"role": "user"}]}, "Each message must have a role and content"),
        ({"messages": [{"role": "robot", "content": "hi"}]}, "Invalid message role"),
        ({"messages": [{"role": "user", "content": 5}]}, "Message content must be a string"),
    ])
    def test_validation_errors(self, client, provider, body, error):
        response = client.post("/api/chat", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": error}
        assert provider.calls == []

    def test_malformed_json(self, client):
        response = client.post(
            "/api/chat",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}

    def test_body_must_be_object(self, client):
        response = client.post("/api/chat", json=[{"role": "user", "content": "hi"}])
        assert response.status_code == 400

    def test_rate_limit(self, client, provider):
        body = {"messages": [{"role": "user", "content": "hello"}]}
        for _ in range(10):
            assert client.post("/api/chat", json=body).status_code == 200

        response = client.post("/api/chat", json=body)
        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests. Please try again later."}
        assert len(provider.calls) == 10

    def test_rate_limit_is_per_forwarded_address(self, client):
        body = {"messages": [{"role": "user", "content": "hello"}]}
        for _ in range(10):
            client.post("/api/chat", json=body, headers={"X-Forwarded-For": "203.0.113.5"})

        blocked = client.post("/api/chat", json=body,
                              headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})
        assert blocked.status_code == 429

        other = client.post("/api/chat", json=body, headers={"X-Forwarded-For": "198.51.100.7"})
        assert other.status_code == 200

    def test_missing_api_key(self):
        retriever = RecordingRetriever()
        orchestrator = ConversationOrchestrator(
            llm_provider=None,
            rate_limiter=InMemoryRateLimiter(),
            retriever=retriever,
        )
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        try:
            response = TestClient(app).post(
                "/api/chat", json={"messages": [{"role": "user", "content": "hi"}]}
            )
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key is not configured"}
        assert retriever.queries == []

    def test_upstream_error(self, client, provider):
        provider.error = UpstreamError("Incorrect API key provided")
        response = client.post(
            "/api/chat", json={"messages": [{"role": "user", "content": "hi"}]}
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Incorrect API key provided"}


class TestChatMethods:
    """Non-POST methods on /api/chat."""

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_method_not_allowed(self, client, method):
        response = client.request(method, "/api/chat")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_options(self, client):
        response = client.options("/api/chat")
        assert response.status_code == 200
        assert response.content == b""

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/chat",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert response.content == b""


class TestRequestLog:
    """One NDJSON line per request."""

    def test_success_line(self, client, request_log):
        client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "hi"}]},
            headers={"X-Forwarded-For": "203.0.113.5"},
        )
        lines = _log_lines(request_log)
        assert len(lines) == 1
        entry = lines[0]
        assert set(entry) == {"timestamp", "ip", "method", "path", "status", "error"}
        assert entry["ip"] == "203.0.113.5"
        assert entry["method"] == "POST"
        assert entry["path"] == "/api/chat"
        assert entry["status"] == 200
        assert entry["error"] is None

    def test_error_line_carries_reason(self, client, request_log):
        client.post("/api/chat", json={"messages": []})
        entry = _log_lines(request_log)[-1]
        assert entry["status"] == 400
        assert entry["error"] == "Messages array cannot be empty"

    def test_peer_address_without_forwarding(self, client, request_log):
        client.get("/health")
        entry = _log_lines(request_log)[-1]
        assert entry["ip"] == "testclient"
        assert entry["path"] == "/health"


class TestServiceEndpoints:
    """Tests for / and /health."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["knowledge_backend"] == "none"
        assert isinstance(data["llm_configured"], bool)

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"
