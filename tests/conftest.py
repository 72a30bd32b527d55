"""
Shared test fixtures and configuration.
"""

import asyncio
import os
from typing import List, Optional

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("KNOWLEDGE_BACKEND", "none")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

from clamia.core.rate_limiter import InMemoryRateLimiter  # noqa: E402
from clamia.llm.base import LLMMessage, LLMProvider, LLMResponse  # noqa: E402


class FakeLLMProvider(LLMProvider):
    """Records every call and answers with a canned reply."""

    def __init__(self, reply: str = "That sounds really hard. I'm here with you.",
                 delay: float = 0.0, error: Optional[Exception] = None):
        super().__init__(api_key="test-key", model="fake-model")
        self.reply = reply
        self.delay = delay
        self.error = error
        self.calls: List[List[LLMMessage]] = []
        self.cancelled = False

    async def chat_completion(self, messages, temperature=None, max_tokens=None, **kwargs):
        self.calls.append(list(messages))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model="fake-model")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_provider():
    return FakeLLMProvider()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return InMemoryRateLimiter(window_seconds=60, max_requests=10, clock=clock)


@pytest.fixture
def lonely_conversation():
    return [{"role": "user", "content": "I feel lonely."}]
