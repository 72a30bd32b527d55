"""
Rate Limiter - Per-client fixed-window admission control.

The orchestrator only depends on the RateLimiter interface, so the in-process
implementation can be replaced by a shared store without touching callers.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

from .errors import RateLimitExceeded

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Request count for one client within its current window."""
    client_key: str
    count: int
    window_start: float


class RateLimiter(ABC):
    """Admission control interface."""

    @abstractmethod
    async def check(self, client_key: str) -> None:
        """
        Admit one request for ``client_key`` or raise.

        Raises:
            RateLimitExceeded: If the client has used its budget for the window
        """
        pass


class InMemoryRateLimiter(RateLimiter):
    """
    Process-wide limiter backed by a dict guarded by a single asyncio.Lock.
    Expired entries are swept lazily on every call.
    """

    def __init__(
        self,
        window_seconds: float = 60.0,
        max_requests: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = asyncio.Lock()

    async def check(self, client_key: str) -> None:
        async with self._lock:
            now = self._clock()
            self._purge(now)

            entry = self._entries.get(client_key)
            if entry is None:
                entry = RateLimitEntry(client_key=client_key, count=0, window_start=now)
                self._entries[client_key] = entry

            if entry.count >= self.max_requests:
                logger.warning(
                    f"Rate limit exceeded for {client_key}",
                    extra={"extra_fields": {
                        "client_key": client_key,
                        "count": entry.count,
                        "max_requests": self.max_requests,
                    }}
                )
                raise RateLimitExceeded()

            entry.count += 1

    def _purge(self, now: float) -> None:
        cutoff = now - self.window_seconds
        expired = [key for key, entry in self._entries.items() if entry.window_start < cutoff]
        for key in expired:
            del self._entries[key]

    def reset(self) -> None:
        """Forget all tracked clients."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
