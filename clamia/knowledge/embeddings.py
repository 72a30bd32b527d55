"""
Embedders - Turn text into vectors for the knowledge index.
The same embedder must be used at ingestion and at query time.
"""

import httpx
import logging
from abc import ABC, abstractmethod
from typing import List

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Text embedding interface."""

    @abstractmethod
    async def embed_many(self, texts: List[str]) -> List[List[float]]:
        """Embed several texts, preserving order."""
        pass

    async def embed(self, text: str) -> List[float]:
        vectors = await self.embed_many([text])
        return vectors[0]


class OpenAIEmbedder(Embedder):
    """Embeddings from the OpenAI-compatible ``/embeddings`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-ada-002",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 15.0,
    ):
        """
        Initialize the embedder.

        Args:
            api_key: API key for the embeddings endpoint
            model: Embedding model name
            base_url: API base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    def _get_headers(self):
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def embed_many(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []

        payload = {"model": self.model, "input": texts}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.base_url}/embeddings", json=payload, headers=self._get_headers()
            )
            resp.raise_for_status()
            data = resp.json()

        items = sorted(data.get("data", []), key=lambda item: item.get("index", 0))
        if len(items) != len(texts):
            raise ValueError(
                f"Embedding endpoint returned {len(items)} vectors for {len(texts)} inputs"
            )

        logger.debug(f"Embedded {len(texts)} texts with {self.model}")
        return [item["embedding"] for item in items]
