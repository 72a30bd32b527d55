"""
Vector indexes - Nearest-neighbour search over embedded knowledge chunks.

Records are ``{"id", "values", "metadata"}`` dicts, and matches are
``{"id", "score", "metadata"}`` dicts, the same shapes the Pinecone data
plane uses, so both implementations are interchangeable.
"""

import httpx
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class VectorIndex(ABC):
    """Vector store interface."""

    @abstractmethod
    async def upsert(self, records: List[Dict[str, Any]]) -> int:
        """Insert or replace records; returns the number written."""
        pass

    @abstractmethod
    async def query(self, vector: List[float], top_k: int) -> List[Dict[str, Any]]:
        """Return up to ``top_k`` matches, best first."""
        pass


class InMemoryVectorIndex(VectorIndex):
    """Cosine-similarity index held in process memory."""

    def __init__(self):
        self._ids: List[str] = []
        self._metadata: List[Dict[str, Any]] = []
        self._matrix: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._ids)

    async def upsert(self, records: List[Dict[str, Any]]) -> int:
        for record in records:
            vector = np.asarray(record["values"], dtype=np.float32)
            norm = np.linalg.norm(vector)
            if norm > 0:
                vector = vector / norm

            if record["id"] in self._ids:
                position = self._ids.index(record["id"])
                self._matrix[position] = vector
                self._metadata[position] = dict(record.get("metadata") or {})
                continue

            self._ids.append(record["id"])
            self._metadata.append(dict(record.get("metadata") or {}))
            if self._matrix is None:
                self._matrix = vector.reshape(1, -1)
            else:
                self._matrix = np.vstack([self._matrix, vector])
        return len(records)

    async def query(self, vector: List[float], top_k: int) -> List[Dict[str, Any]]:
        if self._matrix is None or top_k <= 0:
            return []

        query = np.asarray(vector, dtype=np.float32)
        norm = np.linalg.norm(query)
        if norm > 0:
            query = query / norm

        scores = self._matrix @ query
        order = np.argsort(-scores)[:top_k]
        return [
            {
                "id": self._ids[i],
                "score": float(scores[i]),
                "metadata": self._metadata[i],
            }
            for i in order
        ]


class PineconeIndex(VectorIndex):
    """Pinecone index accessed through its data-plane REST API."""

    def __init__(self, api_key: str, index_host: str, namespace: str = "", timeout: float = 10.0):
        """
        Initialize the index client.

        Args:
            api_key: Pinecone API key
            index_host: Index host URL as shown in the Pinecone console
            namespace: Optional namespace within the index
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        host = index_host.rstrip("/")
        self.index_host = host if host.startswith("http") else f"https://{host}"
        self.namespace = namespace
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Api-Key": self.api_key,
            "Content-Type": "application/json",
        }

    async def upsert(self, records: List[Dict[str, Any]]) -> int:
        payload: Dict[str, Any] = {"vectors": records}
        if self.namespace:
            payload["namespace"] = self.namespace

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.index_host}/vectors/upsert", json=payload, headers=self._get_headers()
            )
            resp.raise_for_status()
            data = resp.json()

        return int(data.get("upsertedCount", len(records)))

    async def query(self, vector: List[float], top_k: int) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "vector": vector,
            "topK": top_k,
            "includeMetadata": True,
        }
        if self.namespace:
            payload["namespace"] = self.namespace

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.index_host}/query", json=payload, headers=self._get_headers()
            )
            resp.raise_for_status()
            data = resp.json()

        return [
            {
                "id": match.get("id", ""),
                "score": match.get("score", 0.0),
                "metadata": match.get("metadata") or {},
            }
            for match in data.get("matches", [])
        ]
