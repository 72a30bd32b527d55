"""
Knowledge Retrievers - Grounding passages for the system prompt.

Retrieval is an enhancement: every failure surfaces as RetrievalError so the
orchestrator can drop the context and carry on with the turn.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .embeddings import Embedder
from .vector_index import VectorIndex
from ..core.errors import RetrievalError

logger = logging.getLogger(__name__)


class KnowledgeRetriever(ABC):
    """Interface for retrieving context for RAG."""

    @abstractmethod
    async def retrieve(self, query: str, k: Optional[int] = None) -> List[str]:
        """Return at most ``k`` passages relevant to ``query``, best first."""
        pass


class NoKnowledgeRetriever(KnowledgeRetriever):
    """Default retriever that performs no action."""

    async def retrieve(self, query: str, k: Optional[int] = None) -> List[str]:
        return []


class VectorKnowledgeRetriever(KnowledgeRetriever):
    """Embeds the query and runs a nearest-neighbour search over a vector index."""

    def __init__(self, embedder: Embedder, index: VectorIndex, top_k: int = 3):
        self.embedder = embedder
        self.index = index
        self.top_k = top_k

    async def retrieve(self, query: str, k: Optional[int] = None) -> List[str]:
        k = self.top_k if k is None else k
        if k <= 0 or not query or not query.strip():
            return []

        try:
            vector = await self.embedder.embed(query)
            matches = await self.index.query(vector, k)
        except Exception as e:
            raise RetrievalError(f"Knowledge retrieval failed: {e}") from e

        passages = []
        for match in matches[:k]:
            text = (match.get("metadata") or {}).get("text")
            if text:
                passages.append(text)

        logger.debug(f"Retrieved {len(passages)} passages for query: {query[:100]}")
        return passages
