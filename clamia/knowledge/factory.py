"""
Knowledge Retriever Factory - Creates the configured retriever instance.
"""

import logging
from typing import Any

from .embeddings import OpenAIEmbedder
from .retriever import KnowledgeRetriever, NoKnowledgeRetriever, VectorKnowledgeRetriever
from .vector_index import InMemoryVectorIndex, PineconeIndex

logger = logging.getLogger(__name__)


def create_knowledge_retriever(config: Any) -> KnowledgeRetriever:
    """
    Create a knowledge retriever from settings.

    Args:
        config: Settings object with knowledge and LLM configuration

    Returns:
        VectorKnowledgeRetriever for the "pinecone" and "memory" backends when
        their credentials are present, NoKnowledgeRetriever otherwise
    """
    backend = (config.knowledge_backend or "none").lower()
    if backend == "none":
        return NoKnowledgeRetriever()

    if backend not in ("pinecone", "memory"):
        raise ValueError(f"Unsupported knowledge backend: {config.knowledge_backend}")

    if not config.openai_api_key:
        logger.warning(f"Knowledge backend '{backend}' disabled: no embedding API key configured")
        return NoKnowledgeRetriever()

    params = {"api_key": config.openai_api_key, "model": config.embedding_model}
    if config.llm_base_url:
        params["base_url"] = config.llm_base_url
    embedder = OpenAIEmbedder(**params)

    if backend == "pinecone":
        if not (config.pinecone_api_key and config.pinecone_index_host):
            logger.warning("Knowledge backend 'pinecone' disabled: Pinecone credentials missing")
            return NoKnowledgeRetriever()
        index = PineconeIndex(
            api_key=config.pinecone_api_key,
            index_host=config.pinecone_index_host,
            namespace=config.pinecone_namespace,
        )
    else:
        index = InMemoryVectorIndex()

    return VectorKnowledgeRetriever(embedder, index, top_k=config.retrieval_top_k)
