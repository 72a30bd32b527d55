"""
Knowledge base ingestion - Chunk, embed and upsert the therapy corpus.

Run once per index:

    clamia-init-kb            # or: python -m clamia.knowledge.ingest
"""

import asyncio
import hashlib
import logging
import sys
from typing import Iterable, Optional

from .corpus import THERAPY_CONTENT, chunk_corpus
from .embeddings import Embedder
from .retriever import VectorKnowledgeRetriever
from .vector_index import VectorIndex
from ..models import KnowledgeChunk

logger = logging.getLogger(__name__)


def _chunk_id(chunk: KnowledgeChunk, position: int) -> str:
    digest = hashlib.sha1(chunk.text.encode("utf-8")).hexdigest()[:16]
    return f"kb-{position:04d}-{digest}"


async def build_knowledge_base(
    embedder: Embedder,
    index: VectorIndex,
    entries: Iterable[KnowledgeChunk] = THERAPY_CONTENT,
) -> int:
    """
    Store the corpus in a vector index.

    Args:
        embedder: Embedder also used at query time
        index: Target vector index
        entries: Corpus entries to ingest

    Returns:
        Number of chunks written
    """
    chunks = chunk_corpus(entries)
    if not chunks:
        return 0

    vectors = await embedder.embed_many([chunk.text for chunk in chunks])
    records = [
        {
            "id": _chunk_id(chunk, i),
            "values": vector,
            "metadata": {"text": chunk.text, **chunk.metadata},
        }
        for i, (chunk, vector) in enumerate(zip(chunks, vectors))
    ]
    written = await index.upsert(records)

    logger.info(
        f"Knowledge base ingested: {written} chunks",
        extra={"extra_fields": {"chunks": len(chunks), "written": written}}
    )
    return written


async def _run(config) -> int:
    from .factory import create_knowledge_retriever

    if (config.knowledge_backend or "").lower() != "pinecone":
        logger.error(
            f"Knowledge backend '{config.knowledge_backend}' cannot be seeded; "
            "only the pinecone index persists between runs"
        )
        return 1

    retriever = create_knowledge_retriever(config)
    if not isinstance(retriever, VectorKnowledgeRetriever):
        logger.error("Knowledge backend is not configured; set OPENAI_API_KEY and Pinecone settings")
        return 1
    await build_knowledge_base(retriever.embedder, retriever.index)
    return 0


def main(argv: Optional[list] = None) -> int:
    """Console entry point for seeding the configured index."""
    from ..config import settings
    from ..core.logging_config import setup_logging

    setup_logging(settings)
    try:
        code = asyncio.run(_run(settings))
    except Exception as e:
        logger.error(f"Error initializing knowledge base: {e}", exc_info=True)
        return 1
    if code == 0:
        logger.info("Knowledge base initialized successfully")
    return code


if __name__ == "__main__":
    sys.exit(main())
