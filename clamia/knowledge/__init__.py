"""Knowledge module - retrieval-augmentation over the therapy knowledge base."""

from .corpus import THERAPY_CONTENT, chunk_corpus
from .embeddings import Embedder, OpenAIEmbedder
from .vector_index import VectorIndex, InMemoryVectorIndex, PineconeIndex
from .retriever import KnowledgeRetriever, NoKnowledgeRetriever, VectorKnowledgeRetriever
from .factory import create_knowledge_retriever
from .ingest import build_knowledge_base

__all__ = [
    'THERAPY_CONTENT', 'chunk_corpus',
    'Embedder', 'OpenAIEmbedder',
    'VectorIndex', 'InMemoryVectorIndex', 'PineconeIndex',
    'KnowledgeRetriever', 'NoKnowledgeRetriever', 'VectorKnowledgeRetriever',
    'create_knowledge_retriever', 'build_knowledge_base',
]
