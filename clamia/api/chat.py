"""
Chat API endpoints - One therapist turn per request.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..config import settings
from ..core.errors import ValidationError
from ..core.orchestrator import ConversationOrchestrator
from ..core.rate_limiter import InMemoryRateLimiter, RateLimiter
from ..knowledge import (
    InMemoryVectorIndex,
    KnowledgeRetriever,
    VectorKnowledgeRetriever,
    build_knowledge_base,
    create_knowledge_retriever,
)
from ..llm.base import LLMProvider
from ..llm.factory import create_llm_provider
from ..utils.client import client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

# Process-wide state shared by all turns
rate_limiter: RateLimiter = InMemoryRateLimiter(
    window_seconds=settings.rate_limit_window_seconds,
    max_requests=settings.rate_limit_max_requests,
)
_knowledge_retriever: Optional[KnowledgeRetriever] = None


def _get_llm_provider() -> Optional[LLMProvider]:
    """Get configured LLM provider or None."""
    return create_llm_provider(
        provider=settings.llm_provider,
        api_key=settings.openai_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        default_temperature=settings.llm_temperature,
        default_max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_seconds,
    )


def get_knowledge_retriever() -> KnowledgeRetriever:
    """Get the process-wide knowledge retriever, creating it on first use."""
    global _knowledge_retriever
    if _knowledge_retriever is None:
        _knowledge_retriever = create_knowledge_retriever(settings)
    return _knowledge_retriever


async def init_knowledge_retriever() -> KnowledgeRetriever:
    """Create the retriever and seed the in-memory index; failures leave it empty."""
    retriever = get_knowledge_retriever()
    if isinstance(retriever, VectorKnowledgeRetriever) and isinstance(retriever.index, InMemoryVectorIndex):
        try:
            await build_knowledge_base(retriever.embedder, retriever.index)
        except Exception as e:
            logger.warning(f"In-memory knowledge base could not be built: {str(e)}")
    logger.info(f"Knowledge retriever ready: {retriever.__class__.__name__}")
    return retriever


def get_orchestrator() -> ConversationOrchestrator:
    """Build the orchestrator for a request around the shared collaborators."""
    return ConversationOrchestrator(
        llm_provider=_get_llm_provider(),
        rate_limiter=rate_limiter,
        retriever=get_knowledge_retriever(),
        model_timeout=settings.llm_timeout_seconds,
        retrieval_top_k=settings.retrieval_top_k,
    )


@router.post("/chat")
async def chat(
    request: Request,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Handle one chat turn.

    Body:
        messages: Conversation so far, oldest first
        problemType: Optional therapy focus tag
        userInfo: Optional onboarding profile

    Returns:
        {reply, startMood, endMood}
    """
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    result = await orchestrator.handle_turn(
        conversation=body.get("messages"),
        problem_type=body.get("problemType"),
        user_profile=body.get("userInfo"),
        client_key=client_ip(request.headers, request.client),
    )
    return JSONResponse(content=result.model_dump(mode="json", by_alias=True))


@router.options("/chat")
async def chat_preflight():
    """CORS preflight."""
    return Response(status_code=status.HTTP_200_OK)


@router.api_route("/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def chat_method_not_allowed():
    """Only POST is accepted."""
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"error": "Method not allowed"},
        headers={"Allow": "POST, OPTIONS"},
    )
