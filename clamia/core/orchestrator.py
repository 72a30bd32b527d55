"""
Conversation Orchestrator - Runs one chat turn through the full pipeline.

Validating -> RateChecking -> Retrieving (best-effort) -> Composing ->
Calling (time-bounded) -> Filtering -> Responding. Multi-turn state lives
entirely in the caller-supplied conversation.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

from .errors import ClamiaError, ConfigurationError, UpstreamError, UpstreamTimeout
from .policy_filter import ResponsePolicyFilter
from .rate_limiter import RateLimiter
from .sentiment import SentimentScorer
from .validator import resolve_problem_type, validate_conversation, validate_user_profile
from ..knowledge.retriever import KnowledgeRetriever, NoKnowledgeRetriever
from ..llm.base import LLMMessage, LLMProvider
from ..models import Message, TurnResult
from ..prompts import PromptComposer

logger = logging.getLogger(__name__)

DEFAULT_MODEL_TIMEOUT = 30.0


class ConversationOrchestrator:
    """
    Composes validation, rate limiting, retrieval, prompting, the model call,
    policy filtering and mood scoring around a single LLM request.
    """

    def __init__(
        self,
        llm_provider: Optional[LLMProvider],
        rate_limiter: RateLimiter,
        retriever: Optional[KnowledgeRetriever] = None,
        composer: Optional[PromptComposer] = None,
        policy_filter: Optional[ResponsePolicyFilter] = None,
        sentiment_scorer: Optional[SentimentScorer] = None,
        model_timeout: float = DEFAULT_MODEL_TIMEOUT,
        retrieval_top_k: int = 3,
    ):
        """
        Initialize orchestrator with its collaborators.

        Args:
            llm_provider: Language model provider, or None when no credential is configured
            rate_limiter: Shared admission control
            retriever: Knowledge retriever; retrieval is skipped when omitted
            composer: System prompt composer
            policy_filter: Post-processing filter for model replies
            sentiment_scorer: Mood scorer for the conversation
            model_timeout: Hard limit for the model call, in seconds
            retrieval_top_k: Passages requested from the retriever
        """
        self.llm_provider = llm_provider
        self.rate_limiter = rate_limiter
        self.retriever = retriever or NoKnowledgeRetriever()
        self.composer = composer or PromptComposer()
        self.policy_filter = policy_filter or ResponsePolicyFilter()
        self.sentiment_scorer = sentiment_scorer or SentimentScorer()
        self.model_timeout = model_timeout
        self.retrieval_top_k = retrieval_top_k

    async def handle_turn(
        self,
        conversation: Any,
        problem_type: Any = None,
        user_profile: Any = None,
        client_key: str = "unknown",
    ) -> TurnResult:
        """
        Process one chat turn.

        Args:
            conversation: Candidate message list, in turn order
            problem_type: Optional problem-type tag
            user_profile: Optional UserProfile or raw ``userInfo`` mapping
            client_key: Rate-limit key (client address)

        Returns:
            TurnResult with the filtered reply and start/end moods

        Raises:
            ValidationError, RateLimitExceeded, ConfigurationError,
            UpstreamTimeout, UpstreamError
        """
        start_time = time.time()
        logger.info(
            f"Turn started for {client_key}",
            extra={"extra_fields": {"client_key": client_key, "state": "receiving"}}
        )

        try:
            messages = validate_conversation(conversation)
            resolved_type = resolve_problem_type(problem_type)
            profile = validate_user_profile(user_profile)

            await self.rate_limiter.check(client_key)

            if self.llm_provider is None:
                raise ConfigurationError()

            context = await self._retrieve_context(messages)
            system_prompt = self.composer.compose(resolved_type, profile, context)

            reply_text = await self._call_model(system_prompt, messages)
            user_name = profile.name if profile else None
            filtered = self.policy_filter.filter(reply_text, user_name)

            start_mood, end_mood = self.sentiment_scorer.conversation_moods(messages)
        except ClamiaError as e:
            self._log_exit(client_key, start_time, e.status_code, e.message)
            raise

        result = TurnResult(
            reply=Message(role="assistant", content=filtered),
            start_mood=start_mood,
            end_mood=end_mood,
        )
        self._log_exit(
            client_key, start_time, 200, None,
            problem_type=resolved_type.value,
            retrieved=len(context),
            filtered=filtered != reply_text,
        )
        return result

    async def _retrieve_context(self, messages: List[Message]) -> List[str]:
        """Best-effort retrieval keyed on the latest user message; never raises."""
        query = next((m.content for m in reversed(messages) if m.role == "user"), "")
        if not query:
            return []

        try:
            return await self.retriever.retrieve(query, self.retrieval_top_k)
        except Exception as e:
            logger.warning(
                f"Retrieval failed, continuing without context: {str(e)}",
                extra={"extra_fields": {"error": str(e)}}
            )
            return []

    async def _call_model(self, system_prompt: str, messages: List[Message]) -> str:
        """One system message followed by the conversation, bounded by model_timeout."""
        llm_messages = [LLMMessage.text("system", system_prompt)]
        llm_messages.extend(LLMMessage.text(m.role, m.content) for m in messages)

        try:
            response = await asyncio.wait_for(
                self.llm_provider.chat_completion(llm_messages),
                timeout=self.model_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Model call exceeded {self.model_timeout}s and was cancelled")
            raise UpstreamTimeout()
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(f"Model call failed: {str(e)}", exc_info=True)
            raise UpstreamError(str(e) or UpstreamError.default_message) from e

        return response.content

    @staticmethod
    def _log_exit(client_key: str, start_time: float, status: int,
                  error: Optional[str], **fields) -> None:
        duration_ms = (time.time() - start_time) * 1000
        log_level = logging.INFO if status < 400 else (logging.WARNING if status < 500 else logging.ERROR)
        logger.log(
            log_level,
            f"Turn finished for {client_key}: {status} ({duration_ms:.2f}ms)",
            extra={"extra_fields": {
                "client_key": client_key,
                "state": "responding",
                "status": status,
                "error": error,
                "duration_ms": round(duration_ms, 2),
                **fields,
            }}
        )
