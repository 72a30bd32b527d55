"""
Tests for the conversation orchestrator.
Exercises the full turn pipeline with a fake model provider.
"""

import pytest

from conftest import FakeLLMProvider
from clamia.core.errors import (
    ConfigurationError,
    RateLimitExceeded,
    RetrievalError,
    UpstreamError,
    UpstreamTimeout,
    ValidationError,
)
from clamia.core.orchestrator import ConversationOrchestrator
from clamia.core.policy_filter import FALLBACK_RESPONSE
from clamia.knowledge.retriever import KnowledgeRetriever
from clamia.models import TurnResult


class StaticRetriever(KnowledgeRetriever):
    def __init__(self, passages):
        self.passages = passages
        self.queries = []

    async def retrieve(self, query, k=None):
        self.queries.append((query, k))
        return list(self.passages)


class BrokenRetriever(KnowledgeRetriever):
    async def retrieve(self, query, k=None):
        raise RetrievalError("index unavailable")


@pytest.fixture
def orchestrator(fake_provider, rate_limiter):
    return ConversationOrchestrator(llm_provider=fake_provider, rate_limiter=rate_limiter)


class TestHandleTurn:
    """Tests for ConversationOrchestrator.handle_turn."""

    @pytest.mark.asyncio
    async def test_lonely_user_gets_a_reply(self, orchestrator, fake_provider, lonely_conversation):
        result = await orchestrator.handle_turn(lonely_conversation, client_key="10.0.0.1")

        assert isinstance(result, TurnResult)
        assert result.reply.role == "assistant"
        assert result.reply.content == fake_provider.reply
        assert result.reply.timestamp is not None

        assert len(fake_provider.calls) == 1
        sent = fake_provider.calls[0]
        assert [m.role for m in sent] == ["system", "user"]
        assert "lonely" in sent[0].content
        assert sent[1].content == "I feel lonely."

    @pytest.mark.asyncio
    async def test_exactly_one_system_message_first(self, orchestrator, fake_provider):
        conversation = [
            {"role": "system", "content": "client supplied note"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello, how are you?"},
            {"role": "user", "content": "not great"},
        ]
        await orchestrator.handle_turn(conversation)

        sent = fake_provider.calls[0]
        assert sent[0].role == "system"
        assert [m.content for m in sent[1:]] == [m["content"] for m in conversation]

    @pytest.mark.asyncio
    async def test_profile_and_problem_type_reach_prompt(self, orchestrator, fake_provider):
        await orchestrator.handle_turn(
            [{"role": "user", "content": "I can't stop thinking about my mum"}],
            problem_type="Grief",
            user_profile={"name": "Amina", "age": 34},
        )
        system_prompt = fake_provider.calls[0][0].content
        assert "- Name: Amina" in system_prompt
        assert "grief" in system_prompt.lower()

    @pytest.mark.asyncio
    async def test_retrieved_context_is_appended(self, fake_provider, rate_limiter):
        retriever = StaticRetriever(["Try the 5-4-3-2-1 grounding technique."])
        orchestrator = ConversationOrchestrator(
            llm_provider=fake_provider, rate_limiter=rate_limiter,
            retriever=retriever, retrieval_top_k=2,
        )
        conversation = [
            {"role": "user", "content": "first message"},
            {"role": "assistant", "content": "tell me more"},
            {"role": "user", "content": "I panic on the train"},
        ]
        await orchestrator.handle_turn(conversation)

        assert retriever.queries == [("I panic on the train", 2)]
        system_prompt = fake_provider.calls[0][0].content
        assert system_prompt.endswith("Try the 5-4-3-2-1 grounding technique.")

    @pytest.mark.asyncio
    async def test_retrieval_failure_still_replies(self, fake_provider, rate_limiter,
                                                   lonely_conversation):
        orchestrator = ConversationOrchestrator(
            llm_provider=fake_provider, rate_limiter=rate_limiter, retriever=BrokenRetriever(),
        )
        result = await orchestrator.handle_turn(lonely_conversation)

        assert result.reply.content == fake_provider.reply
        assert "## Relevant context" not in fake_provider.calls[0][0].content

    @pytest.mark.asyncio
    async def test_prohibited_reply_is_replaced(self, rate_limiter, lonely_conversation):
        provider = FakeLLMProvider(
            reply="I'm really sorry that you're feeling this way, but I'm unable to "
                  "provide the help that you need."
        )
        orchestrator = ConversationOrchestrator(llm_provider=provider, rate_limiter=rate_limiter)

        result = await orchestrator.handle_turn(
            lonely_conversation, user_profile={"name": "Sam"}
        )
        assert result.reply.content == f"Sam, {FALLBACK_RESPONSE}"

    @pytest.mark.asyncio
    async def test_moods(self, orchestrator):
        conversation = [
            {"role": "user", "content": "I am so sad"},
            {"role": "assistant", "content": "I'm listening."},
            {"role": "user", "content": "I feel happy now"},
        ]
        result = await orchestrator.handle_turn(conversation)
        assert result.start_mood.label == "negative"
        assert result.end_mood.label == "positive"

    @pytest.mark.asyncio
    async def test_serialized_shape(self, orchestrator, lonely_conversation):
        result = await orchestrator.handle_turn(lonely_conversation)
        body = result.model_dump(mode="json", by_alias=True)
        assert set(body) == {"reply", "startMood", "endMood"}
        assert set(body["reply"]) == {"role", "content", "timestamp"}


class TestHandleTurnErrors:
    """Error paths of the turn pipeline."""

    @pytest.mark.asyncio
    async def test_invalid_conversation_makes_no_calls(self, orchestrator, fake_provider,
                                                       rate_limiter):
        with pytest.raises(ValidationError):
            await orchestrator.handle_turn([], client_key="10.0.0.1")
        assert fake_provider.calls == []
        assert len(rate_limiter) == 0

    @pytest.mark.asyncio
    async def test_invalid_requests_do_not_consume_budget(self, orchestrator, rate_limiter,
                                                          lonely_conversation):
        for _ in range(20):
            with pytest.raises(ValidationError):
                await orchestrator.handle_turn("not a list", client_key="10.0.0.1")
        await orchestrator.handle_turn(lonely_conversation, client_key="10.0.0.1")

    @pytest.mark.asyncio
    async def test_eleventh_turn_is_rate_limited(self, orchestrator, fake_provider,
                                                 lonely_conversation):
        for _ in range(10):
            await orchestrator.handle_turn(lonely_conversation, client_key="10.0.0.1")

        with pytest.raises(RateLimitExceeded):
            await orchestrator.handle_turn(lonely_conversation, client_key="10.0.0.1")
        assert len(fake_provider.calls) == 10

    @pytest.mark.asyncio
    async def test_missing_provider(self, rate_limiter, lonely_conversation):
        retriever = StaticRetriever(["Try box breathing."])
        orchestrator = ConversationOrchestrator(
            llm_provider=None, rate_limiter=rate_limiter, retriever=retriever,
        )
        with pytest.raises(ConfigurationError) as exc_info:
            await orchestrator.handle_turn(lonely_conversation)
        assert exc_info.value.message == "OpenAI API key is not configured"
        assert exc_info.value.status_code == 500
        assert retriever.queries == []

    @pytest.mark.asyncio
    async def test_model_timeout_cancels_call(self, rate_limiter, lonely_conversation):
        provider = FakeLLMProvider(delay=5.0)
        orchestrator = ConversationOrchestrator(
            llm_provider=provider, rate_limiter=rate_limiter, model_timeout=0.05,
        )
        with pytest.raises(UpstreamTimeout):
            await orchestrator.handle_turn(lonely_conversation)
        assert provider.cancelled is True

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self, rate_limiter, lonely_conversation):
        provider = FakeLLMProvider(error=UpstreamError("Incorrect API key provided"))
        orchestrator = ConversationOrchestrator(llm_provider=provider, rate_limiter=rate_limiter)
        with pytest.raises(UpstreamError, match="Incorrect API key provided"):
            await orchestrator.handle_turn(lonely_conversation)

    @pytest.mark.asyncio
    async def test_unexpected_provider_error_is_wrapped(self, rate_limiter, lonely_conversation):
        provider = FakeLLMProvider(error=RuntimeError("socket closed"))
        orchestrator = ConversationOrchestrator(llm_provider=provider, rate_limiter=rate_limiter)
        with pytest.raises(UpstreamError, match="socket closed"):
            await orchestrator.handle_turn(lonely_conversation)
