"""
Unit tests for mood scoring.
"""

import pytest

from clamia.core.sentiment import SentimentScorer, label_for
from clamia.models import Message


@pytest.fixture(scope="module")
def scorer():
    return SentimentScorer()


class TestLabelThresholds:
    """Thresholds: >3 very positive, >1 positive, <-3 very negative, <-1 negative."""

    @pytest.mark.parametrize("score,label", [
        (5, "very positive"),
        (3.5, "very positive"),
        (3, "positive"),
        (2, "positive"),
        (1.5, "positive"),
        (1, "neutral"),
        (0, "neutral"),
        (-1, "neutral"),
        (-1.5, "negative"),
        (-3, "negative"),
        (-3.5, "very negative"),
        (-8, "very negative"),
    ])
    def test_boundaries(self, score, label):
        assert label_for(score) == label


class TestSentimentScorer:
    """Tests for SentimentScorer."""

    def test_deterministic(self, scorer):
        text = "I had a terrible week but my friends were wonderful."
        first = scorer.analyze(text)
        second = scorer.analyze(text)
        assert first == second

    def test_positive_text(self, scorer):
        mood = scorer.analyze("I love this, it is wonderful and amazing")
        assert mood.score > 3
        assert mood.label == "very positive"

    def test_negative_text(self, scorer):
        mood = scorer.analyze("I am so sad")
        assert mood.score < 0
        assert mood.label in ("negative", "very negative")

    def test_neutral_text(self, scorer):
        mood = scorer.analyze("The bus arrives at noon")
        assert mood.score == 0
        assert mood.label == "neutral"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_returns_none(self, scorer, text):
        assert scorer.analyze(text) is None

    def test_conversation_moods_first_and_last_user_message(self, scorer):
        messages = [
            Message(role="user", content="I am so sad"),
            Message(role="assistant", content="I'm sorry you are sad. Tell me more."),
            Message(role="user", content="Talking helps, I feel happy now"),
        ]
        start, end = scorer.conversation_moods(messages)
        assert start.score < 0
        assert end.score > 0

    def test_conversation_moods_single_message(self, scorer):
        messages = [Message(role="user", content="I love my dog")]
        start, end = scorer.conversation_moods(messages)
        assert start == end

    def test_conversation_moods_without_user_messages(self, scorer):
        messages = [Message(role="assistant", content="Hello, how are you?")]
        assert scorer.conversation_moods(messages) == (None, None)
