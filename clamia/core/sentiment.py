"""
Sentiment Scorer - Lexicon-based mood scoring of user messages.

Scores are AFINN word-valence sums, so a single strongly worded sentence
lands around +/-3 and the label thresholds below are tuned to that scale.
"""

from typing import Iterable, Optional, Tuple

from afinn import Afinn

from ..models import Message, MoodScore

VERY_POSITIVE = "very positive"
POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"
VERY_NEGATIVE = "very negative"


def label_for(score: float) -> str:
    """Reduce a raw score to one of the five mood labels."""
    if score > 3:
        return VERY_POSITIVE
    if score > 1:
        return POSITIVE
    if score < -3:
        return VERY_NEGATIVE
    if score < -1:
        return NEGATIVE
    return NEUTRAL


class SentimentScorer:
    """Stateless, deterministic text -> mood scorer."""

    def __init__(self, language: str = "en", emoticons: bool = False):
        self._afinn = Afinn(language=language, emoticons=emoticons)

    def score(self, text: str) -> float:
        return float(self._afinn.score(text))

    def analyze(self, text: Optional[str]) -> Optional[MoodScore]:
        """
        Score a single message.

        Returns:
            MoodScore, or None when there is no text to score
        """
        if not isinstance(text, str) or not text.strip():
            return None
        score = self.score(text)
        return MoodScore(score=score, label=label_for(score))

    def conversation_moods(
        self, messages: Iterable[Message]
    ) -> Tuple[Optional[MoodScore], Optional[MoodScore]]:
        """
        Mood of the first and of the most recent user message.

        Args:
            messages: Conversation in turn order

        Returns:
            (start_mood, end_mood); either is None if there is no user text
        """
        user_texts = [m.content for m in messages if m.role == "user"]
        if not user_texts:
            return None, None
        return self.analyze(user_texts[0]), self.analyze(user_texts[-1])
