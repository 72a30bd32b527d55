"""
Response Policy Filter - Literal backstop against disclaimers and premature referrals.

Matching is a case-insensitive substring test against a short deny-list. It
will miss paraphrases; that is accepted. Replacement texts never contain a
deny-listed phrase, so filtering twice is the same as filtering once.
"""

import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DENY_LIST = (
    "I'm really sorry that you're feeling this way, but I'm unable to provide the help that you need",
    "I'm unable to provide the help that you need",
    "I am unable to provide the help that you need",
    "talk to a mental health professional",
    "speak with a mental health professional",
    "reach out to a mental health professional",
    "talk to someone who can, though, such as a mental health professional",
    "I'm not a licensed therapist",
    "I am not a licensed therapist",
    "As an AI language model",
    "I'm just an AI",
)

FALLBACK_RESPONSE = (
    "I hear you, and I'm right here with you. What you're feeling matters. "
    "Can you tell me a little more about what's been happening?"
)

EMPTY_RESPONSE = (
    "I'm here for you. Take your time, and share whatever feels right "
    "about what's on your mind."
)


class ResponsePolicyFilter:
    """Rewrites model replies that match the prohibited-response deny-list."""

    def __init__(
        self,
        deny_list: Iterable[str] = DEFAULT_DENY_LIST,
        fallback: str = FALLBACK_RESPONSE,
        empty_fallback: str = EMPTY_RESPONSE,
    ):
        self.deny_list = tuple(deny_list)
        self._patterns = tuple(p.lower() for p in self.deny_list if p)
        self.fallback = fallback
        self.empty_fallback = empty_fallback

    def is_prohibited(self, text: str) -> bool:
        lowered = text.lower()
        return any(pattern in lowered for pattern in self._patterns)

    def filter(self, response_text: Optional[str], user_name: Optional[str] = None) -> str:
        """
        Apply the policy to a model reply.

        Args:
            response_text: Raw reply text from the model
            user_name: Name from the user profile, used to personalize the fallback

        Returns:
            The reply unchanged, the empathetic fallback, or the empty-reply prompt
        """
        if response_text is None or not response_text.strip():
            logger.warning("Model returned an empty reply, substituting supportive prompt")
            return self.empty_fallback

        if self.is_prohibited(response_text):
            logger.info(
                "Prohibited phrasing found in model reply, substituting fallback",
                extra={"extra_fields": {"reply_preview": response_text[:200]}}
            )
            return self._personalize(self.fallback, user_name)

        return response_text

    @staticmethod
    def _personalize(text: str, user_name: Optional[str]) -> str:
        if user_name and user_name.strip():
            return f"{user_name.strip()}, {text}"
        return text
