"""
Conversation Models - Messages, mood scores and turn results.
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant", "system"]
VALID_ROLES = ("user", "assistant", "system")


class Message(BaseModel):
    """Chat message model."""
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_llm_dict(self) -> dict:
        """Role/content pair as sent to the language model."""
        return {"role": self.role, "content": self.content}


class MoodScore(BaseModel):
    """Sentiment of a single message: raw lexicon score plus ordinal label."""
    score: float
    label: str


class TurnResult(BaseModel):
    """Outcome of one handled turn."""
    model_config = ConfigDict(populate_by_name=True)

    reply: Message
    start_mood: Optional[MoodScore] = Field(default=None, alias="startMood")
    end_mood: Optional[MoodScore] = Field(default=None, alias="endMood")


class KnowledgeChunk(BaseModel):
    """A passage of the therapy knowledge base."""
    text: str
    metadata: dict = Field(default_factory=dict)
