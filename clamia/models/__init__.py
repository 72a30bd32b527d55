"""Models module."""

from .conversation import Message, MoodScore, TurnResult, KnowledgeChunk, VALID_ROLES
from .profile import ProblemType, UserProfile

__all__ = [
    'Message', 'MoodScore', 'TurnResult', 'KnowledgeChunk', 'VALID_ROLES',
    'ProblemType', 'UserProfile'
]
