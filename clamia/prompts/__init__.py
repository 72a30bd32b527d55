"""Prompts module - system prompt assembly for the therapist persona."""

from .composer import PromptComposer
from .templates import SPECIALIZATIONS, Specialization, UNKNOWN

__all__ = ['PromptComposer', 'SPECIALIZATIONS', 'Specialization', 'UNKNOWN']
