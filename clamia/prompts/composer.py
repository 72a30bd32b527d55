"""
Prompt Composer - Builds the system prompt for a turn.

Block order is fixed: persona, profile, general rules, specialization and,
only when retrieval produced text, the relevant-context appendix.
"""

from typing import Dict, Iterable, Optional, Union

from ..models import ProblemType, UserProfile
from .templates import (
    CONTEXT_HEADING,
    CONTEXT_INSTRUCTION,
    GENERAL_RULES_BLOCK,
    PERSONA_BLOCK,
    PROFILE_TEMPLATE,
    SPECIALIZATIONS,
    UNKNOWN,
    Specialization,
)


class PromptComposer:
    """Pure function of (problem type, profile, retrieved context) -> system prompt."""

    def __init__(self, specializations: Optional[Dict[ProblemType, Specialization]] = None):
        self.specializations = dict(specializations or SPECIALIZATIONS)
        if ProblemType.GENERAL not in self.specializations:
            raise ValueError("A General specialization is required as the fallback")

    def compose(
        self,
        problem_type: Union[ProblemType, str, None],
        user_profile: Optional[UserProfile],
        retrieved_context: Union[str, Iterable[str], None] = None,
    ) -> str:
        """
        Assemble the system prompt.

        Args:
            problem_type: Problem-type tag; unknown values use the General block
            user_profile: Onboarding profile, or None if not collected
            retrieved_context: Passages from the knowledge retriever

        Returns:
            System prompt text
        """
        resolved = ProblemType.resolve(problem_type)
        blocks = [
            PERSONA_BLOCK,
            self.render_profile(user_profile),
            GENERAL_RULES_BLOCK,
            self.render_specialization(resolved),
        ]

        context = self._join_context(retrieved_context)
        if context:
            blocks.append(f"{CONTEXT_HEADING}\n{CONTEXT_INSTRUCTION}\n\n{context}")

        return "\n\n".join(blocks)

    @staticmethod
    def render_profile(user_profile: Optional[UserProfile]) -> str:
        profile = user_profile or UserProfile()

        def value(v) -> str:
            if v is None or (isinstance(v, str) and not v.strip()):
                return UNKNOWN
            return str(v).strip()

        return PROFILE_TEMPLATE.format(
            name=value(profile.name),
            age=value(profile.age),
            gender=value(profile.gender),
            country=value(profile.country),
            religion=value(profile.religion),
            therapy_type=value(profile.therapy_type),
            unknown=UNKNOWN,
        )

    def render_specialization(self, problem_type: ProblemType) -> str:
        spec = self.specializations.get(problem_type, self.specializations[ProblemType.GENERAL])
        lines = [
            "## Session focus",
            f"This session focuses on {spec.focus}. Approach:",
        ]
        lines.extend(f"- {step}" for step in spec.approach)
        if spec.example_questions:
            lines.append("")
            lines.append("Example questions:")
            lines.extend(f"- {q}" for q in spec.example_questions)
        return "\n".join(lines)

    @staticmethod
    def _join_context(retrieved_context: Union[str, Iterable[str], None]) -> str:
        if retrieved_context is None:
            return ""
        if isinstance(retrieved_context, str):
            return retrieved_context.strip()
        return "\n\n".join(p.strip() for p in retrieved_context if p and p.strip())
