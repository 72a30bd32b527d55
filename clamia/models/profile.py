"""
Profile Models - Onboarding profile and problem-type tags.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ProblemType(str, Enum):
    """Therapy focus selected during onboarding."""
    ANXIETY = "Anxiety"
    DEPRESSION = "Depression"
    RELATIONSHIP_ISSUES = "Relationship Issues"
    STRESS = "Stress"
    GRIEF = "Grief"
    SELF_ESTEEM = "Self-Esteem"
    FAMILY_THERAPY = "Family Therapy"
    CAREER_COUNSELING = "Career Counseling"
    OTHER = "Other"
    SADNESS = "Sadness"
    GENERAL = "General"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "ProblemType":
        """Exact match on the tag value; anything else falls back to GENERAL."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.GENERAL


class UserProfile(BaseModel):
    """
    User profile collected during onboarding.
    Immutable for a session; passed by value on every turn and never stored here.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    name: Optional[str] = None
    age: Optional[Union[int, str]] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    religion: Optional[str] = None
    therapy_type: Optional[str] = Field(default=None, alias="therapyType")
