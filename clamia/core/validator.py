"""
Request Validator - Shape checks on inbound conversation payloads.
Runs before any I/O; a failure short-circuits the turn with a 400.
"""

from typing import Any, List, Optional

import pydantic

from .errors import ValidationError
from ..models import Message, ProblemType, UserProfile, VALID_ROLES


def validate_conversation(payload: Any) -> List[Message]:
    """
    Validate a candidate conversation and return it as Message objects.

    Args:
        payload: Decoded ``messages`` value from the request body

    Returns:
        Messages in the order they were supplied

    Raises:
        ValidationError: If the payload is not a non-empty list of
            role/content mappings with a known role and string content
    """
    if not isinstance(payload, list):
        raise ValidationError("Messages must be an array")

    if len(payload) == 0:
        raise ValidationError("Messages array cannot be empty")

    messages: List[Message] = []
    for item in payload:
        if not isinstance(item, dict) or not item.get("role") or not item.get("content"):
            raise ValidationError("Each message must have a role and content")
        if item["role"] not in VALID_ROLES:
            raise ValidationError("Invalid message role")
        if not isinstance(item["content"], str):
            raise ValidationError("Message content must be a string")

        fields = {"role": item["role"], "content": item["content"]}
        if item.get("timestamp"):
            fields["timestamp"] = item["timestamp"]
        try:
            messages.append(Message(**fields))
        except pydantic.ValidationError:
            raise ValidationError("Invalid message timestamp")

    return messages


def validate_user_profile(payload: Any) -> Optional[UserProfile]:
    """Parse the optional ``userInfo`` object."""
    if payload is None:
        return None
    if isinstance(payload, UserProfile):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("userInfo must be an object")
    try:
        return UserProfile.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid userInfo: {e.errors()[0].get('msg', 'bad value')}")


def resolve_problem_type(value: Any) -> ProblemType:
    """Map the optional ``problemType`` tag onto the enum, defaulting to General."""
    if value is not None and not isinstance(value, str):
        raise ValidationError("problemType must be a string")
    return ProblemType.resolve(value)
