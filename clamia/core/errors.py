"""
Error taxonomy for the conversation pipeline.

Every error that can reach a caller carries the HTTP status it maps to and a
human-readable message. RetrievalError is raised by knowledge retrievers and
is always absorbed by the orchestrator.
"""


class ClamiaError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500
    default_message: str = "An error occurred while processing your request"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ClamiaError):
    """Malformed conversation payload."""

    status_code = 400
    default_message = "Invalid request"


class RateLimitExceeded(ClamiaError):
    """Client exceeded its request budget for the current window."""

    status_code = 429
    default_message = "Too many requests. Please try again later."


class ConfigurationError(ClamiaError):
    """A required credential or setting is missing."""

    status_code = 500
    default_message = "OpenAI API key is not configured"


class UpstreamError(ClamiaError):
    """The language model endpoint failed or returned nothing usable."""

    status_code = 500
    default_message = "Language model request failed"


class UpstreamTimeout(UpstreamError):
    """The language model did not answer within the time budget."""

    default_message = "Language model request timed out"


class RetrievalError(ClamiaError):
    """Embedding or vector index lookup failed."""

    default_message = "Knowledge retrieval failed"
