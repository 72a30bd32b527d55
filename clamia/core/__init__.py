"""Core module - the per-turn conversation pipeline."""

from .errors import (
    ClamiaError,
    ValidationError,
    RateLimitExceeded,
    ConfigurationError,
    UpstreamError,
    UpstreamTimeout,
    RetrievalError,
)

__all__ = [
    'ClamiaError', 'ValidationError', 'RateLimitExceeded', 'ConfigurationError',
    'UpstreamError', 'UpstreamTimeout', 'RetrievalError',
]
