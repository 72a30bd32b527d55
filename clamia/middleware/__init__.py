"""Middleware module."""

from .cors import EmptyPreflightCORSMiddleware
from .logging_middleware import RequestLoggingMiddleware

__all__ = ['EmptyPreflightCORSMiddleware', 'RequestLoggingMiddleware']
