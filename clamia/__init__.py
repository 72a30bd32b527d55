"""Clamia - conversation orchestration backend for an AI therapist."""

__version__ = "1.0.0"
