"""Structured logging utilities."""

from .audit import GenerationEvent, JsonlGenerationLog, sanitize_arguments, utc_timestamp

__all__ = ["GenerationEvent", "JsonlGenerationLog", "sanitize_arguments", "utc_timestamp"]
