"""Shared utilities for the browser session gateway."""

from .error_mapper import map_engine_error, create_error_response
from .guardrails import is_safe_url, truncate_text

__all__ = [
    "map_engine_error",
    "create_error_response",
    "is_safe_url",
    "truncate_text",
]
