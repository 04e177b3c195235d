"""
Utilities for the Chat Server

This module contains utility functions for common operations
like broadcasting and input validation.
"""

from .broadcast import Connection, EventBroadcaster
from .validation import (
    TOKEN_LENGTH,
    is_valid_token_format,
    is_non_empty_string,
)

__all__ = [
    "Connection",
    "EventBroadcaster",
    "TOKEN_LENGTH",
    "is_valid_token_format",
    "is_non_empty_string",
]
