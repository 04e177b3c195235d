"""
Validation Utilities

Contains predicates for validating room tokens, usernames and message
content.
"""

from typing import Any

# Room tokens are exactly this many characters from TOKEN_ALPHABET
TOKEN_LENGTH = 60
TOKEN_ALPHABET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789._-"
)


def is_valid_token_format(token: Any) -> bool:
    """
    Check that a token is a string of the expected length and alphabet.

    Args:
        token: The candidate token

    Returns:
        bool: True if the token is well formed
    """
    return (
        isinstance(token, str)
        and len(token) == TOKEN_LENGTH
        and all(char in TOKEN_ALPHABET for char in token)
    )


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0
