"""
Exceptions raised by the chat core.
"""


class ChatError(Exception):
    """Base class for errors raised by the chat core."""


class AuthenticationError(ChatError):
    """A connection attempt presented an invalid token or username."""


class InputValidationError(ChatError):
    """A live connection sent input that cannot be processed."""


class ConfigurationError(ValueError):
    """The server configuration is missing or malformed."""
