"""
Authentication Gate

Validates a connection attempt before any session state is created.
"""

import logging
from typing import Any, Tuple

from .exceptions import AuthenticationError
from .room_state import TokenRegistry
from .utils.validation import is_non_empty_string, is_valid_token_format

logger = logging.getLogger(__name__)


class AuthGate:
    """
    Sole authorization check for incoming connections.

    A connection is accepted when its token is well formed, registered,
    and accompanied by a non-empty username.
    """

    def __init__(self, registry: TokenRegistry):
        self.registry = registry

    def authenticate(self, token: Any, user_name: Any) -> Tuple[str, str]:
        """
        Validate a connection attempt.

        Args:
            token: The room token presented by the client
            user_name: The username presented by the client

        Returns:
            tuple: (token, user_name) once both are verified

        Raises:
            AuthenticationError: If any check fails
        """
        if not is_valid_token_format(token):
            raise AuthenticationError("Auth token verification [Room ID] failed.")
        if not self.registry.contains(token):
            raise AuthenticationError(
                "Auth token [Room ID] does not exist on server."
            )
        if not is_non_empty_string(user_name):
            raise AuthenticationError("Username verification failed.")
        return token, user_name
