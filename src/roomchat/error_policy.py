"""
Error Policy

What happens to a connection that sent input the server cannot accept.
"""

import logging

from .schemas import create_request_error_event
from .utils.broadcast import Connection, EventBroadcaster

logger = logging.getLogger(__name__)


class ErrorPolicy:
    """
    Notifies the offending connection and then closes it.

    There is no retry on the same connection; the client has to connect
    again.
    """

    def __init__(self, broadcaster: EventBroadcaster):
        self.broadcaster = broadcaster

    def force_disconnect(self, connection: Connection, error: Exception):
        """
        Send a request-error frame and close the connection.

        Args:
            connection: The offending connection
            error: The cause, logged but never sent to the client
        """
        logger.warning(f"Forcing disconnect after error: {error}")
        self.broadcaster.send_to(connection, create_request_error_event())
        try:
            connection.close(reason="request error")
        except Exception as e:
            logger.error(f"Failed to close connection: {e}")
