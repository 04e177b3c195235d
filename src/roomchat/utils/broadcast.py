"""
Broadcast Utilities

Contains the connection interface the chat core talks to and the
broadcaster that fans events out to a room's connections.
"""

import logging
import threading
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """
    A live client connection as seen by the chat core.

    ``send`` queues a frame for delivery and returns immediately.
    Frames sent to one connection are delivered in the order they were
    queued. ``close`` starts closing the connection without waiting for it.
    """

    def send(self, frame: str) -> None:
        ...

    def close(self, reason: str = "") -> None:
        ...


class EventBroadcaster:
    """
    Delivers events to a single connection or to every member of a room.

    Tracks which connection belongs to which user in each room, in join
    order.
    """

    def __init__(self):
        # Maps room token -> {user_id: connection}
        self._room_clients: Dict[str, Dict[str, Connection]] = {}
        self._lock = threading.Lock()

    def register(self, room_token: str, user_id: str, connection: Connection):
        """
        Track that a user's connection is a member of a room.

        Args:
            room_token: The room token
            user_id: The user's ID
            connection: The user's connection
        """
        with self._lock:
            self._room_clients.setdefault(room_token, {})[user_id] = connection

    def unregister(self, room_token: str, user_id: str):
        with self._lock:
            clients = self._room_clients.get(room_token)
            if clients is not None:
                clients.pop(user_id, None)

    def send_to(self, connection: Connection, frame: str):
        """
        Send a frame to a single connection.

        Args:
            connection: The target connection
            frame: The serialized event
        """
        try:
            connection.send(frame)
        except Exception as e:
            logger.error(f"Failed to send frame to connection: {e}")

    def send_to_room(
        self,
        room_token: str,
        frame: str,
        exclude_user_id: Optional[str] = None,
    ):
        """
        Broadcast a frame to all connections in a room.

        Args:
            room_token: The room token
            frame: The serialized event
            exclude_user_id: Optional user whose connection is skipped
        """
        with self._lock:
            targets = list(self._room_clients.get(room_token, {}).items())

        for user_id, connection in targets:
            if user_id == exclude_user_id:
                continue
            self.send_to(connection, frame)
