"""
Session Management

Creates and removes users as connections come and go, and announces
presence changes to the rest of the room.
"""

import logging
from typing import Any

from .error_policy import ErrorPolicy
from .exceptions import ChatError
from .identifiers import IdentifierAllocator, IdNamespace
from .relay import MessageRelay
from .room_state import RoomStore, User
from .schemas import (
    create_connected_event,
    create_user_joined_event,
    create_user_left_event,
)
from .utils.broadcast import Connection, EventBroadcaster

logger = logging.getLogger(__name__)


class ClientSession:
    """
    Handle for one authenticated connection.

    The transport forwards the connection's inbound events to
    ``on_message`` and ``on_disconnect``. Neither method raises.
    """

    def __init__(
        self,
        manager: "SessionManager",
        connection: Connection,
        user: User,
        room_token: str,
    ):
        self.manager = manager
        self.connection = connection
        self.user = user
        self.room_token = room_token

    def on_message(self, payload: Any):
        """
        Relay a chat message from this connection.

        Invalid input, or any unexpected fault, disconnects this
        connection only.

        Args:
            payload: The inbound chat-message data
        """
        try:
            self.manager.relay.on_message(self.user, self.room_token, payload)
        except ChatError as e:
            self.manager.error_policy.force_disconnect(self.connection, e)
        except Exception as e:
            logger.exception(
                f"Unexpected error handling message from "
                f"{self.user.user_name}: {e}"
            )
            self.manager.error_policy.force_disconnect(self.connection, e)

    def on_error(self, error: Exception):
        """Apply the error policy to this connection."""
        self.manager.error_policy.force_disconnect(self.connection, error)

    def on_disconnect(self) -> bool:
        try:
            return self.manager.on_disconnect(self.user, self.room_token)
        except Exception as e:
            logger.exception(
                f"Unexpected error disconnecting {self.user.user_name}: {e}"
            )
            return False


class SessionManager:
    """
    Manages room membership for authenticated connections.

    Callers must pass the connection attempt through AuthGate before
    calling ``on_connect``.
    """

    def __init__(
        self,
        room_store: RoomStore,
        allocator: IdentifierAllocator,
        broadcaster: EventBroadcaster,
        relay: MessageRelay = None,
        error_policy: ErrorPolicy = None,
    ):
        """
        Initialize the session manager.

        Args:
            room_store: Store holding every room
            allocator: Identifier allocator shared with the relay
            broadcaster: Event broadcaster shared with the relay
            relay: Message relay used by client sessions
            error_policy: Policy applied to misbehaving connections
        """
        self.room_store = room_store
        self.allocator = allocator
        self.broadcaster = broadcaster
        self.relay = relay or MessageRelay(room_store, allocator, broadcaster)
        self.error_policy = error_policy or ErrorPolicy(broadcaster)

    def on_connect(
        self, connection: Connection, room_token: str, user_name: str
    ) -> ClientSession:
        """
        Add a new user to a room.

        The new connection receives the room snapshot; every other member
        receives a user-joined event.

        Args:
            connection: The authenticated connection
            room_token: The room to join
            user_name: The verified username

        Returns:
            ClientSession: Handle for the connection's later events
        """
        room = self.room_store[room_token]
        user = User(
            user_id=self.allocator.allocate(IdNamespace.USER),
            user_name=user_name,
        )

        with room.lock:
            room.add_user(user)
            self.broadcaster.register(room_token, user.user_id, connection)
            self.broadcaster.send_to(
                connection, create_connected_event(room.snapshot(user))
            )
            self.broadcaster.send_to_room(
                room_token,
                create_user_joined_event(user),
                exclude_user_id=user.user_id,
            )

        logger.info(
            f"User {user_name} ({user.user_id}) has connected to a room "
            f"({len(room.users)} members)"
        )
        return ClientSession(self, connection, user, room_token)

    def on_disconnect(self, user: User, room_token: str) -> bool:
        """
        Remove a user from its room and tell the remaining members.

        Calling this again for a user that is already gone does nothing.

        Args:
            user: The departing user
            room_token: The user's room

        Returns:
            bool: True if the user was removed by this call
        """
        room = self.room_store[room_token]
        with room.lock:
            if not room.remove_user(user):
                logger.debug(f"User {user.user_id} already left, ignoring")
                return False
            self.broadcaster.unregister(room_token, user.user_id)
            self.broadcaster.send_to_room(
                room_token, create_user_left_event(user)
            )

        logger.info(
            f"User {user.user_name} ({user.user_id}) has disconnected "
            f"({len(room.users)} members left)"
        )
        return True
