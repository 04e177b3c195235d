"""
Message Relay

Validates, stores and broadcasts chat messages.
"""

import logging
from typing import Any

from .exceptions import InputValidationError
from .identifiers import IdentifierAllocator, IdNamespace
from .room_state import Message, RoomStore, User, utc_now
from .schemas import ChatEvent, create_chat_message_event
from .utils.broadcast import EventBroadcaster
from .utils.validation import is_non_empty_string

logger = logging.getLogger(__name__)


class MessageRelay:
    """
    Accepts chat messages from room members and relays them to the room.

    The append to the room history and the broadcast happen under the
    room lock, so every member receives a room's messages in the order
    they were accepted.
    """

    def __init__(
        self,
        room_store: RoomStore,
        allocator: IdentifierAllocator,
        broadcaster: EventBroadcaster,
    ):
        self.room_store = room_store
        self.allocator = allocator
        self.broadcaster = broadcaster

    def on_message(self, user: User, room_token: str, payload: Any) -> Message:
        """
        Store a chat message and broadcast it to the whole room.

        Args:
            user: The sending user
            room_token: The sender's room
            payload: The inbound event data, ``{"MessageText": str}``

        Returns:
            Message: The stored message

        Raises:
            InputValidationError: If the payload has no usable message text
        """
        if not isinstance(payload, dict):
            raise InputValidationError(
                f"{ChatEvent.CHAT_MESSAGE.value} => Invalid input parameters."
            )
        message_text = payload.get("MessageText")
        if not is_non_empty_string(message_text):
            raise InputValidationError(
                f"{ChatEvent.CHAT_MESSAGE.value} => "
                f"Message does not match the expected input pattern."
            )

        room = self.room_store[room_token]
        with room.lock:
            message = Message(
                message_id=self.allocator.allocate(IdNamespace.MESSAGE),
                user_id=user.user_id,
                sender_name=user.user_name,
                message_text=message_text,
                timestamp=utc_now(),
            )
            room.add_message(message)
            self.broadcaster.send_to_room(
                room_token, create_chat_message_event(message)
            )

        logger.info(
            f"User {user.user_name} sent message {message.message_id} "
            f"({len(message_text)} chars)"
        )
        return message
