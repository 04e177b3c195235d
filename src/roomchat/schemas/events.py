"""
Event Schema Definitions

Contains the event catalog and functions for creating the frames sent
to and received from clients.
"""

import json
from enum import Enum
from typing import Any, Dict

from ..room_state import Message, User

# Sent with every RequestError. Details stay in the server log.
FORCED_DISCONNECT_MESSAGE = (
    "An error has occurred. You will be disconnected now. "
    "If this issue persists, please contact the developer."
)


class ChatEvent(str, Enum):
    """Wire names of the events exchanged with clients."""

    REQUEST_ERROR = "request-error"
    CONNECTED = "connected"
    USER_JOINED = "user-joined"
    USER_LEFT = "user-left"
    CHAT_MESSAGE = "chat-message"


def create_frame(event: ChatEvent, data: Dict[str, Any]) -> str:
    """
    Serialize an event into a JSON frame.

    Args:
        event: The event type
        data: The event payload

    Returns:
        str: ``{"type": ..., "data": ...}`` as JSON
    """
    return json.dumps({"type": event.value, "data": data})


def create_connected_event(snapshot: Dict[str, Any]) -> str:
    return create_frame(ChatEvent.CONNECTED, snapshot)


def create_user_joined_event(user: User) -> str:
    return create_frame(ChatEvent.USER_JOINED, user.to_dict())


def create_user_left_event(user: User) -> str:
    return create_frame(ChatEvent.USER_LEFT, user.to_dict())


def create_chat_message_event(message: Message) -> str:
    return create_frame(ChatEvent.CHAT_MESSAGE, message.to_dict())


def create_request_error_event(
    error_message: str = FORCED_DISCONNECT_MESSAGE,
) -> str:
    """
    Create a request-error frame.

    Args:
        error_message: Text shown to the client before it is disconnected

    Returns:
        str: JSON frame
    """
    return create_frame(ChatEvent.REQUEST_ERROR, {"ErrorMessage": error_message})
