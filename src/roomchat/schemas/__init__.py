"""
Schemas for the Chat Server

This module contains the event catalog and frame builders used
to talk to clients.
"""

from .events import (
    FORCED_DISCONNECT_MESSAGE,
    ChatEvent,
    create_frame,
    create_connected_event,
    create_user_joined_event,
    create_user_left_event,
    create_chat_message_event,
    create_request_error_event,
)

__all__ = [
    "FORCED_DISCONNECT_MESSAGE",
    "ChatEvent",
    "create_frame",
    "create_connected_event",
    "create_user_joined_event",
    "create_user_left_event",
    "create_chat_message_event",
    "create_request_error_event",
]
