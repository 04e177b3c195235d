"""
Room Chat Server Package

This package provides an in-memory, multi-room chat server: token
authentication, room membership, message relay, and a WebSocket
transport.
"""

from .auth import AuthGate
from .config import ServerConfig
from .error_policy import ErrorPolicy
from .exceptions import (
    ChatError,
    AuthenticationError,
    InputValidationError,
    ConfigurationError,
)
from .identifiers import IdentifierAllocator, IdNamespace
from .relay import MessageRelay
from .room_state import Message, RoomState, RoomStore, TokenRegistry, User
from .session import ClientSession, SessionManager
from .utils.broadcast import Connection, EventBroadcaster
from .websocket_server import WebSocketConnection, WebSocketServer

__all__ = [
    "AuthGate",
    "ServerConfig",
    "ErrorPolicy",
    "ChatError",
    "AuthenticationError",
    "InputValidationError",
    "ConfigurationError",
    "IdentifierAllocator",
    "IdNamespace",
    "MessageRelay",
    "Message",
    "RoomState",
    "RoomStore",
    "TokenRegistry",
    "User",
    "ClientSession",
    "SessionManager",
    "Connection",
    "EventBroadcaster",
    "WebSocketConnection",
    "WebSocketServer",
]
