"""
Shared fixtures for the chat server tests.
"""

import json

import pytest

from roomchat import (
    AuthGate,
    EventBroadcaster,
    IdentifierAllocator,
    RoomStore,
    SessionManager,
    TokenRegistry,
)

TOKEN_A = "A" * 30 + "b.c-d_e" + "0" * 23
TOKEN_B = "z" * 60
UNKNOWN_TOKEN = "q" * 60


class MockConnection:
    """Records frames and close calls instead of talking to a socket."""

    def __init__(self, name=""):
        self.name = name
        self.sent_messages = []
        self.closed = False
        self.close_reason = None

    def send(self, frame):
        self.sent_messages.append(frame)

    def close(self, reason=""):
        self.closed = True
        self.close_reason = reason

    def events(self, event_type=None):
        """Decoded frames, optionally only those of ``event_type``."""
        decoded = [json.loads(m) for m in self.sent_messages]
        if event_type is None:
            return decoded
        return [e for e in decoded if e["type"] == event_type]


@pytest.fixture
def registry():
    return TokenRegistry([TOKEN_A, TOKEN_B])


@pytest.fixture
def room_store(registry):
    return RoomStore(registry)


@pytest.fixture
def auth_gate(registry):
    return AuthGate(registry)


@pytest.fixture
def session_manager(room_store):
    return SessionManager(room_store, IdentifierAllocator(), EventBroadcaster())
