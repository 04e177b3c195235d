"""
Room State Management

This module holds the in-memory state of every chat room served by this
process. Rooms are created eagerly, one per registered token, and live
for the lifetime of the process.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .utils.validation import is_valid_token_format

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(eq=False)
class User:
    """
    A connected chat user.

    Users compare by identity: two connections with the same name are
    still two different users.

    Attributes:
        user_id: Globally unique identifier
        user_name: Display name chosen at connect time
        connect_timestamp: ISO 8601 timestamp of the connection
    """

    user_id: str
    user_name: str
    connect_timestamp: str = ""

    def __post_init__(self):
        if not self.connect_timestamp:
            self.connect_timestamp = utc_now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "UserId": self.user_id,
            "UserName": self.user_name,
            "ConnectTimeStamp": self.connect_timestamp,
        }


@dataclass(frozen=True)
class Message:
    """
    A chat message stored in a room's history.

    Attributes:
        message_id: Globally unique identifier
        user_id: ID of the sending user
        sender_name: Name of the sending user at send time
        message_text: The message body
        timestamp: ISO 8601 timestamp when the message was accepted
    """

    message_id: str
    user_id: str
    sender_name: str
    message_text: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "UserId": self.user_id,
            "MessageId": self.message_id,
            "SenderName": self.sender_name,
            "MessageText": self.message_text,
            "TimeStamp": self.timestamp,
        }


@dataclass
class RoomState:
    """
    Membership and history of a single room.

    ``lock`` guards both lists. Callers that mutate the room and then
    broadcast the result hold it across both steps so every member sees
    events in the order the mutations happened.
    """

    token: str
    users: List[User] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def add_user(self, user: User):
        if any(u.user_id == user.user_id for u in self.users):
            raise ValueError(f"User {user.user_id} is already in the room")
        self.users.append(user)

    def remove_user(self, user: User) -> bool:
        """
        Remove the first entry that is ``user``.

        Returns:
            True if the user was found and removed, False otherwise
        """
        for index, entry in enumerate(self.users):
            if entry is user:
                del self.users[index]
                return True
        return False

    def add_message(self, message: Message):
        self.messages.append(message)

    def snapshot(self, user: User) -> Dict[str, Any]:
        """
        Build the Connected payload for a newly joined user.

        Args:
            user: The user the snapshot is delivered to

        Returns:
            dict: UserObject, UserList and MessageList in wire form
        """
        return {
            "UserObject": user.to_dict(),
            "UserList": [u.to_dict() for u in self.users],
            "MessageList": [m.to_dict() for m in self.messages],
        }


class TokenRegistry:
    """Immutable set of room tokens accepted by this server."""

    def __init__(self, tokens: Iterable[str]):
        # dict keeps configuration order and drops duplicates
        self._tokens = tuple(dict.fromkeys(tokens))
        self._lookup = frozenset(self._tokens)
        for token in self._tokens:
            if not is_valid_token_format(token):
                logger.warning(
                    "Registered token does not match the token format "
                    "and can never be used to join"
                )
        logger.info(f"TokenRegistry initialized with {len(self)} tokens")

    def contains(self, token: Any) -> bool:
        return isinstance(token, str) and token in self._lookup

    def __contains__(self, token: Any) -> bool:
        return self.contains(token)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)


class RoomStore:
    """
    Mapping from room token to RoomState.

    One room exists for every registered token. Rooms are never added or
    removed after construction.
    """

    def __init__(self, registry: TokenRegistry):
        """
        Initialize the store with an empty room per registered token.

        Args:
            registry: The token registry to build rooms for
        """
        self.registry = registry
        self._rooms: Dict[str, RoomState] = {
            token: RoomState(token=token) for token in registry
        }
        logger.info(f"RoomStore initialized with {len(self._rooms)} rooms")

    def get_room(self, token: str) -> Optional[RoomState]:
        return self._rooms.get(token)

    def __getitem__(self, token: str) -> RoomState:
        room = self._rooms.get(token)
        if room is None:
            raise KeyError("Unknown room token")
        return room

    def __iter__(self) -> Iterator[RoomState]:
        return iter(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)
