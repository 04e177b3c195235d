"""
Tests for Room State

Tests for the data model, token registry and room store.
"""

import pytest

from roomchat import Message, RoomState, RoomStore, TokenRegistry, User
from conftest import TOKEN_A, TOKEN_B


def test_user_to_dict_uses_wire_names():
    """Test that a user serializes with the client field names."""
    user = User(user_id="u-1", user_name="alice")
    data = user.to_dict()
    assert data["UserId"] == "u-1"
    assert data["UserName"] == "alice"
    assert data["ConnectTimeStamp"]


def test_message_to_dict_uses_wire_names():
    message = Message(
        message_id="m-1",
        user_id="u-1",
        sender_name="alice",
        message_text="hello",
        timestamp="2025-11-23T10:30:15+00:00",
    )
    assert message.to_dict() == {
        "UserId": "u-1",
        "MessageId": "m-1",
        "SenderName": "alice",
        "MessageText": "hello",
        "TimeStamp": "2025-11-23T10:30:15+00:00",
    }


def test_users_compare_by_identity():
    """Two users with the same fields are still different users."""
    first = User(user_id="u-1", user_name="alice", connect_timestamp="t")
    second = User(user_id="u-1", user_name="alice", connect_timestamp="t")
    assert first != second


class TestRoomState:
    """Tests for RoomState membership and history."""

    def test_room_starts_empty(self):
        room = RoomState(token=TOKEN_A)
        assert room.users == []
        assert room.messages == []

    def test_add_user_keeps_join_order(self):
        room = RoomState(token=TOKEN_A)
        alice = User(user_id="u-1", user_name="alice")
        bob = User(user_id="u-2", user_name="bob")
        room.add_user(alice)
        room.add_user(bob)
        assert room.users == [alice, bob]

    def test_add_user_rejects_duplicate_id(self):
        room = RoomState(token=TOKEN_A)
        room.add_user(User(user_id="u-1", user_name="alice"))
        with pytest.raises(ValueError):
            room.add_user(User(user_id="u-1", user_name="mallory"))
        assert len(room.users) == 1

    def test_remove_user_by_identity(self):
        room = RoomState(token=TOKEN_A)
        alice = User(user_id="u-1", user_name="alice")
        bob = User(user_id="u-2", user_name="bob")
        room.add_user(alice)
        room.add_user(bob)

        assert room.remove_user(alice) is True
        assert room.users == [bob]

    def test_remove_missing_user_is_noop(self):
        """Removing an absent user must not drop anyone else."""
        room = RoomState(token=TOKEN_A)
        bob = User(user_id="u-2", user_name="bob")
        room.add_user(bob)

        ghost = User(user_id="u-9", user_name="ghost")
        assert room.remove_user(ghost) is False
        assert room.users == [bob]

    def test_snapshot_contains_users_and_messages(self):
        room = RoomState(token=TOKEN_A)
        alice = User(user_id="u-1", user_name="alice")
        room.add_user(alice)
        room.add_message(
            Message("m-1", "u-1", "alice", "hi", "2025-11-23T10:30:15+00:00")
        )

        snapshot = room.snapshot(alice)
        assert snapshot["UserObject"]["UserId"] == "u-1"
        assert [u["UserName"] for u in snapshot["UserList"]] == ["alice"]
        assert [m["MessageText"] for m in snapshot["MessageList"]] == ["hi"]


class TestTokenRegistry:
    """Tests for TokenRegistry."""

    def test_contains_registered_tokens(self):
        registry = TokenRegistry([TOKEN_A])
        assert registry.contains(TOKEN_A)
        assert TOKEN_A in registry
        assert not registry.contains(TOKEN_B)

    def test_contains_rejects_non_strings(self):
        registry = TokenRegistry([TOKEN_A])
        assert not registry.contains(None)
        assert not registry.contains(123)

    def test_duplicates_collapse_and_order_is_kept(self):
        registry = TokenRegistry([TOKEN_B, TOKEN_A, TOKEN_B])
        assert len(registry) == 2
        assert list(registry) == [TOKEN_B, TOKEN_A]

    def test_malformed_token_is_kept_but_logged(self, caplog):
        registry = TokenRegistry(["short"])
        assert "short" in registry
        assert "does not match the token format" in caplog.text


class TestRoomStore:
    """Tests for RoomStore."""

    def test_rooms_are_created_eagerly(self):
        store = RoomStore(TokenRegistry([TOKEN_A, TOKEN_B]))
        assert len(store) == 2
        assert store.get_room(TOKEN_A).token == TOKEN_A
        assert store[TOKEN_B].users == []

    def test_unknown_token(self):
        store = RoomStore(TokenRegistry([TOKEN_A]))
        assert store.get_room(TOKEN_B) is None
        with pytest.raises(KeyError):
            store[TOKEN_B]

    def test_rooms_are_independent(self):
        store = RoomStore(TokenRegistry([TOKEN_A, TOKEN_B]))
        store[TOKEN_A].add_user(User(user_id="u-1", user_name="alice"))
        assert len(store[TOKEN_A].users) == 1
        assert store[TOKEN_B].users == []
