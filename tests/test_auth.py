"""
Tests for the Authentication Gate
"""

import pytest

from roomchat import AuthenticationError
from conftest import TOKEN_A, UNKNOWN_TOKEN


def test_valid_attempt_is_accepted(auth_gate):
    assert auth_gate.authenticate(TOKEN_A, "alice") == (TOKEN_A, "alice")


@pytest.mark.parametrize(
    "token",
    [None, "", 42, TOKEN_A[:-1], TOKEN_A + "x", "!" * 60, "a" * 59 + " "],
)
def test_malformed_token_is_rejected(auth_gate, token):
    with pytest.raises(AuthenticationError, match="verification \\[Room ID\\] failed"):
        auth_gate.authenticate(token, "alice")


def test_unknown_token_is_rejected(auth_gate):
    with pytest.raises(AuthenticationError, match="does not exist on server"):
        auth_gate.authenticate(UNKNOWN_TOKEN, "alice")


@pytest.mark.parametrize("user_name", [None, "", 7, ["alice"]])
def test_invalid_username_is_rejected(auth_gate, user_name):
    with pytest.raises(AuthenticationError, match="Username verification failed"):
        auth_gate.authenticate(TOKEN_A, user_name)


def test_token_is_checked_before_username(auth_gate):
    """A bad token is reported even when the username is bad too."""
    with pytest.raises(AuthenticationError, match="does not exist"):
        auth_gate.authenticate(UNKNOWN_TOKEN, "")


def test_rejection_touches_no_room(auth_gate, room_store):
    with pytest.raises(AuthenticationError):
        auth_gate.authenticate(UNKNOWN_TOKEN, "alice")
    assert all(room.users == [] for room in room_store)
