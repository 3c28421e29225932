"""Unit tests for src/game/room.py"""

import pytest

from src.core.exceptions import RoomFullError, SessionNotFoundError
from src.core.shared_types import Color
from src.game.room import Room


def test_seats_white_then_black() -> None:
    room = Room("abc")
    assert room.is_empty
    assert room.add_player("first") == Color.WHITE
    assert not room.is_full
    assert room.add_player("second") == Color.BLACK
    assert room.is_full
    assert room.session_ids == ["first", "second"]
    assert room.session_of(Color.BLACK) == "second"


def test_joining_twice_keeps_the_seat() -> None:
    room = Room("abc")
    room.add_player("first")
    assert room.add_player("first") == Color.WHITE
    assert not room.is_full


def test_third_player_is_refused() -> None:
    room = Room("abc")
    room.add_player("first")
    room.add_player("second")
    with pytest.raises(RoomFullError) as e:
        room.add_player("third")
    assert e.value.room_id == "abc"


def test_free_seat_is_reused() -> None:
    room = Room("abc")
    room.add_player("first")
    room.add_player("second")
    assert room.remove_player("first") == Color.WHITE
    assert room.add_player("third") == Color.WHITE


def test_unknown_session() -> None:
    room = Room("abc")
    with pytest.raises(SessionNotFoundError):
        room.color_of("nobody")
    with pytest.raises(SessionNotFoundError):
        room.remove_player("nobody")
    assert room.session_of(Color.WHITE) is None


def test_start() -> None:
    room = Room("abc")
    assert not room.is_playing
    match = room.start(seed=0)
    assert room.match is match
    assert room.is_playing
