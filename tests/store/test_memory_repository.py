"""Unit tests for src/store/memory_repository.py"""

from src.store.memory_repository import InMemoryRoomRepository


def test_create_and_get(room_repository: InMemoryRoomRepository) -> None:
    room = room_repository.create_room()
    assert room_repository.get_room(room.room_id) is room
    assert room_repository.get_room("missing") is None
    assert room_repository.list_rooms() == [room]


def test_room_ids_are_unique(room_repository: InMemoryRoomRepository) -> None:
    ids = {room_repository.create_room().room_id for _ in range(10)}
    assert len(ids) == 10


def test_find_room_of(room_repository: InMemoryRoomRepository) -> None:
    room = room_repository.create_room()
    room.add_player("session")
    assert room_repository.find_room_of("session") is room
    assert room_repository.find_room_of("other") is None


def test_waiting_room(room_repository: InMemoryRoomRepository) -> None:
    empty = room_repository.create_room()
    assert room_repository.waiting_room() is None

    empty.add_player("first")
    assert room_repository.waiting_room() is empty

    empty.add_player("second")
    assert room_repository.waiting_room() is None


def test_started_room_is_not_waiting(room_repository: InMemoryRoomRepository) -> None:
    room = room_repository.create_room()
    room.add_player("first")
    room.start(seed=0)
    assert room_repository.waiting_room() is None


def test_delete(room_repository: InMemoryRoomRepository) -> None:
    room = room_repository.create_room()
    assert room_repository.delete_room(room.room_id) is room
    assert room_repository.delete_room(room.room_id) is None
    assert room_repository.list_rooms() == []
