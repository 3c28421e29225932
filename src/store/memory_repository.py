"""Implementation of RoomRepository keeping everything in a dictionary"""

from uuid import uuid4

from src.game.room import Room


class InMemoryRoomRepository:
    def __init__(self) -> None:
        self.rooms: dict[str, Room] = {}

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def create_room(self) -> Room:
        room = Room(room_id=uuid4().hex)
        self.rooms[room.room_id] = room
        return room

    def find_room_of(self, session_id: str) -> Room | None:
        return next(
            (room for room in self.rooms.values() if session_id in room.players), None
        )

    def waiting_room(self) -> Room | None:
        return next(
            (
                room
                for room in self.rooms.values()
                if room.match is None and not room.is_full and not room.is_empty
            ),
            None,
        )

    def delete_room(self, room_id: str) -> Room | None:
        return self.rooms.pop(room_id, None)

    def list_rooms(self) -> list[Room]:
        return list(self.rooms.values())
