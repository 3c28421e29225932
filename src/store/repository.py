"""Protocol repository for rooms. Matches only live in memory, so far there is a single implementation."""

from typing import Protocol

from src.game.room import Room


class RoomRepository(Protocol):
    """Storage of the open rooms"""

    def get_room(self, room_id: str) -> Room | None:
        """Get room by ID, if it exists."""
        ...

    def create_room(self) -> Room:
        """Open a new, empty room with a fresh ID."""
        ...

    def find_room_of(self, session_id: str) -> Room | None:
        """Room the session is seated in, if any."""
        ...

    def waiting_room(self) -> Room | None:
        """A room with a single player waiting for an opponent, if any."""
        ...

    def delete_room(self, room_id: str) -> Room | None:
        """Remove a room and return it."""
        ...

    def list_rooms(self) -> list[Room]:
        ...
