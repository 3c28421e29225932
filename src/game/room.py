"""A room pairs two sessions and holds the match they play"""

from dataclasses import dataclass, field
from typing import Optional

from src.core.config import RANDOM_SEED
from src.core.exceptions import RoomFullError, SessionNotFoundError
from src.core.shared_types import Color
from src.game.match import Match

# first session to join plays white
SEAT_ORDER: list[Color] = [Color.WHITE, Color.BLACK]


@dataclass
class Room:
    room_id: str
    players: dict[str, Color] = field(default_factory=dict)
    match: Optional[Match] = None

    @property
    def is_full(self) -> bool:
        return len(self.players) == len(SEAT_ORDER)

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def is_playing(self) -> bool:
        return self.match is not None and not self.match.is_over

    @property
    def session_ids(self) -> list[str]:
        return list(self.players.keys())

    def add_player(self, session_id: str) -> Color:
        """Seat the session on the first free color"""
        if session_id in self.players:
            return self.players[session_id]
        if self.is_full:
            raise RoomFullError(self.room_id)

        taken = set(self.players.values())
        color = next(color for color in SEAT_ORDER if color not in taken)
        self.players[session_id] = color
        return color

    def remove_player(self, session_id: str) -> Color:
        color = self.color_of(session_id)
        del self.players[session_id]
        return color

    def color_of(self, session_id: str) -> Color:
        if session_id not in self.players:
            raise SessionNotFoundError(session_id)
        return self.players[session_id]

    def session_of(self, color: Color) -> Optional[str]:
        return next((sid for sid, c in self.players.items() if c == color), None)

    def start(
        self, layout: Optional[str] = None, seed: Optional[int] = RANDOM_SEED
    ) -> Match:
        self.match = Match.new_match(layout=layout, seed=seed)
        return self.match
