"""Defines the pieces and the byte codes they are sent with over the wire"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Optional, Self

from src.core.exceptions import InvalidActionError
from src.core.shared_types import Color, PieceType

if TYPE_CHECKING:
    from src.game.tile import Tile


class PieceState(StrEnum):
    ALIVE = "alive"
    DEAD = "dead"


PIECE_CODES: dict[PieceType, int] = {
    PieceType.PAWN: 0x01,
    PieceType.ROOK: 0x02,
    PieceType.KNIGHT: 0x03,
    PieceType.BISHOP: 0x04,
    PieceType.QUEEN: 0x05,
    PieceType.KING: 0x06,
    PieceType.JUMPER: 0x07,
    PieceType.OGRE: 0x08,
}
CODE_TO_PIECE: dict[int, PieceType] = {value: key for key, value in PIECE_CODES.items()}

# Black pieces are offset from the white code
BLACK_OFFSET = 0x10


LAYOUT_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "r": PieceType.ROOK,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
    "j": PieceType.JUMPER,
    "o": PieceType.OGRE,
}
PIECE_TO_LAYOUT: dict[PieceType, str] = {
    value: key for key, value in LAYOUT_TO_PIECE.items()
}


def piece_parameter(piece_type: PieceType, color: Color) -> int:
    code = PIECE_CODES[piece_type]
    return code if color == Color.WHITE else code + BLACK_OFFSET


def parse_piece_parameter(parameter: int) -> tuple[PieceType, Color]:
    """reverse of `piece_parameter()`"""
    color = Color.WHITE if parameter < BLACK_OFFSET else Color.BLACK
    code = parameter & 0x0F
    if (parameter & ~0x1F) or code not in CODE_TO_PIECE:
        raise InvalidActionError(f"Unknown piece parameter: {parameter:#04x}")
    return CODE_TO_PIECE[code], color


@dataclass(eq=False)
class Piece:
    type: PieceType
    color: Color
    has_moved: bool = False
    # only pawns ever set this: a straight two-step in the previous turn makes them en passant targets
    has_double_moved: bool = False
    # Topsy Turvy: permanent once set
    reversed_movement: bool = False
    state: PieceState = PieceState.ALIVE
    tile: Optional[Tile] = field(default=None, repr=False)

    @classmethod
    def from_layout(cls, character: str) -> Self:
        # upper case: White pieces, lower case: Black pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = LAYOUT_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    @classmethod
    def from_parameter(cls, parameter: int) -> Self:
        piece_type, color = parse_piece_parameter(parameter)
        return cls(piece_type, color)

    def to_layout(self) -> str:
        character = PIECE_TO_LAYOUT[self.type]
        return character.upper() if self.color == Color.WHITE else character

    @property
    def parameter(self) -> int:
        return piece_parameter(self.type, self.color)

    @property
    def is_alive(self) -> bool:
        return self.state == PieceState.ALIVE

    @property
    def direction(self) -> int:
        return self.color.direction

    def is_enemy_of(self, other: Optional[Piece]) -> bool:
        return other is not None and other.color != self.color
