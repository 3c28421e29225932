"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def direction(self) -> int:
        """White starts on the bottom rows (y=6,7) and moves up the board, towards y=0"""
        return -1 if self == Color.WHITE else 1


class PieceType(StrEnum):
    PAWN = "pawn"
    ROOK = "rook"
    KNIGHT = "knight"
    BISHOP = "bishop"
    QUEEN = "queen"
    KING = "king"
    JUMPER = "jumper"
    OGRE = "ogre"


class Phase(StrEnum):
    NORMAL = "normal"
    CARD_SELECTION = "card-selection"
    GAME_OVER = "game-over"
