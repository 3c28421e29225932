"""
A tile on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Optional

from src.core.config import BOARD_SIZE

if TYPE_CHECKING:
    from src.game.pieces import Piece

NUM_TILES = BOARD_SIZE * BOARD_SIZE


class TileState(StrEnum):
    """Only relevant to whoever draws the board. The server never looks at it."""

    NORMAL = "normal"
    SELECTABLE = "selectable"
    SELECTED = "selected"


def is_within_bounds(x: int, y: int) -> bool:
    return (0 <= x < BOARD_SIZE) and (0 <= y < BOARD_SIZE)


def is_valid_tile_id(tile_id: int) -> bool:
    return 0 <= tile_id < NUM_TILES


def to_tile_id(x: int, y: int) -> int:
    """Wire encoding of a tile. Both clients and the server depend on this exact formula."""
    return y * BOARD_SIZE + x


def from_tile_id(tile_id: int) -> tuple[int, int]:
    """Inverse of `to_tile_id()`: returns (x, y)"""
    return tile_id % BOARD_SIZE, tile_id // BOARD_SIZE


@dataclass(eq=False)
class Tile:
    x: int
    y: int
    # non-owning: the Board owns every piece. Kept out of repr to avoid recursing through piece.tile
    piece: Optional[Piece] = field(default=None, repr=False)
    state: TileState = TileState.NORMAL

    @property
    def id(self) -> int:
        return to_tile_id(self.x, self.y)

    @property
    def is_occupied(self) -> bool:
        return self.piece is not None

    def reset_state(self) -> None:
        self.state = TileState.NORMAL
