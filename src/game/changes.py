"""
Tile level deltas.

A Change describes one atomic board mutation. The same records are used to apply an effect
and to tell the clients what happened. Within one action all removals are listed before all additions,
so a client can clear tiles first without ever holding two pieces on one tile.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from src.game.pieces import Piece
from src.game.tile import Tile


class ActionType(IntEnum):
    REMOVE_PIECE = 0x01
    ADD_PIECE = 0x02


class ChangeReason(IntEnum):
    TURN_START = 0x01
    # 0x02 is reserved
    NORMAL_MOVEMENT = 0x03
    CAPTURE = 0x04
    CARD_EFFECT = 0x05


@dataclass(frozen=True)
class Change:
    tile_id: int
    action_type: ActionType
    reason: ChangeReason
    # byte code of the piece added (see pieces.py). Removals carry none.
    parameter: Optional[int] = None

    @property
    def is_removal(self) -> bool:
        return self.action_type == ActionType.REMOVE_PIECE


def removal(tile: Tile, reason: ChangeReason) -> Change:
    return Change(tile.id, ActionType.REMOVE_PIECE, reason)


def addition(tile: Tile, piece: Piece, reason: ChangeReason) -> Change:
    return Change(tile.id, ActionType.ADD_PIECE, reason, piece.parameter)


def removals_first(changes: list[Change]) -> list[Change]:
    """Stable reorder: removals keep their relative order, and so do additions"""
    return [c for c in changes if c.is_removal] + [c for c in changes if not c.is_removal]


def is_removals_first(changes: list[Change]) -> bool:
    seen_addition = False
    for change in changes:
        if not change.is_removal:
            seen_addition = True
        elif seen_addition:
            return False
    return True
