"""
Card effects

Each effect validates the selected tiles against the board and, only when the selection is valid,
mutates the board and appends the resulting Changes (all removals first, then all additions).
An invalid selection leaves the board untouched and appends nothing.

The Match never runs an effect on its live board before a dry run on a snapshot succeeded (see `dry_run()`).
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

from src.core.shared_types import Color, PieceType
from src.game.board import Board
from src.game.changes import Change, ChangeReason, addition, removal
from src.game.pieces import Piece
from src.game.tile import Tile

logger = logging.getLogger(__name__)


class CardType(IntEnum):
    ONSLAUGHT = 0x01
    POLYMORPH = 0x02
    BIZARRE_MUTATION = 0x03
    DRAUGHT = 0x04
    TELEKINESIS = 0x05
    TOPSY_TURVY = 0x06


ONSLAUGHT_MAX_PAWNS = 3
TOPSY_TURVY_MAX_PAWNS = 8
ORTHOGONAL_STEPS: list[tuple[int, int]] = [(0, 1), (0, -1), (1, 0), (-1, 0)]


# --- HELPERS ---
def _piece_on(board: Board, tile_id: int) -> Piece | None:
    tile = board.tile_by_id(tile_id)
    return tile.piece if tile else None


def _forward_tile(board: Board, piece: Piece) -> Tile | None:
    assert piece.tile is not None
    return board.tile_at(piece.tile.x, piece.tile.y + piece.direction)


def _free_orthogonal_tiles(board: Board, piece: Piece) -> list[Tile]:
    assert piece.tile is not None
    free: list[Tile] = []
    for dx, dy in ORTHOGONAL_STEPS:
        tile = board.tile_at(piece.tile.x + dx, piece.tile.y + dy)
        if tile is not None and not tile.is_occupied:
            free.append(tile)
    return free


def _can_advance(board: Board, piece: Piece) -> bool:
    forward = _forward_tile(board, piece)
    return forward is not None and not forward.is_occupied


def _transform_single(
    selections: list[int],
    board: Board,
    changes: list[Change],
    allowed: set[PieceType],
    new_type: PieceType,
) -> bool:
    """Shared by the cards that turn exactly one piece (of either color) into another type, in place."""
    if len(selections) != 1:
        return False

    tile = board.tile_by_id(selections[0])
    if tile is None or tile.piece is None or tile.piece.type not in allowed:
        return False

    new_piece = board.transform(tile.piece, new_type)
    changes.append(removal(tile, ChangeReason.CARD_EFFECT))
    changes.append(addition(tile, new_piece, ChangeReason.CARD_EFFECT))
    return True


# --- EFFECTS ---
def onslaught(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """
    Move up to three of your own pawns one tile straight forward.

    Selections that are not your pawn, or whose forward tile is taken, are skipped.
    Each pawn moves at most once: selecting the tile a pawn was just pushed onto does nothing.
    Succeeds if at least one pawn moved.
    """
    removals: list[Change] = []
    additions: list[Change] = []
    moved: set[Piece] = set()
    for tile_id in selections[:ONSLAUGHT_MAX_PAWNS]:
        pawn = _piece_on(board, tile_id)
        if pawn is None or pawn.type != PieceType.PAWN or pawn.color != color:
            continue
        if pawn in moved:
            continue

        forward = _forward_tile(board, pawn)
        if forward is None or forward.is_occupied:
            continue

        assert pawn.tile is not None
        removals.append(removal(pawn.tile, ChangeReason.CARD_EFFECT))
        board.move(pawn, forward)
        additions.append(addition(forward, pawn, ChangeReason.CARD_EFFECT))
        moved.add(pawn)

    changes.extend(removals + additions)
    return bool(additions)


def polymorph(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """Demote any bishop or rook (either color) to a knight"""
    return _transform_single(
        selections, board, changes, {PieceType.BISHOP, PieceType.ROOK}, PieceType.KNIGHT
    )


def bizarre_mutation(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """Turn any pawn (either color) into a jumper"""
    return _transform_single(selections, board, changes, {PieceType.PAWN}, PieceType.JUMPER)


def draught(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """Demote a rook, bishop or knight (either color) to a jumper"""
    return _transform_single(
        selections,
        board,
        changes,
        {PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT},
        PieceType.JUMPER,
    )


def telekinesis(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """
    Push an enemy pawn one tile along a row or a column.

    selections: [tile of the enemy pawn, destination tile]. The destination must be empty.
    """
    if len(selections) != 2:
        return False

    pawn_tile = board.tile_by_id(selections[0])
    target_tile = board.tile_by_id(selections[1])
    if pawn_tile is None or target_tile is None:
        return False

    pawn = pawn_tile.piece
    if pawn is None or pawn.type != PieceType.PAWN or pawn.color == color:
        return False

    if target_tile.is_occupied:
        return False

    dx = abs(target_tile.x - pawn_tile.x)
    dy = abs(target_tile.y - pawn_tile.y)
    if dx + dy != 1:
        return False

    changes.append(removal(pawn_tile, ChangeReason.CARD_EFFECT))
    board.move(pawn, target_tile)
    changes.append(addition(target_tile, pawn, ChangeReason.CARD_EFFECT))
    return True


def topsy_turvy(selections: list[int], board: Board, color: Color, changes: list[Change]) -> bool:
    """
    Permanently reverse the movement of up to eight of your own pawns: they move diagonally and capture straight ahead.

    Selections that are not your pawn, or that are already reversed, are skipped.
    Every flagged pawn is sent as a remove + add pair on its own tile. Clients restore the flag
    from the list of reversed pawn tiles that accompanies the state.
    """
    if not 1 <= len(selections) <= TOPSY_TURVY_MAX_PAWNS:
        return False

    removals: list[Change] = []
    additions: list[Change] = []
    for tile_id in selections:
        pawn = _piece_on(board, tile_id)
        if (
            pawn is None
            or pawn.type != PieceType.PAWN
            or pawn.color != color
            or pawn.reversed_movement
        ):
            continue

        assert pawn.tile is not None
        pawn.reversed_movement = True
        removals.append(removal(pawn.tile, ChangeReason.CARD_EFFECT))
        additions.append(addition(pawn.tile, pawn, ChangeReason.CARD_EFFECT))

    changes.extend(removals + additions)
    return bool(additions)


# --- ELIGIBILITY (which tiles can be picked at a given stage) ---
EligibilityFn = Callable[[Board, Color, int, list[list[int]]], set[int]]


def _tiles_of(pieces: list[Piece]) -> set[int]:
    return {piece.tile.id for piece in pieces if piece.tile is not None}


def _types_anywhere(*piece_types: PieceType) -> EligibilityFn:
    def _eligible(board: Board, color: Color, stage: int, earlier: list[list[int]]) -> set[int]:
        return _tiles_of([p for p in board.live_pieces() if p.type in piece_types])

    return _eligible


def _onslaught_eligible(board: Board, color: Color, stage: int, earlier: list[list[int]]) -> set[int]:
    pawns = board.locate(PieceType.PAWN, color)
    return _tiles_of([pawn for pawn in pawns if _can_advance(board, pawn)])


def _telekinesis_eligible(board: Board, color: Color, stage: int, earlier: list[list[int]]) -> set[int]:
    if stage == 0:
        pawns = board.locate(PieceType.PAWN, color.opponent)
        return _tiles_of([pawn for pawn in pawns if _free_orthogonal_tiles(board, pawn)])

    # stage 1: the free tiles next to the pawn picked in stage 0
    pawn = _piece_on(board, earlier[0][0]) if earlier and earlier[0] else None
    if pawn is None:
        return set()
    return {tile.id for tile in _free_orthogonal_tiles(board, pawn)}


def _topsy_turvy_eligible(board: Board, color: Color, stage: int, earlier: list[list[int]]) -> set[int]:
    pawns = board.locate(PieceType.PAWN, color)
    return _tiles_of([pawn for pawn in pawns if not pawn.reversed_movement])


# --- CARD CATALOG ---
EffectFn = Callable[[list[int], Board, Color, list[Change]], bool]


@dataclass(frozen=True)
class CardInfo:
    name: str
    description: str
    effect: EffectFn
    eligible: EligibilityFn
    # maximum number of selections in each (ordered) stage
    max_selections: tuple[int, ...]
    # a stage is complete at max_selections, except for cards that can be played with fewer picks
    min_final_selections: int | None = None

    @property
    def stages(self) -> int:
        return len(self.max_selections)


CARDS: dict[CardType, CardInfo] = {
    CardType.ONSLAUGHT: CardInfo(
        "Onslaught",
        "Move up to three pawns one tile forward",
        onslaught,
        _onslaught_eligible,
        (ONSLAUGHT_MAX_PAWNS,),
        min_final_selections=1,
    ),
    CardType.POLYMORPH: CardInfo(
        "Polymorph",
        "Demote any bishop or rook to a knight",
        polymorph,
        _types_anywhere(PieceType.BISHOP, PieceType.ROOK),
        (1,),
    ),
    CardType.BIZARRE_MUTATION: CardInfo(
        "Bizarre Mutation",
        "Promote a pawn to a jumper",
        bizarre_mutation,
        _types_anywhere(PieceType.PAWN),
        (1,),
    ),
    CardType.DRAUGHT: CardInfo(
        "Draught",
        "Demote a rook, bishop or knight to a jumper",
        draught,
        _types_anywhere(PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT),
        (1,),
    ),
    CardType.TELEKINESIS: CardInfo(
        "Telekinesis",
        "Move an enemy pawn one cardinal tile",
        telekinesis,
        _telekinesis_eligible,
        (1, 1),
    ),
    CardType.TOPSY_TURVY: CardInfo(
        "Topsy Turvy",
        "Select pawns to permanently reverse their move/capture pattern",
        topsy_turvy,
        _topsy_turvy_eligible,
        (TOPSY_TURVY_MAX_PAWNS,),
        min_final_selections=1,
    ),
}


def execute_card(
    card_type: CardType,
    selections: list[int],
    board: Board,
    color: Color,
    changes: list[Change],
) -> bool:
    """Run the effect on the given board. Returns False (and changes nothing) if the selection is invalid."""
    result = CARDS[card_type].effect(selections, board, color, changes)
    logger.debug(
        "card %s for %s with selections %s -> %s (%d changes)",
        card_type.name,
        color,
        selections,
        result,
        len(changes),
    )
    return result


def dry_run(
    card_type: CardType, selections: list[int], board: Board, color: Color
) -> tuple[bool, list[Change]]:
    """Run the effect on a disposable copy of the board"""
    changes: list[Change] = []
    success = execute_card(card_type, selections, board.snapshot(), color, changes)
    return success, changes


def selectable_tiles(
    card_type: CardType,
    board: Board,
    color: Color,
    stage: int = 0,
    earlier: list[list[int]] | None = None,
) -> set[int]:
    """Tile ids that can be picked in the given stage, given the picks of the earlier stages"""
    return CARDS[card_type].eligible(board, color, stage, earlier or [])


def card_requirements(card_type: CardType, board: Board, color: Color) -> bool:
    """A card is only worth drawing if there is something to select in its first stage."""
    return bool(selectable_tiles(card_type, board, color))
