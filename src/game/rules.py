"""
Movement and capturing rules for every piece type

Key idea: Use strategy pattern to define the legality checks for each piece type.
The table is keyed by PieceType. Pawns under the Topsy Turvy effect use a second, fixed set of rules.

Capture legality is always checked before plain move legality (see `resolve_move()`).
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from src.core.config import BOARD_SIZE
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceType
from src.game.pieces import Piece
from src.game.tile import Tile


class Board(Protocol):
    """Just the parts the rules need"""

    def tile_at(self, x: int, y: int) -> Optional[Tile]: ...
    def is_path_clear(self, from_tile: Tile, to_tile: Tile) -> bool: ...

    @property
    def tiles(self) -> list[Tile]: ...


@dataclass
class CaptureResult:
    is_valid: bool
    # a list: the jumper captures the piece it jumps over, en passant takes a pawn next to the target tile
    captured_pieces: list[Piece] = field(default_factory=list)


def _no_capture() -> CaptureResult:
    return CaptureResult(False, [])


def _delta(piece: Piece, target: Tile) -> tuple[int, int]:
    # for the typechecker: rules are only evaluated for pieces on the board
    assert piece.tile is not None
    return target.x - piece.tile.x, target.y - piece.tile.y


def _is_straight(dx: int, dy: int) -> bool:
    return (dx == 0) != (dy == 0)


def _is_diagonal(dx: int, dy: int) -> bool:
    return dx != 0 and abs(dx) == abs(dy)


def _is_knight_jump(dx: int, dy: int) -> bool:
    return (abs(dx), abs(dy)) in {(2, 1), (1, 2)}


PAWN_HOME_ROWS: dict[Color, int] = {Color.WHITE: BOARD_SIZE - 2, Color.BLACK: 1}


def is_on_home_row(piece: Piece) -> bool:
    """Pawns two-step from here, whatever they did before"""
    assert piece.tile is not None
    return piece.tile.y == PAWN_HOME_ROWS[piece.color]


def _is_king_step(dx: int, dy: int) -> bool:
    return (dx, dy) != (0, 0) and abs(dx) <= 1 and abs(dy) <= 1


def _is_ogre_leap(dx: int, dy: int) -> bool:
    return (abs(dx), abs(dy)) in {(2, 0), (0, 2)}


def _capture_occupant(piece: Piece, target: Tile) -> CaptureResult:
    """Standard capture: the enemy standing on the target tile gets taken."""
    if piece.is_enemy_of(target.piece):
        # for the typechecker: is_enemy_of already made sure there is a piece
        assert target.piece is not None
        return CaptureResult(True, [target.piece])
    return _no_capture()


# --- PAWN ---
def pawn_move(piece: Piece, target: Tile, board: Board) -> bool:
    """
    A pawn:
    - moves by a single tile forward onto an empty tile
    - can move by two from its home row, if the tile in between is empty as well
    """
    if target.is_occupied:
        return False
    assert piece.tile is not None
    dx, dy = _delta(piece, target)
    if dx != 0:
        return False

    if dy == piece.direction:
        return True

    if is_on_home_row(piece) and dy == 2 * piece.direction:
        passed_tile = board.tile_at(piece.tile.x, piece.tile.y + piece.direction)
        return passed_tile is not None and not passed_tile.is_occupied
    return False


def pawn_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    """
    Pawns take diagonally (one tile forward).

    En passant: moving diagonally onto an empty tile takes the enemy pawn standing right next to you,
    if that pawn made a straight two-step in the previous turn.
    """
    assert piece.tile is not None
    dx, dy = _delta(piece, target)
    if abs(dx) != 1 or dy != piece.direction:
        return _no_capture()

    if target.is_occupied:
        return _capture_occupant(piece, target)

    passant_tile = board.tile_at(target.x, piece.tile.y)
    passed_pawn = passant_tile.piece if passant_tile else None
    if (
        passed_pawn is not None
        and piece.is_enemy_of(passed_pawn)
        and passed_pawn.type == PieceType.PAWN
        and passed_pawn.has_double_moved
        and not passed_pawn.reversed_movement
    ):
        return CaptureResult(True, [passed_pawn])
    return _no_capture()


def reversed_pawn_move(piece: Piece, target: Tile, board: Board) -> bool:
    """
    Topsy Turvy pawn: moves diagonally forward onto an empty tile.
    From its home row it can go two tiles diagonally, if the tile in between is empty.
    """
    if target.is_occupied:
        return False
    assert piece.tile is not None
    dx, dy = _delta(piece, target)

    if abs(dx) == 1 and dy == piece.direction:
        return True

    if is_on_home_row(piece) and abs(dx) == 2 and dy == 2 * piece.direction:
        passed_tile = board.tile_at(piece.tile.x + dx // 2, piece.tile.y + piece.direction)
        return passed_tile is not None and not passed_tile.is_occupied
    return False


def reversed_pawn_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    """Topsy Turvy pawn: takes the enemy standing straight in front of it"""
    dx, dy = _delta(piece, target)
    if dx == 0 and dy == piece.direction:
        return _capture_occupant(piece, target)
    return _no_capture()


# --- SLIDING PIECES ---
def _line_move(piece: Piece, target: Tile, board: Board, aligned: Callable[[int, int], bool]) -> bool:
    if target.is_occupied:
        return False
    assert piece.tile is not None
    dx, dy = _delta(piece, target)
    return aligned(dx, dy) and board.is_path_clear(piece.tile, target)


def _line_capture(
    piece: Piece, target: Tile, board: Board, aligned: Callable[[int, int], bool]
) -> CaptureResult:
    if not piece.is_enemy_of(target.piece):
        return _no_capture()
    assert piece.tile is not None
    dx, dy = _delta(piece, target)
    if aligned(dx, dy) and board.is_path_clear(piece.tile, target):
        return _capture_occupant(piece, target)
    return _no_capture()


def _straight_or_diagonal(dx: int, dy: int) -> bool:
    return _is_straight(dx, dy) or _is_diagonal(dx, dy)


def rook_move(piece: Piece, target: Tile, board: Board) -> bool:
    """Rooks move either horizontally or vertically"""
    return _line_move(piece, target, board, _is_straight)


def rook_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    return _line_capture(piece, target, board, _is_straight)


def bishop_move(piece: Piece, target: Tile, board: Board) -> bool:
    """Bishops move diagonally: |dx| = |dy|"""
    return _line_move(piece, target, board, _is_diagonal)


def bishop_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    return _line_capture(piece, target, board, _is_diagonal)


def queen_move(piece: Piece, target: Tile, board: Board) -> bool:
    """The Queen combines the rook moves and the bishop moves"""
    return _line_move(piece, target, board, _straight_or_diagonal)


def queen_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    return _line_capture(piece, target, board, _straight_or_diagonal)


# --- STEPPING PIECES ---
def _step_move(piece: Piece, target: Tile, geometry: Callable[[int, int], bool]) -> bool:
    if target.is_occupied:
        return False
    return geometry(*_delta(piece, target))


def _step_capture(piece: Piece, target: Tile, geometry: Callable[[int, int], bool]) -> CaptureResult:
    if not geometry(*_delta(piece, target)):
        return _no_capture()
    return _capture_occupant(piece, target)


def knight_move(piece: Piece, target: Tile, board: Board) -> bool:
    """Knights jump such that (|dx|, |dy|) is (2, 1) or (1, 2). Pieces in between do not matter."""
    return _step_move(piece, target, _is_knight_jump)


def knight_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    return _step_capture(piece, target, _is_knight_jump)


def king_move(piece: Piece, target: Tile, board: Board) -> bool:
    """The king moves a single tile in any direction"""
    return _step_move(piece, target, _is_king_step)


def king_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    return _step_capture(piece, target, _is_king_step)


def ogre_move(piece: Piece, target: Tile, board: Board) -> bool:
    """The ogre leaps exactly two tiles along a row or a column"""
    return _step_move(piece, target, _is_ogre_leap)


def ogre_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    """Not a jump capture: the enemy has to stand on the destination"""
    return _step_capture(piece, target, _is_ogre_leap)


# --- JUMPER ---
def jumper_move(piece: Piece, target: Tile, board: Board) -> bool:
    """Jumpers move like draughts men: one tile diagonally forward"""
    if target.is_occupied:
        return False
    dx, dy = _delta(piece, target)
    return abs(dx) == 1 and dy == piece.direction


def jumper_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    """
    Jumpers capture by jumping two tiles diagonally (in any diagonal direction) over an enemy.

    NOTE: the destination must be empty. The captured piece is the one on the tile jumped over.
    """
    if target.is_occupied:
        return _no_capture()
    assert piece.tile is not None
    dx, dy = _delta(piece, target)
    if abs(dx) != 2 or abs(dy) != 2:
        return _no_capture()

    jumped_tile = board.tile_at(piece.tile.x + dx // 2, piece.tile.y + dy // 2)
    if jumped_tile is None or not piece.is_enemy_of(jumped_tile.piece):
        return _no_capture()
    assert jumped_tile.piece is not None
    return CaptureResult(True, [jumped_tile.piece])


# -- STRATEGY PATTERN: RULE TABLE ---
IsValidMoveFn = Callable[[Piece, Tile, Board], bool]
IsValidCaptureFn = Callable[[Piece, Tile, Board], CaptureResult]


@dataclass(frozen=True)
class PieceRules:
    is_valid_move: IsValidMoveFn
    is_valid_capture: IsValidCaptureFn


RULES: dict[PieceType, PieceRules] = {
    PieceType.PAWN: PieceRules(pawn_move, pawn_capture),
    PieceType.ROOK: PieceRules(rook_move, rook_capture),
    PieceType.KNIGHT: PieceRules(knight_move, knight_capture),
    PieceType.BISHOP: PieceRules(bishop_move, bishop_capture),
    PieceType.QUEEN: PieceRules(queen_move, queen_capture),
    PieceType.KING: PieceRules(king_move, king_capture),
    PieceType.JUMPER: PieceRules(jumper_move, jumper_capture),
    PieceType.OGRE: PieceRules(ogre_move, ogre_capture),
}

REVERSED_PAWN_RULES = PieceRules(reversed_pawn_move, reversed_pawn_capture)


def rules_for(piece: Piece) -> PieceRules:
    if piece.type == PieceType.PAWN and piece.reversed_movement:
        return REVERSED_PAWN_RULES
    return RULES[piece.type]


def is_valid_move(piece: Piece, target: Tile, board: Board) -> bool:
    if piece.tile is None or target is piece.tile:
        return False
    return rules_for(piece).is_valid_move(piece, target, board)


def is_valid_capture(piece: Piece, target: Tile, board: Board) -> CaptureResult:
    if piece.tile is None or target is piece.tile:
        return _no_capture()
    return rules_for(piece).is_valid_capture(piece, target, board)


@dataclass
class MoveResolution:
    """Everything the Match needs to know to carry out a legal move"""

    piece: Piece
    target: Tile
    captured_pieces: list[Piece]

    @property
    def is_capture(self) -> bool:
        return bool(self.captured_pieces)

    @property
    def is_double_step(self) -> bool:
        """Only a standard pawn's straight two-step makes it an en passant target"""
        assert self.piece.tile is not None
        return (
            self.piece.type == PieceType.PAWN
            and not self.piece.reversed_movement
            and abs(self.target.y - self.piece.tile.y) == 2
        )


def resolve_move(piece: Piece, target: Tile, board: Board) -> MoveResolution:
    """Check capture legality first, then plain move legality. Neither? Then the move is illegal."""
    capture = is_valid_capture(piece, target, board)
    if capture.is_valid:
        return MoveResolution(piece, target, capture.captured_pieces)

    if is_valid_move(piece, target, board):
        return MoveResolution(piece, target, [])

    raise IllegalMoveError(
        f"{piece.color} {piece.type} cannot move to ({target.x},{target.y})"
    )


def legal_targets(piece: Piece, board: Board) -> list[int]:
    """Tile ids the piece can move to or capture on. Used to highlight tiles for the player."""
    return [
        tile.id
        for tile in board.tiles
        if is_valid_capture(piece, tile, board).is_valid or is_valid_move(piece, tile, board)
    ]
