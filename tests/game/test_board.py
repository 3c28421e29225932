"""Unit tests for src/game/board.py"""

import pytest

from src.core.exceptions import OccupiedTileError
from src.core.shared_types import Color, PieceType
from src.game.board import Board
from src.game.layout import STANDARD_LAYOUT
from src.game.pieces import Piece, PieceState
from tests.conftest import KINGS_ONLY, piece_on


def test_tiles_are_indexed_by_id() -> None:
    board = Board()
    assert len(board.tiles) == 64
    assert all(tile.id == index for index, tile in enumerate(board.tiles))


def test_layout_round_trip(standard_board: Board) -> None:
    assert standard_board.to_layout() == STANDARD_LAYOUT
    assert Board.from_layout(KINGS_ONLY).to_layout() == KINGS_ONLY


def test_pieces_and_tiles_point_at_each_other(standard_board: Board) -> None:
    for tile in standard_board.occupied_tiles():
        assert tile.piece is not None
        assert tile.piece.tile is tile
    assert len(standard_board.pieces) == 34


def test_tile_lookup_outside_the_board(standard_board: Board) -> None:
    assert standard_board.tile_at(8, 0) is None
    assert standard_board.tile_at(-1, 3) is None
    assert standard_board.tile_by_id(64) is None
    assert standard_board.piece_at(3, 3) is None


def test_occupy_a_taken_tile(kings_only_board: Board) -> None:
    tile = kings_only_board.tile_at(4, 7)
    assert tile is not None
    with pytest.raises(OccupiedTileError):
        kings_only_board.occupy(tile, Piece(PieceType.PAWN, Color.WHITE))


def test_move_clears_the_old_tile(kings_only_board: Board) -> None:
    king = piece_on(kings_only_board, 4, 7)
    target = kings_only_board.tile_at(4, 6)
    assert target is not None
    kings_only_board.move(king, target)

    assert kings_only_board.piece_at(4, 7) is None
    assert target.piece is king
    assert king.tile is target


def test_killed_piece_goes_to_the_graveyard(standard_board: Board) -> None:
    pawn = piece_on(standard_board, 0, 1)
    standard_board.kill(pawn)

    assert pawn.state == PieceState.DEAD
    assert pawn.tile is None
    assert standard_board.piece_at(0, 1) is None
    assert pawn in standard_board.pieces
    assert standard_board.graveyard(Color.BLACK)[PieceType.PAWN] == 1
    assert standard_board.graveyard(Color.WHITE)[PieceType.PAWN] == 0


def test_transformed_piece_is_not_in_the_graveyard(standard_board: Board) -> None:
    bishop = piece_on(standard_board, 2, 7)
    knight = standard_board.transform(bishop, PieceType.KNIGHT)

    assert knight.color == Color.WHITE
    assert piece_on(standard_board, 2, 7) is knight
    assert bishop not in standard_board.pieces
    assert sum(standard_board.graveyard(Color.WHITE).values()) == 0


def test_discard(standard_board: Board) -> None:
    rook = piece_on(standard_board, 0, 0)
    standard_board.discard(rook)
    assert standard_board.piece_at(0, 0) is None
    assert rook not in standard_board.pieces
    assert sum(standard_board.graveyard(Color.BLACK).values()) == 0


@pytest.mark.parametrize(
    "start, end, expected",
    [
        ((0, 7), (0, 2), True),  # column, nothing in between
        ((0, 7), (7, 7), False),  # row, blocked by the knight on (1,7)
        ((2, 7), (5, 4), True),  # diagonal, nothing in between
        ((0, 0), (0, 7), False),  # column, blocked by the pawn
    ],
)
def test_is_path_clear(start: tuple[int, int], end: tuple[int, int], expected: bool) -> None:
    board = Board.from_layout("r3k3/p7/8/8/8/8/8/RN2K3")
    from_tile = board.tile_at(*start)
    to_tile = board.tile_at(*end)
    assert from_tile is not None and to_tile is not None
    assert board.is_path_clear(from_tile, to_tile) is expected


def test_snapshot_is_independent(standard_board: Board) -> None:
    snapshot = standard_board.snapshot()
    pawn = piece_on(snapshot, 4, 6)
    target = snapshot.tile_at(4, 4)
    assert target is not None
    snapshot.move(pawn, target)

    assert standard_board.to_layout() == STANDARD_LAYOUT
    assert piece_on(standard_board, 4, 6) is not pawn


def test_restore(standard_board: Board) -> None:
    snapshot = standard_board.snapshot()
    standard_board.kill(piece_on(standard_board, 3, 0))
    standard_board.restore(snapshot)

    assert standard_board.to_layout() == STANDARD_LAYOUT
    assert standard_board.live_pieces() == standard_board.pieces
    # the snapshot can be restored again
    standard_board.restore(snapshot)
    assert standard_board.to_layout() == STANDARD_LAYOUT


def test_queries(standard_board: Board) -> None:
    assert len(standard_board.live_pieces(Color.WHITE)) == 17
    assert len(standard_board.locate(PieceType.PAWN, Color.BLACK)) == 8
    assert len(standard_board.locate(PieceType.JUMPER)) == 1
    assert standard_board.has_king(Color.WHITE)

    standard_board.kill(piece_on(standard_board, 4, 0))
    assert not standard_board.has_king(Color.BLACK)


def test_reversed_pawn_tiles(standard_board: Board) -> None:
    piece_on(standard_board, 1, 6).reversed_movement = True
    piece_on(standard_board, 0, 6).reversed_movement = True
    assert standard_board.reversed_pawn_tiles() == [48, 49]
