"""Unit tests for src/game/pieces.py"""

import pytest

from src.core.exceptions import InvalidActionError
from src.core.shared_types import Color, PieceType
from src.game.pieces import Piece, PieceState, parse_piece_parameter, piece_parameter


@pytest.mark.parametrize(
    "piece_type, color, parameter",
    [
        (PieceType.PAWN, Color.WHITE, 0x01),
        (PieceType.KNIGHT, Color.WHITE, 0x03),
        (PieceType.OGRE, Color.WHITE, 0x08),
        (PieceType.PAWN, Color.BLACK, 0x11),
        (PieceType.KING, Color.BLACK, 0x16),
        (PieceType.JUMPER, Color.BLACK, 0x17),
    ],
)
def test_piece_parameter(piece_type: PieceType, color: Color, parameter: int) -> None:
    assert piece_parameter(piece_type, color) == parameter
    assert parse_piece_parameter(parameter) == (piece_type, color)


@pytest.mark.parametrize("parameter", [0x00, 0x09, 0x10, 0x19, 0x21, 0xFF])
def test_unknown_piece_parameter(parameter: int) -> None:
    with pytest.raises(InvalidActionError):
        parse_piece_parameter(parameter)


@pytest.mark.parametrize(
    "character, piece_type, color",
    [
        ("P", PieceType.PAWN, Color.WHITE),
        ("j", PieceType.JUMPER, Color.BLACK),
        ("O", PieceType.OGRE, Color.WHITE),
        ("k", PieceType.KING, Color.BLACK),
    ],
)
def test_piece_from_layout(character: str, piece_type: PieceType, color: Color) -> None:
    piece = Piece.from_layout(character)
    assert piece.type == piece_type
    assert piece.color == color
    assert piece.to_layout() == character


def test_new_piece_defaults() -> None:
    piece = Piece.from_parameter(0x11)
    assert piece.is_alive
    assert piece.state == PieceState.ALIVE
    assert not piece.has_moved
    assert not piece.has_double_moved
    assert not piece.reversed_movement
    assert piece.tile is None


def test_direction_follows_color() -> None:
    assert Piece(PieceType.PAWN, Color.WHITE).direction == -1
    assert Piece(PieceType.PAWN, Color.BLACK).direction == 1


def test_is_enemy_of() -> None:
    white = Piece(PieceType.ROOK, Color.WHITE)
    assert white.is_enemy_of(Piece(PieceType.PAWN, Color.BLACK))
    assert not white.is_enemy_of(Piece(PieceType.PAWN, Color.WHITE))
    assert not white.is_enemy_of(None)
