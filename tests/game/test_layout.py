"""Unit tests for src/game/layout.py"""

import pytest

from src.core.exceptions import InvalidLayoutError
from src.core.shared_types import Color, PieceType
from src.game.layout import EMPTY_LAYOUT, STANDARD_LAYOUT, is_valid_layout, parse_layout, row_to_layout
from src.game.pieces import Piece


def test_standard_layout_is_valid() -> None:
    assert is_valid_layout(STANDARD_LAYOUT)
    assert is_valid_layout(EMPTY_LAYOUT)


def test_standard_layout_has_the_extra_pieces() -> None:
    """32 chess pieces, plus a black jumper on (2,2) and a white ogre on (5,5)"""
    placements = parse_layout(STANDARD_LAYOUT)
    assert len(placements) == 34

    by_position = {(x, y): piece for x, y, piece in placements}
    assert by_position[(2, 2)].type == PieceType.JUMPER
    assert by_position[(2, 2)].color == Color.BLACK
    assert by_position[(5, 5)].type == PieceType.OGRE
    assert by_position[(5, 5)].color == Color.WHITE
    assert by_position[(4, 7)].type == PieceType.KING
    assert by_position[(4, 7)].color == Color.WHITE
    assert by_position[(3, 0)].type == PieceType.QUEEN
    assert by_position[(3, 0)].color == Color.BLACK


@pytest.mark.parametrize(
    "layout",
    [
        "8/8/8/8/8/8/8",  # only 7 rows
        "8/8/8/8/8/8/8/8/8",  # 9 rows
        "9/8/8/8/8/8/8/8",  # row too long
        "7/8/8/8/8/8/8/8",  # row too short
        "x7/8/8/8/8/8/8/8",  # unknown piece
    ],
)
def test_invalid_layout(layout: str) -> None:
    assert not is_valid_layout(layout)
    with pytest.raises(InvalidLayoutError):
        parse_layout(layout)


def test_row_to_layout() -> None:
    row: list[Piece | None] = [None, None, Piece.from_layout("j"), None, None, None, None, Piece.from_layout("O")]
    assert row_to_layout(row) == "2j4O"
    assert row_to_layout([None] * 8) == "8"
