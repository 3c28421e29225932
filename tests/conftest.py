"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

from typing import Generator

import pytest

from src.game.board import Board
from src.game.match import Match
from src.game.pieces import Piece
from src.store.memory_repository import InMemoryRoomRepository

# Only the two kings: moves can be played without ending the game
KINGS_ONLY = "4k3/8/8/8/8/8/8/4K3"

# High enough to never draw a card within a test
NO_CARDS = 1000


def piece_on(board: Board, x: int, y: int) -> Piece:
    """Fetch the piece on a tile, failing the test if there is none"""
    piece = board.piece_at(x, y)
    assert piece is not None, f"expected a piece on ({x},{y})"
    return piece


@pytest.fixture
def standard_board() -> Board:
    return Board.standard()


@pytest.fixture
def kings_only_board() -> Board:
    return Board.from_layout(KINGS_ONLY)


@pytest.fixture
def standard_match() -> Match:
    """Standard layout, deterministic deck, no card draws"""
    return Match.new_match(seed=0, card_draw_interval=NO_CARDS)


@pytest.fixture
def room_repository() -> Generator[InMemoryRoomRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = InMemoryRoomRepository()
    try:
        yield repo
    finally:
        repo.rooms.clear()
