"""Unit tests for src/game/deck.py"""

from random import Random

from src.core.shared_types import Color
from src.game.board import Board
from src.game.cards import CardType
from src.game.deck import CardDeck


def test_every_card_once_per_cycle(standard_board: Board) -> None:
    deck = CardDeck()
    rng = Random(7)
    drawn = [deck.draw(standard_board, Color.WHITE, rng) for _ in range(len(CardType))]
    assert sorted(card for card in drawn if card is not None) == sorted(CardType)
    # the cycle started over
    assert deck.drawn == set()
    assert deck.draw(standard_board, Color.WHITE, rng) in set(CardType)


def test_same_seed_same_cards(standard_board: Board) -> None:
    first = [CardDeck().draw(standard_board, Color.BLACK, Random(3)) for _ in range(3)]
    second = [CardDeck().draw(standard_board, Color.BLACK, Random(3)) for _ in range(3)]
    assert first == second


def test_disabled_card_is_never_drawn(standard_board: Board) -> None:
    deck = CardDeck()
    deck.disable(CardType.TOPSY_TURVY)
    rng = Random(0)
    drawn = {deck.draw(standard_board, Color.WHITE, rng) for _ in range(20)}
    assert CardType.TOPSY_TURVY not in drawn

    deck.enable(CardType.TOPSY_TURVY)
    assert CardType.TOPSY_TURVY in deck.undrawn()


def test_unplayable_cards_are_skipped() -> None:
    """Only pawns on the board: Polymorph and Draught have nothing to select"""
    board = Board.from_layout("4k3/pppppppp/8/8/8/8/PPPPPPPP/4K3")
    deck = CardDeck()
    rng = Random(1)
    drawn = [deck.draw(board, Color.WHITE, rng) for _ in range(4)]
    assert sorted(card for card in drawn if card is not None) == [
        CardType.ONSLAUGHT,
        CardType.BIZARRE_MUTATION,
        CardType.TELEKINESIS,
        CardType.TOPSY_TURVY,
    ]
    # the unplayable ones are still undrawn
    assert deck.undrawn() == [CardType.POLYMORPH, CardType.DRAUGHT]
    assert deck.draw(board, Color.WHITE, rng) is None


def test_nothing_to_draw(kings_only_board: Board) -> None:
    deck = CardDeck()
    assert deck.draw(kings_only_board, Color.WHITE, Random(0)) is None
    assert deck.drawn == set()
