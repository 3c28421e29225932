"""
Which card gets drawn.

Every enabled card is drawn once per cycle. When all of them have been drawn, the cycle starts over.
Cards without anything to select on the current board are skipped for this draw.
"""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Optional

from src.core.shared_types import Color
from src.game.board import Board
from src.game.cards import CardType, card_requirements

logger = logging.getLogger(__name__)


@dataclass
class CardDeck:
    enabled: set[CardType] = field(default_factory=lambda: set(CardType))
    drawn: set[CardType] = field(default_factory=set)

    def disable(self, card_type: CardType) -> None:
        self.enabled.discard(card_type)

    def enable(self, card_type: CardType) -> None:
        self.enabled.add(card_type)

    def undrawn(self) -> list[CardType]:
        return sorted(self.enabled - self.drawn)

    def draw(self, board: Board, color: Color, rng: Random) -> Optional[CardType]:
        """Pick one of the undrawn cards that can be played by `color` right now, or None if there is none."""
        if not self.undrawn():
            self._start_new_cycle()

        playable = [card for card in self.undrawn() if card_requirements(card, board, color)]
        if not playable:
            logger.debug("no playable card for %s (undrawn: %s)", color, self.undrawn())
            return None

        card = rng.choice(playable)
        self.drawn.add(card)
        if not self.undrawn():
            self._start_new_cycle()
        return card

    def _start_new_cycle(self) -> None:
        logger.debug("all cards drawn this cycle, resetting")
        self.drawn.clear()
