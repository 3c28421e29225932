"""
The Match is the entrypoint into the domain layer for the service layer.
It holds the single authoritative copy of a game, and is responsible for orchestrating all the rules required to
play a turn: whose turn it is, which card is active, applying validated moves and cards, and detecting the end of the game.

Every action is validated completely before anything is mutated. A rejected action raises a GameError
and leaves the Match exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Optional, Self

from src.core.config import CARD_DRAW_INTERVAL, RANDOM_SEED
from src.core.exceptions import (
    GameOverError,
    IllegalCardError,
    IllegalMoveError,
    InvalidActionError,
    NotYourTurnError,
    WrongPhaseError,
)
from src.core.models import ChangeModel, StateModel
from src.core.shared_types import Color, Phase
from src.game.actions import (
    Action,
    CardAction,
    ConcedeAction,
    DeclineAction,
    MoveAction,
    ResyncAction,
)
from src.game.board import Board
from src.game.cards import CardType, dry_run, execute_card
from src.game.changes import Change, ChangeReason, addition, removal, removals_first
from src.game.deck import CardDeck
from src.game.rules import resolve_move
from src.game.tile import Tile

logger = logging.getLogger(__name__)


def _new_draw_counters() -> dict[Color, int]:
    return {color: 0 for color in Color}


@dataclass
class Match:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    deck: CardDeck = field(default_factory=CardDeck)
    rng: Random = field(default_factory=Random)
    turn_number: int = 0
    current_player: Color = Color.WHITE
    phase: Phase = Phase.NORMAL
    active_card: Optional[CardType] = None
    card_owner: Optional[Color] = None
    winner: Optional[Color] = None
    draw_counters: dict[Color, int] = field(default_factory=_new_draw_counters)
    card_draw_interval: int = CARD_DRAW_INTERVAL

    @classmethod
    def new_match(
        cls,
        layout: Optional[str] = None,
        seed: Optional[int] = RANDOM_SEED,
        card_draw_interval: int = CARD_DRAW_INTERVAL,
    ) -> Self:
        """Start from the standard layout unless another one is given"""
        board = Board.from_layout(layout) if layout else Board.standard()
        return cls(board=board, rng=Random(seed), card_draw_interval=card_draw_interval)

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def submit(self, color: Color, action: Action) -> StateModel:
        """
        Attempt an action on behalf of the player with the `color` pieces
        -----

        1. Resync and concede do not depend on whose turn it is
        2. make sure the game is still going and it is your turn
        3. validate + apply the move / card / decline (raises before mutating anything if invalid)
        4. advance the turn: flip the player, check for game over, maybe draw a card
        """
        match action:
            case ResyncAction():
                return self.full_state()
            case ConcedeAction():
                return self._concede(color)

        self._assert_in_progress()
        self._assert_your_turn(color)

        match action:
            case MoveAction():
                changes = self._play_move(action)
            case CardAction():
                changes = self._play_card(color, action)
            case DeclineAction():
                changes = self._decline_card()
            case _:
                raise InvalidActionError(f"Unsupported action: {action!r}")

        self._advance_turn()
        return self.to_state(removals_first(changes))

    def full_state(self) -> StateModel:
        """Everything a client needs to rebuild the board from scratch: one add-change per occupied tile"""
        changes = [
            addition(tile, tile.piece, ChangeReason.TURN_START)
            for tile in self.board.occupied_tiles()
            if tile.piece is not None
        ]
        return self.to_state(changes)

    def to_state(self, changes: list[Change]) -> StateModel:
        return StateModel(
            changes=[
                ChangeModel(c.tile_id, int(c.action_type), int(c.reason), c.parameter)
                for c in changes
            ],
            turn_number=self.turn_number,
            current_player=str(self.current_player),
            card_phase=str(self.phase),
            active_card_type=int(self.active_card) if self.active_card else None,
            card_owner=str(self.card_owner) if self.card_owner else None,
            topsy_turvy_pawns=self.board.reversed_pawn_tiles(),
            game_over=self.is_over,
            winner=str(self.winner) if self.winner else None,
            graveyard={
                str(color): {str(t): n for t, n in self.board.graveyard(color).items()}
                for color in Color
            },
        )

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_over:
            raise GameOverError(f"The game is over. Winner: {self.winner}")

    def _assert_your_turn(self, color: Color) -> None:
        if color != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player} to act first."
            )

    def _tile(self, tile_id: int) -> Tile:
        tile = self.board.tile_by_id(tile_id)
        if tile is None:
            raise InvalidActionError(f"Tile id {tile_id} is not on the board")
        return tile

    def _play_move(self, action: MoveAction) -> list[Change]:
        """
        Move a piece
        -----

        Captured pieces are removed first (a jumper or an en passant capture takes a piece that is not on the target tile),
        then the moving piece leaves its tile, and finally it is added on the target tile.
        """
        if self.phase != Phase.NORMAL:
            raise WrongPhaseError(f"Cannot move a piece during phase {self.phase}")

        source = self._tile(action.source)
        target = self._tile(action.target)
        piece = source.piece
        if piece is None:
            raise IllegalMoveError(f"No piece on tile {action.source}")
        if piece.color != self.current_player:
            raise IllegalMoveError(f"The piece on tile {action.source} is not yours")

        resolution = resolve_move(piece, target, self.board)
        # ask before the piece moves: it depends on where the piece started
        is_double_step = resolution.is_double_step

        changes: list[Change] = []
        for captured in resolution.captured_pieces:
            assert captured.tile is not None
            changes.append(removal(captured.tile, ChangeReason.CAPTURE))
            self.board.kill(captured)

        changes.append(removal(source, ChangeReason.NORMAL_MOVEMENT))
        self.board.move(piece, target)
        reason = ChangeReason.CAPTURE if resolution.is_capture else ChangeReason.NORMAL_MOVEMENT
        changes.append(addition(target, piece, reason))

        piece.has_moved = True
        piece.has_double_moved = is_double_step
        logger.debug(
            "%s %s %d -> %d (captured %d)",
            piece.color,
            piece.type,
            action.source,
            action.target,
            len(resolution.captured_pieces),
        )
        return changes

    def _play_card(self, color: Color, action: CardAction) -> list[Change]:
        """Only the owner of the active card can play it. The effect is tried on a copy of the board first."""
        if self.phase != Phase.CARD_SELECTION:
            raise WrongPhaseError("There is no active card to play")
        if color != self.card_owner:
            raise NotYourTurnError(f"The active card belongs to {self.card_owner}")
        if action.card_type != self.active_card:
            raise IllegalCardError(
                f"Active card is {self.active_card!r}, not {action.card_type!r}"
            )

        selections = list(action.selections)
        success, _ = dry_run(action.card_type, selections, self.board, color)
        if not success:
            raise IllegalCardError(
                f"Invalid selection {selections} for card {action.card_type.name}"
            )

        changes: list[Change] = []
        # cannot fail after a successful dry run, and effects do not mutate when they fail
        if not execute_card(action.card_type, selections, self.board, color, changes):
            raise IllegalCardError(f"Card {action.card_type.name} could not be applied")

        self._clear_card_phase()
        return changes

    def _decline_card(self) -> list[Change]:
        if self.phase != Phase.CARD_SELECTION:
            raise WrongPhaseError("There is no active card to decline")
        self._clear_card_phase()
        return []

    def _concede(self, color: Color) -> StateModel:
        self._assert_in_progress()
        self._end_game(winner=color.opponent)
        return self.to_state([])

    def _clear_card_phase(self) -> None:
        self.phase = Phase.NORMAL
        self.active_card = None
        self.card_owner = None

    def _end_game(self, winner: Color) -> None:
        self._clear_card_phase()
        self.phase = Phase.GAME_OVER
        self.winner = winner
        logger.info("game over after turn %d, %s wins", self.turn_number, winner)

    def _advance_turn(self) -> None:
        """
        Hand the turn to the opponent
        ---

        1. increment the turn counter and flip the player
        2. the new player's pawns are no longer en passant targets (their two-step was a full turn ago)
        3. a player without a king has lost
        4. every `card_draw_interval` turns of a player, that player draws a card
        """
        self.turn_number += 1
        self.current_player = self.current_player.opponent

        for piece in self.board.live_pieces(self.current_player):
            piece.has_double_moved = False

        for color in Color:
            if not self.board.has_king(color):
                self._end_game(winner=color.opponent)
                return

        self.draw_counters[self.current_player] += 1
        if self.draw_counters[self.current_player] >= self.card_draw_interval:
            self.draw_counters[self.current_player] = 0
            self._draw_card()

    def _draw_card(self) -> None:
        card = self.deck.draw(self.board, self.current_player, self.rng)
        if card is None:
            return
        self.phase = Phase.CARD_SELECTION
        self.active_card = card
        self.card_owner = self.current_player
        logger.info("turn %d: %s draws %s", self.turn_number, self.current_player, card.name)
