"""
Client side replica of a match.

The server is the only authority. The client keeps a copy of the board to draw it and to help the player,
applies the changes the server sends, and may show a move before the server answered (speculative apply).
When the answer comes back the speculative move is always rolled back first; the server's changes are then
applied on top of the confirmed board if the action was accepted.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import (
    IllegalMoveError,
    NotYourTurnError,
    PendingActionError,
    WrongPhaseError,
)
from src.core.models import STATUS_ACCEPTED, ChangeModel, RejectedModel, StateModel
from src.core.shared_types import Color, Phase, PieceType
from src.game.actions import DeclineAction, MoveAction, ResyncAction
from src.game.board import Board
from src.game.cards import CardType
from src.game.changes import ActionType, ChangeReason
from src.game.pieces import Piece
from src.game.rules import PAWN_HOME_ROWS, legal_targets, resolve_move
from src.game.selection import CardSelection
from src.game.tile import Tile

logger = logging.getLogger(__name__)

# a straight two-step changes the tile id by two rows
DOUBLE_STEP = 16


@dataclass
class ClientGame:
    color: Optional[Color] = None
    room_id: Optional[str] = None
    board: Board = field(default_factory=Board)
    turn_number: int = 0
    current_player: Color = Color.WHITE
    phase: Phase = Phase.NORMAL
    active_card: Optional[CardType] = None
    card_owner: Optional[Color] = None
    game_over: bool = False
    winner: Optional[Color] = None
    graveyard: dict[str, dict[str, int]] = field(default_factory=dict)
    selection: Optional[CardSelection] = None
    # bytes of the action waiting for the server's answer
    pending: Optional[bytes] = None
    # board and selection as last confirmed by the server, restored when a pending action is answered
    confirmed_board: Optional[Board] = None
    confirmed_selection: Optional[CardSelection] = None

    def connect(self, color: Color, room_id: str) -> None:
        self.color = color
        self.room_id = room_id

    @property
    def is_my_turn(self) -> bool:
        return not self.game_over and self.color == self.current_player

    @property
    def has_pending_action(self) -> bool:
        return self.pending is not None

    # --- APPLYING SERVER STATE ---
    def apply_full_state(self, state: StateModel) -> None:
        """Rebuild the board from scratch (game start, resync)"""
        self.board = Board()
        self.apply_state(state)

    def apply_state(self, state: StateModel) -> None:
        """
        Apply an accepted state from the server
        ---

        1. removals, then additions (the server already orders them that way, the client does not rely on it)
        2. reversed movement flags, from the list of Topsy Turvy pawns
        3. turn and card fields
        """
        if state.status != STATUS_ACCEPTED:
            logger.debug("ignoring rejected state")
            return

        removals = [c for c in state.changes if c.action_type == ActionType.REMOVE_PIECE]
        additions = [c for c in state.changes if c.action_type == ActionType.ADD_PIECE]
        for change in removals:
            self._apply_removal(change)
        for change in additions:
            self._apply_addition(change, removals)

        for tile_id in state.topsy_turvy_pawns:
            tile = self.board.tile_by_id(tile_id)
            if tile is not None and tile.piece is not None and tile.piece.type == PieceType.PAWN:
                tile.piece.reversed_movement = True

        self._apply_turn_fields(state)

    def handle_response(self, state: StateModel | RejectedModel) -> None:
        """
        Answer of the server to an action (or a broadcast of the opponent's action)

        A pending speculative move is always rolled back first. A rejected action stops there.
        """
        if self.pending is not None:
            self._rollback()

        if isinstance(state, StateModel) and state.status == STATUS_ACCEPTED:
            self.apply_state(state)
        else:
            logger.info("action rejected by the server at turn %d", self.turn_number)

    def needs_resync(self, turn_number: int) -> bool:
        """The server is at another turn than the replica: a message got lost somewhere"""
        return turn_number != self.turn_number

    # --- PROPOSING ACTIONS ---
    def propose_move(self, source_id: int, target_id: int) -> bytes:
        """
        Check the move against the local replica, show it right away, and return the bytes to send.

        The server decides in the end: a move that passes here can still be rejected.
        """
        self._assert_can_act()
        if self.phase != Phase.NORMAL:
            raise WrongPhaseError("Play or decline the active card first")

        source = self._tile(source_id)
        target = self._tile(target_id)
        piece = source.piece
        if piece is None or piece.color != self.color:
            raise IllegalMoveError(f"No piece of yours on tile {source_id}")

        resolution = resolve_move(piece, target, self.board)

        self._remember_confirmed()
        for captured in resolution.captured_pieces:
            self.board.kill(captured)
        self.board.move(piece, target)

        self.pending = MoveAction(source_id, target_id).to_bytes()
        return self.pending

    def select_card_tile(self, tile_id: int) -> bool:
        if self.selection is None:
            raise WrongPhaseError("There is no card to select tiles for")
        return self.selection.toggle(tile_id)

    def propose_card(self) -> bytes:
        """The board is only changed once the server confirms the card"""
        if self.selection is None:
            raise WrongPhaseError("There is no card to play")
        self._assert_can_act()
        action = self.selection.to_action()

        self._remember_confirmed()
        self.pending = action.to_bytes()
        return self.pending

    def decline_card(self) -> bytes:
        if self.selection is None:
            raise WrongPhaseError("There is no card to decline")
        self._assert_can_act()

        self._remember_confirmed()
        self.selection = None
        self.pending = DeclineAction().to_bytes()
        return self.pending

    def request_resync(self) -> bytes:
        """Not an action on the game: it is never pending"""
        return ResyncAction().to_bytes()

    def legal_targets(self, tile_id: int) -> list[int]:
        """Tiles to highlight once the player picked one of their pieces"""
        tile = self.board.tile_by_id(tile_id)
        if tile is None or tile.piece is None or tile.piece.color != self.color:
            return []
        return legal_targets(tile.piece, self.board)

    # -- PRIVATE HELPERS ---
    def _assert_can_act(self) -> None:
        if self.pending is not None:
            raise PendingActionError("Wait for the server to answer the previous action")
        if self.game_over:
            raise WrongPhaseError("The game is over")
        if self.phase == Phase.CARD_SELECTION:
            if self.card_owner != self.color:
                raise NotYourTurnError("The active card belongs to the opponent")
            return
        if not self.is_my_turn:
            raise NotYourTurnError("It is not your turn")

    def _tile(self, tile_id: int) -> Tile:
        tile = self.board.tile_by_id(tile_id)
        if tile is None:
            raise IllegalMoveError(f"Tile id {tile_id} is not on the board")
        return tile

    def _remember_confirmed(self) -> None:
        self.confirmed_board = self.board.snapshot()
        self.confirmed_selection = self.selection

    def _rollback(self) -> None:
        if self.confirmed_board is not None:
            self.board.restore(self.confirmed_board)
        self.selection = self.confirmed_selection
        if self.selection is not None:
            # the selection must keep pointing at the live board
            self.selection.board = self.board
        self.pending = None
        self.confirmed_board = None
        self.confirmed_selection = None

    def _apply_removal(self, change: ChangeModel) -> None:
        tile = self.board.tile_by_id(change.tile_id)
        if tile is None or tile.piece is None:
            logger.warning("removal of an empty tile %d, replica out of sync", change.tile_id)
            return
        if change.reason == ChangeReason.CAPTURE:
            self.board.kill(tile.piece)
        else:
            # moved or transformed: the piece comes back as a new addition
            self.board.discard(tile.piece)

    def _apply_addition(self, change: ChangeModel, removals: list[ChangeModel]) -> None:
        tile = self.board.tile_by_id(change.tile_id)
        if tile is None or change.parameter is None:
            logger.warning("invalid addition on tile %d", change.tile_id)
            return
        if tile.piece is not None:
            logger.warning("addition on occupied tile %d, replacing the piece", change.tile_id)
            self.board.discard(tile.piece)

        piece = Piece.from_parameter(change.parameter)
        self.board.place(piece, tile)
        piece.has_moved = self._has_moved(piece, tile, change)
        piece.has_double_moved = self._is_double_step(piece, change, removals)

    @staticmethod
    def _has_moved(piece: Piece, tile: Tile, change: ChangeModel) -> bool:
        """Pieces arrive without history: a pawn off its home row has moved. No rule depends on it."""
        if change.reason in (ChangeReason.NORMAL_MOVEMENT, ChangeReason.CAPTURE):
            return True
        return piece.type == PieceType.PAWN and tile.y != PAWN_HOME_ROWS[piece.color]

    @staticmethod
    def _is_double_step(piece: Piece, change: ChangeModel, removals: list[ChangeModel]) -> bool:
        if piece.type != PieceType.PAWN or change.reason != ChangeReason.NORMAL_MOVEMENT:
            return False
        origin = change.tile_id - piece.direction * DOUBLE_STEP
        return any(
            r.tile_id == origin and r.reason == ChangeReason.NORMAL_MOVEMENT for r in removals
        )

    def _apply_turn_fields(self, state: StateModel) -> None:
        previous_player = self.current_player
        self.turn_number = state.turn_number
        self.current_player = Color(state.current_player)
        self.phase = Phase(state.card_phase)
        self.active_card = CardType(state.active_card_type) if state.active_card_type else None
        self.card_owner = Color(state.card_owner) if state.card_owner else None
        self.game_over = state.game_over
        self.winner = Color(state.winner) if state.winner else None
        self.graveyard = state.graveyard

        if self.current_player != previous_player:
            for piece in self.board.live_pieces(self.current_player):
                piece.has_double_moved = False

        if (
            self.phase == Phase.CARD_SELECTION
            and self.active_card is not None
            and self.card_owner == self.color
        ):
            self.selection = CardSelection(self.active_card, self.board, self.card_owner)
        else:
            self.selection = None
        self.confirmed_selection = None
