"""
Card selection state machine (client side)

A card has a fixed number of ordered stages, each with a maximum number of picks.
Picking a selectable tile adds it to the current stage; once the stage is full the machine moves on to the next one.
Picking a tile of the current stage again removes it. Picking a tile chosen in an earlier stage goes back to that stage
and throws away every pick from that stage on, so the player can change an earlier choice.

This is only there to help the player build a valid selection. The server validates the final list of tiles again.
"""

from dataclasses import dataclass, field

from src.core.exceptions import IllegalCardError
from src.core.shared_types import Color
from src.game.actions import CardAction
from src.game.board import Board
from src.game.cards import CARDS, CardInfo, CardType, selectable_tiles
from src.game.tile import TileState


@dataclass
class CardSelection:
    card_type: CardType
    board: Board
    color: Color
    current_stage: int = 0
    stage_selections: list[list[int]] = field(default_factory=list)
    selectable: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.reset()

    @property
    def info(self) -> CardInfo:
        return CARDS[self.card_type]

    @property
    def is_final_stage(self) -> bool:
        return self.current_stage == self.info.stages - 1

    def reset(self) -> None:
        self.current_stage = 0
        self.stage_selections = [[] for _ in range(self.info.stages)]
        self._refresh()

    def toggle(self, tile_id: int) -> bool:
        """Returns True if the tile got added to the selection"""
        for stage in range(self.current_stage):
            if tile_id in self.stage_selections[stage]:
                self._rewind(stage)
                return False

        current = self.stage_selections[self.current_stage]
        if tile_id in current:
            current.remove(tile_id)
            self._refresh()
            return False

        if tile_id not in self.selectable or len(current) >= self._cap():
            return False

        current.append(tile_id)
        if len(current) >= self._cap() and not self.is_final_stage:
            self.current_stage += 1
        self._refresh()
        return True

    def is_stage_complete(self, stage: int) -> bool:
        picked = len(self.stage_selections[stage])
        if stage == self.info.stages - 1 and self.info.min_final_selections is not None:
            return picked >= self.info.min_final_selections
        return picked >= self.info.max_selections[stage]

    @property
    def is_ready(self) -> bool:
        return self.is_final_stage and self.is_stage_complete(self.current_stage)

    def selections(self) -> list[int]:
        """All picks, in stage order"""
        return [tile_id for stage in self.stage_selections for tile_id in stage]

    def to_action(self) -> CardAction:
        if not self.is_ready:
            raise IllegalCardError(
                f"{self.info.name} is not ready: stage {self.current_stage + 1} of {self.info.stages} incomplete"
            )
        return CardAction(self.card_type, tuple(self.selections()))

    def apply_tile_states(self) -> None:
        """Mark the selectable and the selected tiles on the board, for whoever draws it"""
        self.board.reset_tile_states()
        for tile_id in self.selectable:
            tile = self.board.tile_by_id(tile_id)
            if tile is not None:
                tile.state = TileState.SELECTABLE
        for tile_id in self.selections():
            tile = self.board.tile_by_id(tile_id)
            if tile is not None:
                tile.state = TileState.SELECTED

    # -- PRIVATE HELPERS ---
    def _cap(self) -> int:
        return self.info.max_selections[self.current_stage]

    def _rewind(self, stage: int) -> None:
        self.current_stage = stage
        for later in range(stage, self.info.stages):
            self.stage_selections[later].clear()
        self._refresh()

    def _refresh(self) -> None:
        """Selectable tiles depend on the board and on the picks of the earlier stages"""
        self.selectable = selectable_tiles(
            self.card_type,
            self.board,
            self.color,
            self.current_stage,
            self.stage_selections[: self.current_stage],
        )
