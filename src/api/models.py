"""Wire messages sent from the server to the clients"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.models import (
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    ChangeModel,
    ConnectedModel,
    MessageType,
    OutboundMessage,
    RejectedModel,
    StateModel,
)
from src.core.shared_types import Color, Phase
from src.game.changes import ActionType, ChangeReason
from src.game.tile import is_valid_tile_id

PieceColor = str
PieceName = str


class CamelModel(BaseModel):
    """Field names are snake_case in Python and camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- PAYLOADS ---
class ChangeMessage(CamelModel):
    tile_id: int
    action_type: ActionType
    reason: ChangeReason
    parameter: Optional[int] = None

    @field_validator("tile_id")
    @classmethod
    def validate_tile_id(cls, value: int) -> int:
        if not is_valid_tile_id(value):
            raise InvalidRequestError(f"Tile id {value} is not on the board.")
        return value

    @classmethod
    def from_model(cls, model: ChangeModel) -> "ChangeMessage":
        return cls(
            tile_id=model.tile_id,
            action_type=ActionType(model.action_type),
            reason=ChangeReason(model.reason),
            parameter=model.parameter,
        )

    def to_model(self) -> ChangeModel:
        return ChangeModel(self.tile_id, int(self.action_type), int(self.reason), self.parameter)


class StateMessage(CamelModel):
    status: int = STATUS_ACCEPTED
    changes: list[ChangeMessage]
    turn_number: int
    current_player: Color
    card_phase: Phase
    active_card_type: Optional[int] = None
    card_owner: Optional[Color] = None
    topsy_turvy_pawns: list[int] = []
    game_over: bool = False
    winner: Optional[Color] = None
    graveyard: dict[PieceColor, dict[PieceName, int]] = {}

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: int) -> int:
        if value != STATUS_ACCEPTED:
            raise InvalidRequestError(
                f"A state always has status {STATUS_ACCEPTED:#04x}, got {value:#04x}."
            )
        return value

    @field_validator("topsy_turvy_pawns")
    @classmethod
    def validate_pawn_tiles(cls, value: list[int]) -> list[int]:
        invalid = [tile_id for tile_id in value if not is_valid_tile_id(tile_id)]
        if invalid:
            raise InvalidRequestError(f"Tile ids {invalid} are not on the board.")
        return value

    @classmethod
    def from_model(cls, model: StateModel) -> "StateMessage":
        return cls(
            status=model.status,
            changes=[ChangeMessage.from_model(change) for change in model.changes],
            turn_number=model.turn_number,
            current_player=Color(model.current_player),
            card_phase=Phase(model.card_phase),
            active_card_type=model.active_card_type,
            card_owner=Color(model.card_owner) if model.card_owner else None,
            topsy_turvy_pawns=model.topsy_turvy_pawns,
            game_over=model.game_over,
            winner=Color(model.winner) if model.winner else None,
            graveyard=model.graveyard,
        )

    def to_model(self) -> StateModel:
        return StateModel(
            changes=[change.to_model() for change in self.changes],
            turn_number=self.turn_number,
            current_player=str(self.current_player),
            card_phase=str(self.card_phase),
            active_card_type=self.active_card_type,
            card_owner=str(self.card_owner) if self.card_owner else None,
            topsy_turvy_pawns=list(self.topsy_turvy_pawns),
            game_over=self.game_over,
            winner=str(self.winner) if self.winner else None,
            graveyard=self.graveyard,
            status=self.status,
        )


class RejectedMessage(CamelModel):
    status: int = STATUS_REJECTED

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: int) -> int:
        if value != STATUS_REJECTED:
            raise InvalidRequestError(f"A rejection always has status {STATUS_REJECTED:#04x}.")
        return value


class ConnectedMessage(CamelModel):
    color: Color
    room_id: str


Payload = StateMessage | RejectedMessage | ConnectedMessage


# --- ENVELOPE ---
class ServerMessage(BaseModel):
    type: MessageType
    payload: Payload

    @classmethod
    def from_outbound(cls, message: OutboundMessage) -> "ServerMessage":
        return cls(type=message.type, payload=to_payload(message.payload))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def to_payload(model: StateModel | RejectedModel | ConnectedModel) -> Payload:
    """Convert a boundary model into the matching wire payload"""
    match model:
        case StateModel():
            return StateMessage.from_model(model)
        case RejectedModel():
            return RejectedMessage(status=model.status)
        case ConnectedModel():
            return ConnectedMessage(color=Color(model.color), room_id=model.room_id)
    raise InvalidRequestError(f"No wire payload for {type(model).__name__}")


def parse_state_payload(payload: dict) -> StateModel | RejectedModel:
    """
    Read a moveResponse / syncResponse / gameStart payload on the client side.

    Anything with status 0 is a rejection, whatever else it carries.
    """
    if payload.get("status") == STATUS_REJECTED:
        return RejectedModel()
    return StateMessage.model_validate(payload).to_model()


# --- HTTP RESPONSE MODELS ---
class RoomResponse(CamelModel):
    room_id: str
    players: list[Color]
    turn_number: Optional[int] = None
    game_over: bool = False
    winner: Optional[Color] = None
