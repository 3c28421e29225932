"""
Boundary layer data model(s).

These objects are used to communicate the state of a match out of the domain layer.
Both the service layer and the client replica use them, and the API layer converts them into wire messages.
Only plain types in here: the layers above do not need to know about Boards, Tiles or Pieces.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

STATUS_ACCEPTED = 0x01
STATUS_REJECTED = 0x00

# Type aliases to make StateModel easier to read
TileId = int
PieceColor = str
PieceName = str


@dataclass(frozen=True)
class ChangeModel:
    tile_id: TileId
    action_type: int
    reason: int
    parameter: Optional[int] = None


@dataclass
class StateModel:
    """Full state or the result of one action: the changes plus the flags describing whose turn it is."""

    changes: list[ChangeModel]
    turn_number: int
    current_player: PieceColor
    card_phase: str
    active_card_type: Optional[int] = None
    card_owner: Optional[PieceColor] = None
    topsy_turvy_pawns: list[TileId] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[PieceColor] = None
    graveyard: dict[PieceColor, dict[PieceName, int]] = field(default_factory=dict)
    status: int = STATUS_ACCEPTED


@dataclass(frozen=True)
class RejectedModel:
    """A rejection carries nothing but the status: the client rolls back and waits"""

    status: int = STATUS_REJECTED


@dataclass(frozen=True)
class ConnectedModel:
    """Sent to a session once it got a seat"""

    color: PieceColor
    room_id: str


class MessageType(StrEnum):
    CONNECTED = "connected"
    GAME_START = "gameStart"
    MOVE_RESPONSE = "moveResponse"
    SYNC_RESPONSE = "syncResponse"


@dataclass(frozen=True)
class OutboundMessage:
    """One message for one session. A broadcast is one OutboundMessage per seated session."""

    session_id: str
    type: MessageType
    payload: StateModel | RejectedModel | ConnectedModel
