"""Unit tests for src/api/models.py"""

import json

import pytest

from src.api.models import (
    ChangeMessage,
    ConnectedMessage,
    ServerMessage,
    StateMessage,
    parse_state_payload,
    to_payload,
)
from src.core.exceptions import InvalidRequestError
from src.core.models import (
    ChangeModel,
    ConnectedModel,
    MessageType,
    OutboundMessage,
    RejectedModel,
    StateModel,
)
from src.core.shared_types import Color, Phase
from src.game.actions import MoveAction
from src.game.match import Match
from tests.conftest import NO_CARDS


@pytest.fixture
def moved_state() -> StateModel:
    match = Match.new_match(seed=0, card_draw_interval=NO_CARDS)
    return match.submit(Color.WHITE, MoveAction(52, 36))


def _wire(message: OutboundMessage) -> dict:
    return json.loads(ServerMessage.from_outbound(message).to_json())


# -- Wire format --
def test_state_fields_are_camel_case(moved_state: StateModel) -> None:
    wire = _wire(OutboundMessage("s", MessageType.MOVE_RESPONSE, moved_state))

    assert wire["type"] == "moveResponse"
    payload = wire["payload"]
    assert payload["status"] == 1
    assert payload["turnNumber"] == 1
    assert payload["currentPlayer"] == "black"
    assert payload["cardPhase"] == "normal"
    assert payload["activeCardType"] is None
    assert payload["cardOwner"] is None
    assert payload["topsyTurvyPawns"] == []
    assert payload["gameOver"] is False
    assert payload["winner"] is None
    assert payload["graveyard"]["white"]["pawn"] == 0
    assert payload["changes"] == [
        {"tileId": 52, "actionType": 1, "reason": 3, "parameter": None},
        {"tileId": 36, "actionType": 2, "reason": 3, "parameter": 1},
    ]


def test_rejection_is_just_the_status() -> None:
    wire = _wire(OutboundMessage("s", MessageType.MOVE_RESPONSE, RejectedModel()))
    assert wire == {"type": "moveResponse", "payload": {"status": 0}}


def test_connected_message() -> None:
    wire = _wire(OutboundMessage("s", MessageType.CONNECTED, ConnectedModel("white", "room-1")))
    assert wire == {"type": "connected", "payload": {"color": "white", "roomId": "room-1"}}


def test_card_phase_on_the_wire(moved_state: StateModel) -> None:
    moved_state.card_phase = str(Phase.CARD_SELECTION)
    moved_state.active_card_type = 5
    moved_state.card_owner = "black"
    payload = _wire(OutboundMessage("s", MessageType.MOVE_RESPONSE, moved_state))["payload"]
    assert payload["cardPhase"] == "card-selection"
    assert payload["activeCardType"] == 5
    assert payload["cardOwner"] == "black"


# -- Client side parsing --
def test_parse_state_payload(moved_state: StateModel) -> None:
    payload = _wire(OutboundMessage("s", MessageType.MOVE_RESPONSE, moved_state))["payload"]
    assert parse_state_payload(payload) == moved_state


def test_parse_rejection() -> None:
    assert parse_state_payload({"status": 0}) == RejectedModel()


def test_to_payload_accepts_snake_case_names() -> None:
    message = StateMessage(
        changes=[],
        turn_number=0,
        current_player=Color.WHITE,
        card_phase=Phase.NORMAL,
    )
    assert message.to_model().current_player == "white"
    assert to_payload(ConnectedModel("black", "r")) == ConnectedMessage(color=Color.BLACK, room_id="r")


# -- Validation --
@pytest.mark.parametrize("tile_id", [-1, 64, 200])
def test_invalid_tile_id(tile_id: int) -> None:
    with pytest.raises(InvalidRequestError):
        ChangeMessage(tile_id=tile_id, action_type=1, reason=3)


def test_invalid_reversed_pawn_tiles() -> None:
    with pytest.raises(InvalidRequestError):
        StateMessage.model_validate(
            {
                "changes": [],
                "turnNumber": 0,
                "currentPlayer": "white",
                "cardPhase": "normal",
                "topsyTurvyPawns": [70],
            }
        )


def test_state_with_rejected_status() -> None:
    with pytest.raises(InvalidRequestError):
        StateMessage(
            status=0,
            changes=[],
            turn_number=0,
            current_player=Color.WHITE,
            card_phase=Phase.NORMAL,
        )


def test_change_message_round_trip() -> None:
    model = ChangeModel(36, 2, 3, 1)
    assert ChangeMessage.from_model(model).to_model() == model
