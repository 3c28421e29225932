"""Orchestration of communication from the websocket endpoint to the rooms and their matches (and the reverse direction)."""

import logging
from typing import Optional

from src.core.config import RANDOM_SEED
from src.core.exceptions import (
    GameError,
    OccupiedTileError,
    SessionNotFoundError,
    WrongPhaseError,
)
from src.core.models import (
    ConnectedModel,
    MessageType,
    OutboundMessage,
    RejectedModel,
    StateModel,
)
from src.game.actions import ConcedeAction, ResyncAction, decode_action
from src.game.room import Room
from src.store.repository import RoomRepository

logger = logging.getLogger(__name__)


class MatchService:
    """
    Pairs sessions into rooms and runs their actions against the match.

    Every method returns the messages to send, one per recipient session. The service does not know about sockets.
    """

    def __init__(
        self,
        repository: RoomRepository,
        layout: Optional[str] = None,
        seed: Optional[int] = RANDOM_SEED,
    ) -> None:
        self.repo = repository
        self.layout = layout
        self.seed = seed

    # -- Websocket events ---
    def connect(self, session_id: str) -> list[OutboundMessage]:
        """
        A new session connected.
        ----
        It is seated in the room waiting for an opponent, or in a new room if nobody is waiting.
        Once the room is full, the match starts and both sessions get the full state.
        """
        room = self.repo.find_room_of(session_id)
        if room is None:
            room = self.repo.waiting_room() or self.repo.create_room()
        color = room.add_player(session_id)
        messages = [
            OutboundMessage(
                session_id, MessageType.CONNECTED, ConnectedModel(str(color), room.room_id)
            )
        ]
        logger.info("session %s joined room %s as %s", session_id, room.room_id, color)

        if room.match is None and room.is_full:
            match = room.start(layout=self.layout, seed=self.seed)
            messages.extend(self._broadcast(room, MessageType.GAME_START, match.full_state()))
            logger.info("room %s is full, match started", room.room_id)
        return messages

    def handle_action(self, session_id: str, data: bytes) -> list[OutboundMessage]:
        """
        Decode and run the action.
        ----
        An accepted action is broadcast to the room, a rejection only goes back to the sender.
        A resync only goes back to the sender, as a full state.
        """
        room = self.repo.find_room_of(session_id)
        if room is None or room.match is None:
            logger.info("rejected action from %s: no match running", session_id)
            return [self._rejection(session_id)]

        try:
            action = decode_action(data)
            color = room.color_of(session_id)
            state = room.match.submit(color, action)
        except OccupiedTileError:
            # validation let through an action that broke the board: not something to reject silently
            logger.exception("board invariant broken in room %s", room.room_id)
            raise
        except GameError as e:
            logger.info("rejected action from %s in room %s: %s", session_id, room.room_id, e)
            return [self._rejection(session_id)]

        if isinstance(action, ResyncAction):
            return [OutboundMessage(session_id, MessageType.SYNC_RESPONSE, state)]
        return self._broadcast(room, MessageType.MOVE_RESPONSE, state)

    def full_state(self, session_id: str) -> StateModel:
        room = self._fetch_room(session_id)
        if room.match is None:
            raise WrongPhaseError(f"Room {room.room_id} has no match yet")
        return room.match.full_state()

    def disconnect(self, session_id: str) -> list[OutboundMessage]:
        """
        A session left.
        ----
        Leaving a running match concedes it: the opponent is told they won.
        Empty rooms are deleted.
        """
        room = self.repo.find_room_of(session_id)
        if room is None:
            return []

        messages: list[OutboundMessage] = []
        if room.is_playing:
            assert room.match is not None
            state = room.match.submit(room.color_of(session_id), ConcedeAction())
            room.remove_player(session_id)
            messages = self._broadcast(room, MessageType.MOVE_RESPONSE, state)
        else:
            room.remove_player(session_id)
        logger.info("session %s left room %s", session_id, room.room_id)

        if room.is_empty:
            self.repo.delete_room(room.room_id)
            logger.info("room %s closed", room.room_id)
        return messages

    def list_rooms(self) -> list[Room]:
        return self.repo.list_rooms()

    # -- Internal helpers --
    def _fetch_room(self, session_id: str) -> Room:
        room = self.repo.find_room_of(session_id)
        if room is None:
            raise SessionNotFoundError(session_id)
        return room

    @staticmethod
    def _rejection(session_id: str) -> OutboundMessage:
        return OutboundMessage(session_id, MessageType.MOVE_RESPONSE, RejectedModel())

    @staticmethod
    def _broadcast(
        room: Room, message_type: MessageType, state: StateModel
    ) -> list[OutboundMessage]:
        return [OutboundMessage(sid, message_type, state) for sid in room.session_ids]
