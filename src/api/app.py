"""
FastAPI application: the websocket endpoint the game is played over, and a small HTTP endpoint listing the rooms.

Clients send actions as binary frames (see src/game/actions.py) and receive JSON text frames
`{"type": ..., "payload": ...}`. Each room processes one action at a time, broadcast included.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Optional
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from src.api.models import RoomResponse, ServerMessage
from src.core.config import HOST, PORT
from src.core.logging_config import configure_logging
from src.core.models import OutboundMessage
from src.game.room import Room
from src.services.match_service import MatchService
from src.store.memory_repository import InMemoryRoomRepository

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Keeps the open sockets by session id, and one lock per room"""

    def __init__(self, service: MatchService) -> None:
        self.service = service
        self.sockets: dict[str, WebSocket] = {}
        self.room_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        # seating and leaving touch more than one room
        self.lobby_lock = asyncio.Lock()

    def lock_for(self, session_id: str) -> asyncio.Lock:
        room = self.service.repo.find_room_of(session_id)
        return self.room_locks[room.room_id if room else session_id]

    async def send(self, messages: list[OutboundMessage]) -> None:
        for message in messages:
            socket = self.sockets.get(message.session_id)
            if socket is None:
                continue
            text = ServerMessage.from_outbound(message).to_json()
            try:
                await socket.send_text(text)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning("could not send %s to %s: %s", message.type, message.session_id, e)

    def forget(self, session_id: str) -> None:
        self.sockets.pop(session_id, None)

    async def leave(self, session_id: str) -> None:
        """Let the service handle the departure, and drop the lock of a room that got closed"""
        room = self.service.repo.find_room_of(session_id)
        await self.send(self.service.disconnect(session_id))
        self.room_locks.pop(session_id, None)
        if room is not None and self.service.repo.get_room(room.room_id) is None:
            self.room_locks.pop(room.room_id, None)


def _room_response(room: Room) -> RoomResponse:
    match = room.match
    return RoomResponse(
        room_id=room.room_id,
        players=list(room.players.values()),
        turn_number=match.turn_number if match else None,
        game_over=match.is_over if match else False,
        winner=match.winner if match else None,
    )


def create_app(service: Optional[MatchService] = None) -> FastAPI:
    """Build the app around a service (a fresh in-memory one by default)"""
    service = service or MatchService(InMemoryRoomRepository())
    manager = ConnectionManager(service)
    app = FastAPI(title="Topsy Turvy Chess")
    app.state.service = service
    app.state.manager = manager

    @app.get("/rooms")
    def list_rooms() -> list[RoomResponse]:
        return [_room_response(room) for room in service.list_rooms()]

    @app.websocket("/ws")
    async def ws_endpoint(ws: WebSocket) -> None:
        await ws.accept()
        session_id = uuid4().hex
        manager.sockets[session_id] = ws
        logger.debug("session %s connected", session_id)

        try:
            async with manager.lobby_lock:
                await manager.send(service.connect(session_id))

            while True:
                frame = await ws.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))
                # text frames are not actions: an empty action gets rejected
                data = frame.get("bytes") or b""
                async with manager.lock_for(session_id):
                    await manager.send(service.handle_action(session_id, data))
        except WebSocketDisconnect:
            logger.debug("session %s disconnected", session_id)
        finally:
            manager.forget(session_id)
            async with manager.lobby_lock:
                await manager.leave(session_id)

    return app


app = create_app()


def main() -> None:
    configure_logging()
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
