"""Socket.IO chat relay: join a room, replay its history, broadcast messages."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import socketio

from fitlockr_app.config import DEFAULT_CHAT_ROOM
from fitlockr_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

TIME_FORMAT = "%I:%M %p"


def _local_now() -> datetime:
    return datetime.now()


class ChatRelay:
    """In-memory chat rooms with per-room history kept in arrival order.

    ``joinRoom`` sends the joiner the full history of that room as
    ``chatHistory``. ``sendMessage`` appends ``{user, message, time}`` to the
    history and emits it to everyone in the room as ``receiveMessage``.
    """

    def __init__(
        self,
        sio: Any,
        default_room: str = DEFAULT_CHAT_ROOM,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.sio = sio
        self.default_room = default_room
        self.clock = clock
        self.history: Dict[str, List[Dict[str, str]]] = {}

    def register(self) -> "ChatRelay":
        self.sio.on("connect", self.connect)
        self.sio.on("disconnect", self.disconnect)
        self.sio.on("joinRoom", self.join_room)
        self.sio.on("sendMessage", self.send_message)
        return self

    def room_history(self, room: Optional[str] = None) -> List[Dict[str, str]]:
        return self.history.setdefault(room or self.default_room, [])

    async def connect(self, sid: str, environ: Dict[str, Any], auth: Any = None) -> None:
        log_event(LOGGER, logging.INFO, "chat_connected", sid=sid)

    async def disconnect(self, sid: str, *args: Any) -> None:
        log_event(LOGGER, logging.INFO, "chat_disconnected", sid=sid)

    def _room_name(self, room: Any) -> str:
        return room if isinstance(room, str) and room.strip() else self.default_room

    async def join_room(self, sid: str, room: Any = None) -> None:
        room_name = self._room_name(room)
        await self.sio.enter_room(sid, room_name)
        history = self.room_history(room_name)
        await self.sio.emit("chatHistory", list(history), to=sid)
        log_event(LOGGER, logging.INFO, "chat_room_joined", sid=sid, room=room_name, history=len(history))

    async def send_message(self, sid: str, data: Any) -> Optional[Dict[str, str]]:
        if not isinstance(data, dict):
            return None
        text = str(data.get("message") or "").strip()
        if not text:
            return None

        room_name = self._room_name(data.get("roomId"))
        entry = {
            "user": str(data.get("user") or "Anonymous"),
            "message": text,
            "time": self.clock().strftime(TIME_FORMAT),
        }
        self.room_history(room_name).append(entry)
        await self.sio.emit("receiveMessage", entry, room=room_name)
        log_event(LOGGER, logging.INFO, "chat_message_relayed", sid=sid, room=room_name)
        return entry


def create_chat_server(cors_origins: List[str] | None = None, default_room: str = DEFAULT_CHAT_ROOM) -> tuple:
    """Build the Socket.IO server with the relay handlers attached."""

    origins = cors_origins or ["*"]
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if origins == ["*"] else origins,
    )
    relay = ChatRelay(sio, default_room=default_room).register()
    return sio, relay


__all__ = ["ChatRelay", "TIME_FORMAT", "create_chat_server"]
