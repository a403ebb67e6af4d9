"""
Обработка сообщений WebSocket: join_queue, leave_queue, play, re_sync.
Один ClientConnection на подключение; состояние партий хранит MatchSession.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from fastapi import WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect

from .constants import GamePrivacy
from .schemas import JoinQueueMessage, LeaveQueueMessage, PlayMessage, ResyncMessage, parse_inbound
from .ws_manager import WebSocketTransport

if TYPE_CHECKING:
    from .game import Game
    from .session import MatchSession

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def send(self, text: str) -> None: ...


class ClientConnection:
    def __init__(self, transport: Transport, session: MatchSession):
        self.transport = transport
        self.session = session
        self.current_game: Game | None = None
        self.session.add_client(self)

    def send(self, payload: dict[str, Any]) -> None:
        self.transport.send(json.dumps(payload))

    def on_message(self, raw: str | bytes) -> None:
        try:
            msg = parse_inbound(raw)
        except ValidationError as e:
            logger.debug("WS: dropped malformed message: %s", e.errors(include_url=False))
            return

        if isinstance(msg, JoinQueueMessage):
            if self.current_game:
                return
            if msg.game_id:
                self.session.join_by_id(self, msg.game_id)
            elif msg.queue == GamePrivacy.PUBLIC:
                self.session.join_public(self)
            else:
                self.session.create_private(self)
            return

        game = self.current_game
        if not game:
            logger.debug("WS: %s ignored, client has no game", msg.type)
            return
        if isinstance(msg, LeaveQueueMessage):
            game.leave(self)
        elif isinstance(msg, PlayMessage):
            game.play(self, msg.slot)
        elif isinstance(msg, ResyncMessage):
            game.send_state(self)

    def on_disconnect(self) -> None:
        if self.current_game:
            self.current_game.leave(self)
        self.session.remove_client(self)


async def ws_client_loop(ws: WebSocket, session: MatchSession) -> None:
    """Принимает подключение и гоняет цикл приёма сообщений до разрыва."""
    await ws.accept()
    transport = WebSocketTransport(ws)
    writer = asyncio.create_task(transport.run())
    client = ClientConnection(transport, session)
    logger.info("WS: client connected %s (total=%d)", ws.client, len(session.clients))
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is not None:
                client.on_message(raw)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s client=%s", e.code, ws.client)
    except Exception as e:
        logger.exception("WS: error client=%s: %s", ws.client, e)
    finally:
        client.on_disconnect()
        transport.close()
        await writer
        logger.info("WS: disconnected %s (total=%d)", ws.client, len(session.clients))
