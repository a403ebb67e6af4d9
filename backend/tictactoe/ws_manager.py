"""
Транспорт WebSocket: неблокирующая отправка с сохранением порядка.
Игровая логика синхронная, поэтому сообщения кладутся в очередь
и пишутся в сокет отдельной задачей.
"""
import asyncio
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketTransport:
    # Клиент, который не читает сокет, не должен копить очередь бесконечно
    MAX_PENDING_MESSAGES = 256
    OVERFLOW_CLOSE_CODE = 1013

    def __init__(self, ws: WebSocket, max_pending: int = MAX_PENDING_MESSAGES):
        self.ws = ws
        self._outbox: asyncio.Queue[str | None] = asyncio.Queue(maxsize=max_pending + 1)
        self._max_pending = max_pending
        self.closed = False
        self.overflowed = False

    def send(self, text: str) -> None:
        if self.closed:
            return
        if self._outbox.qsize() >= self._max_pending:
            logger.warning("WS: outbox overflow for %s, dropping connection", self.ws.client)
            self.overflowed = True
            self._drain()
            self.close()
            return
        self._outbox.put_nowait(text)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            # Одно место в очереди всегда остаётся под маркер остановки
            self._outbox.put_nowait(None)

    def _drain(self) -> None:
        while True:
            try:
                self._outbox.get_nowait()
            except asyncio.QueueEmpty:
                return

    async def run(self) -> None:
        """Пишет сообщения из очереди в сокет, пока транспорт не закрыт."""
        while True:
            text = await self._outbox.get()
            if text is None:
                break
            try:
                await self.ws.send_text(text)
            except Exception as e:
                logger.warning("WS: send failed to %s: %s", self.ws.client, e)
                self.closed = True
                return
        if self.overflowed:
            try:
                await self.ws.close(code=self.OVERFLOW_CLOSE_CODE)
            except Exception as e:
                logger.warning("WS: close failed for %s: %s", self.ws.client, e)
