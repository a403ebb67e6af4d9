"""Общие фикстуры: фейковый транспорт и ручной планировщик таймеров."""
import json

import pytest

from tictactoe.session import MatchSession
from tictactoe.ws_handlers import ClientConnection


class FakeTransport:
    def __init__(self):
        self.sent: list[str] = []

    def send(self, text: str) -> None:
        self.sent.append(text)

    @property
    def messages(self) -> list[dict]:
        return [json.loads(t) for t in self.sent]

    def of_type(self, msg_type: str) -> list[dict]:
        return [m for m in self.messages if m["type"] == msg_type]

    def last(self, msg_type: str) -> dict:
        return self.of_type(msg_type)[-1]

    def clear(self) -> None:
        self.sent.clear()


class ManualTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Таймеры срабатывают только по вызову fire()."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay, callback) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire(self) -> None:
        for timer in self.pending:
            timer.cancelled = True
            timer.callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def session(scheduler):
    return MatchSession(first_move_timeout=120, move_timeout=30, scheduler=scheduler)


@pytest.fixture
def connect(session):
    """Создаёт подключённого клиента с фейковым транспортом."""
    def _connect() -> ClientConnection:
        return ClientConnection(FakeTransport(), session)
    return _connect


@pytest.fixture
def playing_game(session, connect, monkeypatch):
    """Публичная партия в статусе PLAYING с фиксированной рассадкой (a=0, b=1)."""
    monkeypatch.setattr("tictactoe.game.random.shuffle", lambda players: None)
    a, b = connect(), connect()
    game = session.public_game
    game.join(a)
    game.join(b)
    a.transport.clear()
    b.transport.clear()
    return game, a, b
