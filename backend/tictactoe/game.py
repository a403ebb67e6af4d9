"""
Партия крестиков-ноликов: очередь -> игра -> завершение.
Все методы синхронные и не бросают исключений на некорректные действия клиента.
"""
from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .board import evaluate
from .constants import GRID_CELLS, MSG_SYNC, SEATS, GameEndReason, GamePrivacy, GameStatus

if TYPE_CHECKING:
    from .session import MatchSession, TimerHandle
    from .ws_handlers import ClientConnection

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class GameResult:
    reason: GameEndReason | None = None
    winner: int | None = None  # номер места победителя


@dataclass(eq=False)
class Game:
    privacy: GamePrivacy
    session: MatchSession = field(repr=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: GameStatus = GameStatus.QUEUE
    players: list[ClientConnection] = field(default_factory=list, repr=False)
    grid: list[int | None] = field(default_factory=lambda: [None] * GRID_CELLS)
    current_player: int = 0
    result: GameResult = field(default_factory=GameResult)
    last_update: int = field(default_factory=_now_ms)  # unix ms
    deadline: int | None = None  # unix ms, когда сработает таймаут хода
    _timer: TimerHandle | None = field(default=None, repr=False)

    def state_for(self, seat: int) -> dict[str, Any]:
        """Снимок партии для игрока на месте seat."""
        return {
            "id": self.id,
            "status": self.status.value,
            "privacy": self.privacy.value,
            "grid": list(self.grid),
            "currentPlayer": self.current_player,
            "results": {
                "winner": self.result.winner,
                "reason": self.result.reason.value if self.result.reason else None,
            },
            "lastUpdate": self.last_update,
            "deadline": self.deadline,
            "playerId": seat,
        }

    def sync(self) -> None:
        for seat, client in enumerate(self.players):
            client.send({"type": MSG_SYNC, "state": self.state_for(seat)})

    def send_state(self, client: ClientConnection) -> None:
        """Повторная отправка состояния одному участнику (re_sync)."""
        if client not in self.players:
            return
        seat = self.players.index(client)
        client.send({"type": MSG_SYNC, "state": self.state_for(seat)})

    def join(self, client: ClientConnection) -> bool:
        if self.status != GameStatus.QUEUE or len(self.players) >= SEATS:
            return False
        if client in self.players:
            return False
        client.current_game = self
        self.players.append(client)
        logger.info("Game %s: player joined (%d/%d)", self.id, len(self.players), SEATS)
        if len(self.players) == SEATS:
            self.start()
        if self.privacy == GamePrivacy.PUBLIC:
            self.session.update_public_player_count()
        self.sync()
        return True

    def leave(self, client: ClientConnection) -> None:
        if client not in self.players:
            return
        if self.status == GameStatus.PLAYING:
            # Выход посреди партии засчитывается как поражение
            other = 1 - self.players.index(client)
            self.end(GameEndReason.LEAVE, other)
            return
        if self.status != GameStatus.QUEUE:
            return
        self.players.remove(client)
        client.current_game = None
        client.send({"type": MSG_SYNC, "state": None})
        logger.info("Game %s: player left queue (%d/%d)", self.id, len(self.players), SEATS)
        if self.privacy == GamePrivacy.PUBLIC:
            self.session.update_public_player_count()
        elif not self.players:
            self.session.discard_game(self)

    def start(self) -> None:
        if self.status != GameStatus.QUEUE or len(self.players) != SEATS:
            return
        random.shuffle(self.players)
        self.status = GameStatus.PLAYING
        self.current_player = 0
        self.last_update = _now_ms()
        self._arm_timer(self.session.first_move_timeout)
        logger.info("Game %s: started (%s)", self.id, self.privacy.value)
        if self.privacy == GamePrivacy.PUBLIC:
            self.session.public_game = self.session.create_game(GamePrivacy.PUBLIC)

    def play(self, client: ClientConnection, slot: Any) -> bool:
        if self.status != GameStatus.PLAYING:
            return False
        if self.players[self.current_player] is not client:
            return False
        if not isinstance(slot, int) or isinstance(slot, bool) or not 0 <= slot < GRID_CELLS:
            return False
        if self.grid[slot] is not None:
            return False

        self.grid[slot] = self.current_player
        self.last_update = _now_ms()
        self._arm_timer(self.session.move_timeout)

        outcome = evaluate(self.grid, slot)
        if outcome:
            self.end(outcome.reason, outcome.winner)
        else:
            self.current_player = 1 - self.current_player
            self.sync()
        return True

    def end(self, reason: GameEndReason, winner: int | None) -> None:
        if self.status == GameStatus.FINISHED:
            return
        self._cancel_timer()
        self.status = GameStatus.FINISHED
        self.result = GameResult(reason=reason, winner=winner)
        logger.info("Game %s: finished reason=%s winner=%s", self.id, reason.value, winner)

        self.sync()
        self.session.discard_game(self)
        for client in self.players:
            if client.current_game is self:
                client.current_game = None
        if self.privacy == GamePrivacy.PUBLIC:
            self.session.update_public_player_count()

    def _on_move_timeout(self) -> None:
        self._timer = None
        self.deadline = None
        if self.status != GameStatus.PLAYING:
            return
        logger.info("Game %s: seat %d ran out of time", self.id, self.current_player)
        self.end(GameEndReason.TIME, 1 - self.current_player)

    def _arm_timer(self, delay: float) -> None:
        self._cancel_timer()
        self._timer = self.session.arm_timer(delay, self._on_move_timeout)
        self.deadline = self.last_update + int(delay * 1000)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.deadline = None
