"""
Реестр партий и подключений (in-memory), матчмейкинг.
Один объект на процесс: создаётся при старте приложения.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Protocol

from .constants import MSG_PUBLIC_PLAYER_COUNT, MSG_QUEUE, SEATS, GamePrivacy, GameStatus
from .game import Game

if TYPE_CHECKING:
    from .ws_handlers import ClientConnection

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def _call_later(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class MatchSession:
    def __init__(
        self,
        first_move_timeout: float = 120,
        move_timeout: float = 30,
        scheduler: Scheduler | None = None,
    ):
        self.first_move_timeout = first_move_timeout
        self.move_timeout = move_timeout
        self._scheduler = scheduler or _call_later
        self.games: set[Game] = set()
        self.clients: set[ClientConnection] = set()
        self.public_game: Game = self.create_game(GamePrivacy.PUBLIC)

    def arm_timer(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._scheduler(delay, callback)

    def create_game(self, privacy: GamePrivacy) -> Game:
        game = Game(privacy=privacy, session=self)
        self.games.add(game)
        logger.info("Session: created %s game %s", privacy.value, game.id)
        return game

    def discard_game(self, game: Game) -> None:
        self.games.discard(game)

    def find_game_by_id(self, game_id: str) -> Game | None:
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def add_client(self, client: ClientConnection) -> None:
        self.clients.add(client)
        self.update_public_player_count(client)

    def remove_client(self, client: ClientConnection) -> None:
        self.clients.discard(client)
        self.update_public_player_count()

    def public_player_count(self) -> int:
        """Сколько игроков сидит в публичных партиях (в очереди и в игре)."""
        return sum(len(g.players) for g in self.games if g.privacy == GamePrivacy.PUBLIC)

    def update_public_player_count(self, client: ClientConnection | None = None) -> None:
        """Отправить счётчик одному клиенту или всем подключённым."""
        payload = {"type": MSG_PUBLIC_PLAYER_COUNT, "count": self.public_player_count()}
        targets = [client] if client is not None else list(self.clients)
        for target in targets:
            target.send(payload)

    def join_public(self, client: ClientConnection) -> bool:
        return self.public_game.join(client)

    def create_private(self, client: ClientConnection) -> Game:
        game = self.create_game(GamePrivacy.PRIVATE)
        client.send({"type": MSG_QUEUE, "success": True, "gameId": game.id})
        game.join(client)
        return game

    def join_by_id(self, client: ClientConnection, game_id: str) -> bool:
        game = self.find_game_by_id(game_id)
        if not game or game.status != GameStatus.QUEUE or len(game.players) >= SEATS:
            logger.info("Session: rejected join to game %s", game_id)
            client.send({"type": MSG_QUEUE, "success": False, "gameId": None})
            return False
        client.send({"type": MSG_QUEUE, "success": True, "gameId": game.id})
        return game.join(client)

    def stats(self) -> dict[str, Any]:
        by_status = {GameStatus.QUEUE.value: 0, GameStatus.PLAYING.value: 0}
        for game in self.games:
            if game.status.value in by_status:
                by_status[game.status.value] += 1
        return {
            "clients": len(self.clients),
            "games": by_status,
            "public_player_count": self.public_player_count(),
        }
