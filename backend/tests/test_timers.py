"""Таймауты на настоящем event loop."""
import asyncio

import pytest

from tictactoe.constants import GameEndReason, GameStatus
from tictactoe.session import MatchSession
from tictactoe.ws_handlers import ClientConnection

from conftest import FakeTransport


@pytest.mark.asyncio
async def test_first_move_timeout_fires_on_event_loop():
    session = MatchSession(first_move_timeout=0.05, move_timeout=0.05)
    a = ClientConnection(FakeTransport(), session)
    b = ClientConnection(FakeTransport(), session)
    session.join_public(a)
    session.join_public(b)
    game = a.current_game

    await asyncio.sleep(0.2)
    assert game.status == GameStatus.FINISHED
    assert game.result.reason == GameEndReason.TIME
    assert game.result.winner == 1  # первым ходил seat 0


@pytest.mark.asyncio
async def test_move_rearms_timer_on_event_loop():
    session = MatchSession(first_move_timeout=0.1, move_timeout=0.3)
    a = ClientConnection(FakeTransport(), session)
    b = ClientConnection(FakeTransport(), session)
    session.join_public(a)
    session.join_public(b)
    game = a.current_game
    first = game.players[0]

    await asyncio.sleep(0.05)
    assert game.play(first, 4)
    # старый таймер 0.1с отменён, новый 0.3с ещё не истёк
    await asyncio.sleep(0.1)
    assert game.status == GameStatus.PLAYING
    await asyncio.sleep(0.4)
    assert game.result.reason == GameEndReason.TIME
    assert game.result.winner == 0
