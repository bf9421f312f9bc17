from __future__ import annotations

import asyncio

import pytest

from game_server.reaper import IdleReaper
from game_server.server import GameServer

from conftest import FakeConnection

THRESHOLD = 300.0


@pytest.fixture
def reaper_game() -> GameServer:
    return GameServer(idle_timeout_seconds=THRESHOLD, idle_check_interval_seconds=60)


def _connect_at(game: GameServer, last_active_at: float) -> tuple[str, FakeConnection]:
    connection = FakeConnection()
    session_id = game.on_accept(connection)
    game.registry.get(session_id).last_active_at = last_active_at
    return session_id, connection


def test_sweep_evicts_only_sessions_past_threshold(reaper_game: GameServer) -> None:
    now = 10_000.0
    idle_id, idle = _connect_at(reaper_game, now - THRESHOLD - 1)
    fresh_id, fresh = _connect_at(reaper_game, now - 10)
    edge_id, _ = _connect_at(reaper_game, now - THRESHOLD)
    fresh.clear()

    evicted = reaper_game.reaper.sweep(now=now)

    assert evicted == [idle_id]
    assert idle.closed
    assert "[System]: You have been kicked from the game: idle timeout\n" in idle.lines
    assert fresh_id in reaper_game.registry
    assert edge_id in reaper_game.registry
    assert fresh.lines == [f"[System]: {idle_id} left the game\n"]


def test_sweep_tolerates_session_vanishing_mid_sweep(reaper_game: GameServer) -> None:
    now = 10_000.0
    gone_id, _ = _connect_at(reaper_game, 0.0)
    _, observer = _connect_at(reaper_game, now)
    observer.clear()

    def _kick_after_disconnect(session_id: str, reason: str) -> bool:
        # a desconexão normal ganhou a corrida
        reaper_game.on_close(session_id)
        return reaper_game.kick(session_id, reason)

    reaper = IdleReaper(reaper_game.registry, _kick_after_disconnect, threshold_seconds=THRESHOLD)

    assert reaper.sweep(now=now) == []
    assert observer.lines == [f"[System]: {gone_id} left the game\n"]


def test_sweep_uses_injected_clock() -> None:
    clock_value = [1_000.0]
    game = GameServer(idle_timeout_seconds=THRESHOLD, clock=lambda: clock_value[0])
    session_id, _ = _connect_at(game, 1_000.0)

    assert game.reaper.sweep() == []
    clock_value[0] = 1_000.0 + THRESHOLD + 5
    assert game.reaper.sweep() == [session_id]


def test_activity_is_stamped_with_injected_clock() -> None:
    clock_value = [1_000.0]
    game = GameServer(idle_timeout_seconds=THRESHOLD, clock=lambda: clock_value[0])
    session_id = game.on_accept(FakeConnection())
    assert game.registry.get(session_id).last_active_at == 1_000.0

    clock_value[0] = 1_000.0 + THRESHOLD
    game.on_line(session_id, "/ping")
    assert game.registry.get(session_id).last_active_at == 1_000.0 + THRESHOLD

    clock_value[0] = 1_000.0 + THRESHOLD + 5
    assert game.reaper.sweep() == []
    clock_value[0] = 1_000.0 + 2 * THRESHOLD + 1
    assert game.reaper.sweep() == [session_id]


@pytest.mark.asyncio
async def test_background_task_sweeps_periodically() -> None:
    game = GameServer(idle_timeout_seconds=THRESHOLD, idle_check_interval_seconds=0.01, clock=lambda: 1e9)
    session_id, connection = _connect_at(game, 0.0)

    await game.reaper.start()
    try:
        for _ in range(100):
            if session_id not in game.registry:
                break
            await asyncio.sleep(0.01)
    finally:
        await game.reaper.stop()

    assert session_id not in game.registry
    assert connection.closed
    assert game.reaper.cleanup_task is None


@pytest.mark.asyncio
async def test_loop_survives_sweep_errors(monkeypatch) -> None:
    game = GameServer(idle_check_interval_seconds=0.01)
    calls = []

    def _flaky_sweep(now=None):
        calls.append(now)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return []

    monkeypatch.setattr(game.reaper, "sweep", _flaky_sweep)

    await game.reaper.start()
    try:
        for _ in range(100):
            if len(calls) >= 2:
                break
            await asyncio.sleep(0.01)
    finally:
        await game.reaper.stop()

    assert len(calls) >= 2
