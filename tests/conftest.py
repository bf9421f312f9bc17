from __future__ import annotations

import os
import tempfile

# Logs dos testes fora do repositório
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "game_server_test_logs"))

import pytest

from game_server.server import GameServer
from game_server.sessions import SessionRegistry


class FakeConnection:
    """Connection em memória: guarda o que foi escrito, simula buffer saturado"""

    def __init__(self, saturated: bool = False) -> None:
        self.sent: list[bytes] = []
        self.saturated = saturated
        self.closed = False
        self.close_calls = 0

    def write(self, data: bytes) -> bool:
        if self.closed or self.saturated:
            return False
        self.sent.append(data)
        return True

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1

    def is_closing(self) -> bool:
        return self.closed

    @property
    def lines(self) -> list[str]:
        return [chunk.decode("utf-8") for chunk in self.sent]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def game() -> GameServer:
    return GameServer()


@pytest.fixture
def connect(game: GameServer):
    """Conecta um FakeConnection ao servidor e devolve (session_id, connection)"""

    def _connect(saturated: bool = False) -> tuple[str, FakeConnection]:
        connection = FakeConnection(saturated=saturated)
        session_id = game.on_accept(connection)
        return session_id, connection

    return _connect
