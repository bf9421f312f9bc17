"""
tcp.py - Camada de rede
Aceita conexões TCP, lê linhas e repassa os eventos ao GameServer
"""
import asyncio
from typing import Optional

from .config import CLOSE_WAIT_SECONDS, MAX_LINE_LENGTH, MAX_SESSIONS, TCP_HOST, TCP_PORT
from .messages import SERVER_FULL, SYSTEM_SENDER, format_line
from .server import GameServer
from .transport import StreamConnection
from .logger import get_logger

logger = get_logger("tcp")


class TcpServer:
    def __init__(
        self,
        game: GameServer,
        host: str = TCP_HOST,
        port: int = TCP_PORT,
        max_sessions: int = MAX_SESSIONS,
    ):
        self.game = game
        self.host = host
        self.port = port
        self.max_sessions = max_sessions
        self._server: Optional[asyncio.AbstractServer] = None

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    async def start(self):
        if self.is_serving:
            return
        self._server = await asyncio.start_server(self.handle_client, self.host, self.port)
        # Porta real (quando configurada como 0)
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info(f"Game server listening on {self.host}:{self.port}")

    async def stop(self):
        if self._server is None:
            return
        self._server.close()
        self.game.close_all()
        await self._server.wait_closed()
        self._server = None
        logger.info("Game server stopped")

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        connection = StreamConnection(writer)

        if self.game.registry.count() >= self.max_sessions:
            logger.warning(f"Rejecting {connection.peer}: server full ({self.max_sessions} sessions)")
            connection.write(format_line(SYSTEM_SENDER, SERVER_FULL))
            connection.close()
            await connection.wait_closed(CLOSE_WAIT_SECONDS)
            return

        session_id = self.game.on_accept(connection)
        logger.debug(f"Session {session_id}: connected from {connection.peer}")

        try:
            while True:
                raw = await reader.readline()
                if not raw:
                    logger.debug(f"Session {session_id}: connection closed by peer")
                    break

                line = raw.decode("utf-8", errors="replace").strip()
                if len(line) > MAX_LINE_LENGTH:
                    logger.warning(f"Session {session_id}: line too long ({len(line)} chars), truncated")
                    line = line[:MAX_LINE_LENGTH]

                self.game.on_line(session_id, line)
        except (ConnectionError, ValueError) as e:
            # ValueError: linha maior que o limite do StreamReader
            self.game.on_error(session_id, e)
        except Exception as e:
            logger.exception(f"Session {session_id}: unexpected error: {e}")
            self.game.on_error(session_id, e)
        finally:
            self.game.on_close(session_id)
            await connection.wait_closed(CLOSE_WAIT_SECONDS)
