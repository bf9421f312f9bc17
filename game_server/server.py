"""
GameServer - Ciclo de vida das sessões
Reage aos eventos da camada de rede (accept, linha, close, erro) e ao reaper
"""
import time
from typing import Callable, Optional

from .broadcaster import Broadcaster
from .config import IDLE_CHECK_INTERVAL_SECONDS, IDLE_TIMEOUT_SECONDS
from .dispatcher import CommandDispatcher
from .reaper import IdleReaper
from .sessions import SessionRegistry, SessionState
from .transport import Connection
from . import messages
from .logger import get_logger

logger = get_logger("game_server")

SHUTDOWN_KICK_REASON = "server shutting down"


class GameServer:
    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        idle_timeout_seconds: float = IDLE_TIMEOUT_SECONDS,
        idle_check_interval_seconds: float = IDLE_CHECK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.clock = clock
        self.registry = registry or SessionRegistry(clock=clock)
        self.broadcaster = Broadcaster(self.registry)
        self.dispatcher = CommandDispatcher(self.registry, self.broadcaster, self.on_close)
        self.reaper = IdleReaper(
            self.registry,
            self.kick,
            threshold_seconds=idle_timeout_seconds,
            interval_seconds=idle_check_interval_seconds,
            clock=clock,
        )

    def on_accept(self, connection: Connection) -> str:
        """Nova conexão: registra, ativa, dá boas-vindas e avisa os outros"""
        session_id = self.registry.register(connection)
        session = self.registry.get(session_id)
        if session is None or not session.transition(SessionState.ACTIVE):
            return session_id

        self.broadcaster.send_to(session_id, messages.SYSTEM_SENDER, messages.WELCOME)
        self.broadcaster.broadcast_except(messages.SYSTEM_SENDER, messages.joined(session_id), session_id)
        return session_id

    def on_line(self, session_id: str, text: str) -> None:
        session = self.registry.get(session_id)
        if session is None or not session.is_active:
            logger.debug(f"Session {session_id}: ignoring line from inactive session")
            return

        session.touch(self.clock())
        self.dispatcher.dispatch(session, text.strip())

    def on_close(self, session_id: str) -> bool:
        """Remove a sessão (uma única vez) e anuncia a saída; False se já removida"""
        session = self.registry.remove(session_id)
        if session is None:
            return False

        session.transition(SessionState.CLOSING)
        self.registry.connections.close(session_id)
        session.transition(SessionState.CLOSED)

        logger.info(f"Session {session_id} closed ({session.label})")
        self.broadcaster.broadcast_all(messages.SYSTEM_SENDER, messages.left(session.label))
        return True

    def on_error(self, session_id: str, cause: BaseException) -> bool:
        logger.warning(f"Session {session_id}: connection error: {cause!r}")
        return self.on_close(session_id)

    def kick(self, session_id: str, reason: str) -> bool:
        """Avisa o jogador e encerra a sessão pelo mesmo caminho de desconexão"""
        session = self.registry.get(session_id)
        if session is None:
            return False

        logger.info(f"Kicking session {session_id}: {reason}")
        self.broadcaster.send_to(session_id, messages.SYSTEM_SENDER, messages.kicked(reason))
        return self.on_close(session_id)

    def close_all(self, reason: str = SHUTDOWN_KICK_REASON) -> int:
        closed = 0
        for session in self.registry.snapshot():
            if self.kick(session.id, reason):
                closed += 1
        if closed:
            logger.info(f"Closed {closed} sessions ({reason})")
        return closed
