"""
SessionRegistry - Tabela de jogadores online
Fonte única da verdade para "quem está conectado"
"""
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional

from .session import Session
from ..transport import Connection, ConnectionTable
from ..logger import get_logger

logger = get_logger("session_registry")


class SessionRegistry:
    """Registro de sessões protegido por lock (register/get/remove/snapshot)"""

    def __init__(
        self,
        connections: Optional[ConnectionTable] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.connections = connections or ConnectionTable()
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

        logger.info("SessionRegistry initialized")

    def _new_id(self) -> str:
        session_id = str(uuid.uuid4())
        while session_id in self._sessions:
            session_id = str(uuid.uuid4())
        return session_id

    def register(self, connection: Connection) -> str:
        """Cria uma sessão para a conexão e devolve o id gerado"""
        with self._lock:
            session_id = self._new_id()
            self._sessions[session_id] = Session(session_id, last_active_at=self.clock())
            self.connections.attach(session_id, connection)
            total = len(self._sessions)
        logger.info(f"🆕 Session registered: {session_id} (online: {total})")
        return session_id

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        """Remove atomicamente; apenas um chamador recebe a sessão"""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            total = len(self._sessions)
        if session is None:
            logger.debug(f"Session {session_id} already removed")
            return None
        logger.info(f"Session removed: {session_id} (online: {total})")
        return session

    def snapshot(self) -> List[Session]:
        """Cópia pontual das sessões, na ordem de conexão"""
        with self._lock:
            return list(self._sessions.values())

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def presence(self) -> dict:
        """Consulta somente-leitura usada pelos endpoints de monitoramento"""
        players = [
            {
                "id": session.id,
                "name": session.presence_name,
                "connected_at": session.connected_at.isoformat(),
            }
            for session in self.snapshot()
        ]
        return {"count": len(players), "players": players}

    def clear(self) -> None:
        with self._lock:
            total = len(self._sessions)
            self._sessions.clear()
        self.connections.clear()
        logger.info(f"Registry cleared ({total} sessions dropped)")

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions
