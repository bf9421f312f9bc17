"""
transport.py - Conexões dos jogadores
A ConnectionTable é dona das conexões; o resto do servidor só conhece o session_id
"""
import asyncio
import threading
from typing import Dict, Optional, Protocol

from .config import WRITE_BUFFER_HIGH_WATER
from .logger import get_logger

logger = get_logger("transport")


class Connection(Protocol):
    def write(self, data: bytes) -> bool:
        """Enfileira bytes para envio; False se a mensagem foi descartada"""
        ...

    def close(self) -> None:
        ...

    def is_closing(self) -> bool:
        ...


class StreamConnection:
    """Conexão TCP baseada em asyncio.StreamWriter (escrita nunca bloqueia)"""

    def __init__(self, writer: asyncio.StreamWriter, high_water: int = WRITE_BUFFER_HIGH_WATER):
        self.writer = writer
        self.high_water = high_water
        self.peer = writer.get_extra_info("peername")

    def is_saturated(self) -> bool:
        transport = self.writer.transport
        return transport.get_write_buffer_size() >= self.high_water

    def is_closing(self) -> bool:
        return self.writer.is_closing()

    def write(self, data: bytes) -> bool:
        if self.is_closing() or self.is_saturated():
            return False
        try:
            self.writer.write(data)
        except (ConnectionError, RuntimeError) as e:
            logger.debug(f"Write to {self.peer} failed: {e}")
            return False
        return True

    def close(self) -> None:
        if not self.writer.is_closing():
            self.writer.close()

    async def wait_closed(self, timeout: float) -> None:
        try:
            await asyncio.wait_for(self.writer.wait_closed(), timeout=timeout)
        except (asyncio.TimeoutError, ConnectionError) as e:
            logger.debug(f"Connection {self.peer} did not close cleanly: {e!r}")


class ConnectionTable:
    """Mapa session_id -> Connection; expõe write(id, bytes) e close(id)"""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._lock = threading.Lock()

    def attach(self, session_id: str, connection: Connection) -> None:
        with self._lock:
            self._connections[session_id] = connection

    def detach(self, session_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.pop(session_id, None)

    def get(self, session_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(session_id)

    def write(self, session_id: str, data: bytes) -> bool:
        connection = self.get(session_id)
        if connection is None:
            return False
        return connection.write(data)

    def close(self, session_id: str) -> bool:
        """Desanexa e fecha a conexão; False se já não havia conexão"""
        connection = self.detach(session_id)
        if connection is None:
            return False
        try:
            connection.close()
        except Exception as e:
            logger.warning(f"Session {session_id}: error closing connection: {e}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._connections.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
