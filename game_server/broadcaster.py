"""
Broadcaster - Entrega de mensagens aos jogadores
Melhor esforço: destino saturado ou fechado é ignorado, nunca bloqueia
"""
from typing import Optional

from .messages import format_line
from .sessions import SessionRegistry
from .logger import get_logger

logger = get_logger("broadcaster")


class Broadcaster:
    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def send_to(self, session_id: str, sender: str, text: str) -> bool:
        """Envia uma linha para uma sessão; False se foi descartada"""
        try:
            delivered = self.registry.connections.write(session_id, format_line(sender, text))
        except Exception as e:
            logger.warning(f"Session {session_id}: failed to deliver message: {e}")
            return False
        if not delivered:
            logger.debug(f"Session {session_id}: message from [{sender}] dropped")
        return delivered

    def broadcast_all(self, sender: str, text: str) -> int:
        return self.broadcast_except(sender, text, None)

    def broadcast_except(self, sender: str, text: str, excluded_id: Optional[str]) -> int:
        """Envia para todas as sessões do snapshot, exceto excluded_id"""
        delivered = 0
        for session in self.registry.snapshot():
            if session.id == excluded_id:
                continue
            if self.send_to(session.id, sender, text):
                delivered += 1
        return delivered
