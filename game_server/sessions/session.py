"""
Session - Representa um jogador conectado
Guarda apenas dados de identidade; a conexão pertence à ConnectionTable
"""
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .state import SessionState, can_transition, log_state_change
from ..logger import get_logger

logger = get_logger("session")

PLACEHOLDER_NAME = "Unnamed"


@dataclass
class Session:
    """Registro de um jogador: id, nome e última atividade"""

    id: str
    display_name: Optional[str] = None
    last_active_at: float = field(default_factory=time.monotonic)
    state: SessionState = SessionState.CONNECTING
    connected_at: datetime = field(default_factory=datetime.now)

    @property
    def label(self) -> str:
        """Nome exibido nas mensagens (id enquanto o nome não foi definido)"""
        return self.display_name if self.display_name is not None else self.id

    @property
    def presence_name(self) -> str:
        return self.display_name if self.display_name is not None else PLACEHOLDER_NAME

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def touch(self, now: Optional[float] = None):
        """Atualiza timestamp da última atividade (nunca retrocede)"""
        now = time.monotonic() if now is None else now
        if now > self.last_active_at:
            self.last_active_at = now

    def idle_for(self, now: Optional[float] = None) -> float:
        now = time.monotonic() if now is None else now
        return now - self.last_active_at

    def transition(self, new_state: SessionState) -> bool:
        """Avança o estado da sessão; transições inválidas são recusadas"""
        if not can_transition(self.state, new_state):
            logger.warning(f"Session {self.id}: refusing transition {self.state.value} -> {new_state.value}")
            return False
        previous_state = self.state
        self.state = new_state
        log_state_change(previous_state, new_state, f"session_{self.id}")
        return True
