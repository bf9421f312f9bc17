"""
Módulo de gerenciamento de sessões
Cada sessão representa um jogador conectado ao servidor
"""
from .session import Session, PLACEHOLDER_NAME
from .state import SessionState
from .registry import SessionRegistry

__all__ = ["Session", "SessionState", "SessionRegistry", "PLACEHOLDER_NAME"]
