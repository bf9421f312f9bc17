"""
Servidor de jogo multiplayer com protocolo de linhas
Sessões, comandos de chat e presença compartilhados entre conexões TCP
"""
from .server import GameServer
from .sessions import Session, SessionRegistry, SessionState

__all__ = ["GameServer", "Session", "SessionRegistry", "SessionState"]
