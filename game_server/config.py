import os
from typing import Final

# Rede
TCP_HOST: Final[str] = os.environ.get("TCP_HOST", "0.0.0.0")
TCP_PORT: Final[int] = int(os.environ.get("TCP_PORT", 9090))
HTTP_HOST: Final[str] = os.environ.get("HTTP_HOST", "0.0.0.0")
HTTP_PORT: Final[int] = int(os.environ.get("HTTP_PORT", 9091))

# Sessões
MAX_SESSIONS: Final[int] = int(os.environ.get("MAX_SESSIONS", 1000))
IDLE_TIMEOUT_SECONDS: Final[float] = float(os.environ.get("IDLE_TIMEOUT_SECONDS", 300))
IDLE_CHECK_INTERVAL_SECONDS: Final[float] = float(os.environ.get("IDLE_CHECK_INTERVAL_SECONDS", 60))
CLOSE_WAIT_SECONDS: Final[float] = 5.0

# IO
WRITE_BUFFER_HIGH_WATER: Final[int] = int(os.environ.get("WRITE_BUFFER_HIGH_WATER", 64 * 1024))
MAX_LINE_LENGTH: Final[int] = 512

# Protocolo
COMMAND_PREFIX: Final[str] = "/"
MAX_NAME_LENGTH: Final[int] = 20

# Logs
LOG_LEVEL: Final[str] = os.environ.get("LOG_LEVEL", "DEBUG")
LOG_DIR: Final[str] = os.environ.get("LOG_DIR", "")

# Debug endpoints (secret header para proteger /api/logs/stream)
# Definir via variável de ambiente em produção. Vazio = sem proteção (dev mode).
DEBUG_API_SECRET: Final[str] = os.environ.get("DEBUG_API_SECRET", "")
