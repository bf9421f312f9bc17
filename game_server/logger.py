"""
logger.py - Logs estruturados (uma linha JSON por registro)
Todos os loggers do servidor ficam sob "game_server" e gravam no mesmo arquivo
"""
import json
import logging
import os

from datetime import datetime, timezone
from typing import Optional

from .config import LOG_DIR, LOG_LEVEL

PACKAGE_LOGGER = "game_server"

_file_handler: Optional[logging.FileHandler] = None


class JsonFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _log_dir() -> str:
    if LOG_DIR:
        return LOG_DIR
    # logs/ na raiz do projeto
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")


def configure_logging() -> logging.Logger:
    """Anexa o handler de arquivo ao logger do pacote (apenas na primeira chamada).

    Os registros continuam propagando para o root, então uvicorn e pytest
    seguem vendo tudo no terminal.
    """
    global _file_handler
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _file_handler is not None:
        return package_logger

    log_dir = _log_dir()
    os.makedirs(log_dir, exist_ok=True)
    started = datetime.now().strftime("%Y_%m_%d_%H_%M_%S")
    path = os.path.join(log_dir, f"game_server_{started}_{os.getpid()}.log")

    _file_handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    _file_handler.setFormatter(JsonFormatter())
    _file_handler.setLevel(logging.DEBUG)

    package_logger.addHandler(_file_handler)
    package_logger.setLevel(LOG_LEVEL.upper())
    return package_logger


def get_logger(area: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{PACKAGE_LOGGER}.{area}")


def get_current_log_file_path() -> Optional[str]:
    configure_logging()
    return _file_handler.baseFilename if _file_handler is not None else None
