"""
commands.py - Interpretação das linhas enviadas pelos jogadores
Uma linha vira Chat ou Command (variante fechada + UNKNOWN)
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .config import COMMAND_PREFIX, MAX_NAME_LENGTH
from .messages import NAME_USAGE


class CommandKind(Enum):
    NAME = "name"
    LIST = "list"
    HELP = "help"
    QUIT = "quit"
    PING = "ping"
    INFO = "info"
    UNKNOWN = "unknown"


_KINDS_BY_TOKEN = {
    f"{COMMAND_PREFIX}{kind.value}": kind
    for kind in CommandKind
    if kind is not CommandKind.UNKNOWN
}

# Letras, dígitos, underscore e ideogramas CJK
_NAME_PATTERN = re.compile(r"[A-Za-z0-9_一-龥]+")


class InvalidNameError(ValueError):
    """Nome recusado; a mensagem é enviada ao jogador"""


@dataclass(frozen=True)
class Chat:
    text: str


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    token: str
    argument: Optional[str] = None


def parse_line(line: str) -> Union[Chat, Command]:
    """Separa comando e argumento (apenas no primeiro espaço)"""
    if not line.startswith(COMMAND_PREFIX):
        return Chat(line)

    parts = line.split(" ", 1)
    token = parts[0].lower()
    argument = parts[1] if len(parts) > 1 else None
    kind = _KINDS_BY_TOKEN.get(token, CommandKind.UNKNOWN)
    return Command(kind, token, argument)


def validate_display_name(raw: Optional[str]) -> str:
    """Valida e normaliza um nome; levanta InvalidNameError se inválido"""
    name = (raw or "").strip()
    if not name:
        raise InvalidNameError(NAME_USAGE)
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(f"Nickname cannot be longer than {MAX_NAME_LENGTH} characters")
    if not _NAME_PATTERN.fullmatch(name):
        raise InvalidNameError("Nickname may only contain letters, digits, underscores and Chinese characters")
    return name
